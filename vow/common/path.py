# -*- coding: utf-8 -*-
"""Helpers function to find the vow folders."""

import errno
import logging
import os
import appdirs

_logger = logging.getLogger(__name__)


_appdirs = appdirs.AppDirs(appname='vow', appauthor=False)


def ensure_dir_exists(dir_path):
    """Try to create the folder if it not exists.

    If an error occurs, a warning log is sent and the error is ignored.
    """
    try:
        os.makedirs(dir_path)
        _logger.debug('Created missing folder "%s"' % dir_path)
    except OSError as e:
        if e.errno == errno.EEXIST and os.path.isdir(dir_path):
            pass
        else:
            _logger.warning('Unable to create the missing folder "%s"'
                            % dir_path, exc_info=True)


def get_config_dir():
    """Returns the directory path containing the vow config file.

    The folder is not created: vow only reads it, unless ``save()`` is called.
    """
    return _appdirs.user_config_dir
