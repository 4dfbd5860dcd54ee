# -*- coding: utf-8 -*-

"""Manages the settings of the library.

Settings are loaded from an optional ini file. If they don't exist, default
values are provided. All entries are read from the section ``[vow]``::

    [vow]
    iterative_drain = true
    log_ignored_settlements = false

Unlike most modules, the config is usable without being loaded: ``load()``
only overrides the defaults with the content of a file.
"""

import configparser
import logging
import os.path
from . import path as vow_path

_logger = logging.getLogger(__name__)

_SECTION = 'vow'

# Default config dict. Values not present in this dict are not valid.
# Each entry contains the type expected, and the default value.
_default_config = {
    # Run chained callbacks from a queue instead of recursive calls.
    'iterative_drain': {'type': bool, 'default': False},
    # Log a warning when resolve() or reject() is called on a settled Promise.
    'log_ignored_settlements': {'type': bool, 'default': False}
}

# Actual config parser
_config_parser = configparser.ConfigParser()
_config_parser.add_section(_SECTION)


def _get_config_file_path():
    return os.path.join(vow_path.get_config_dir(), 'vow.ini')


def load(file_path=None):
    """Find and load the config file.

    Args:
        file_path (str, optional): path of the ini file. By default, the file
            'vow.ini' in the user config directory is used.
    Returns:
        boolean: True if a file has been read; False otherwise.
    """
    file_path = file_path or _get_config_file_path()

    try:
        if not _config_parser.read(file_path):
            _logger.debug('No config file found at %s' % file_path)
            return False
    except configparser.Error:
        _logger.warning('Unable to parse config file: %s' % file_path,
                        exc_info=True)
        return False
    _logger.debug('Config file %s loaded.' % file_path)
    return True


def get(key):
    """Find and return a configuration entry

    If the entry is not specified, or has an invalid value, the default value
    is returned.

    Args:
        key (string): the entry key.
    Returns:
        The corresponding value found.
    Raises:
        KeyError: if the config entry doesn't exists.
    """
    if key not in _default_config:
        raise KeyError(key)
    try:
        if _default_config[key]['type'] is bool:
            return _config_parser.getboolean(_SECTION, key)
        elif _default_config[key]['type'] is int:
            return _config_parser.getint(_SECTION, key)
        else:
            return _config_parser.get(_SECTION, key)
    except configparser.NoOptionError:
        return _default_config[key]['default']
    except ValueError:
        _logger.warning('Invalid value for config "%s": %r'
                        % (key, _config_parser.get(_SECTION, key)))
        return _default_config[key]['default']


def set(key, value):
    """Set a configuration entry.

    The change is kept in memory. Call ``save()`` to write it in a file.

    Args:
        key (string): the entry key.
        value: the new value to set. It will be converted to string. None
            restores the default value.
    Raises:
        KeyError: if the config entry is not valid.
    """
    if key not in _default_config:
        raise KeyError(key)
    if value is None:
        _config_parser.remove_option(_SECTION, key)
    else:
        _config_parser.set(_SECTION, key, str(value))


def save(file_path=None):
    """Write the current settings in the config file.

    Args:
        file_path (str, optional): destination file. Default to 'vow.ini' in
            the user config directory.
    Returns:
        boolean: True if the file has been written.
    """
    if file_path is None:
        vow_path.ensure_dir_exists(vow_path.get_config_dir())
        file_path = _get_config_file_path()
    try:
        with open(file_path, 'w') as config_file:
            _config_parser.write(config_file)
        _logger.debug('Config file modified.')
        return True
    except IOError:
        _logger.warning('Unable to write in the config file', exc_info=True)
        return False


def reset():
    """Forget all settings; every entry goes back to its default value."""
    for key in _default_config:
        _config_parser.remove_option(_SECTION, key)
