# Copyright (c) 2026 NASK. All rights reserved.

import collections
import logging
import logging.config
import os.path
import sys
import traceback


TOPLEVEL_PACKAGES = ('varmix',)


def get_logger(name=None):
    """
    Like logging.getLogger(...) but replacing '__main__' with a sensible name.

    For example, if the script path is '/whatever/varmix/tools/foo.py'
    get_logger('__main__') is equivalent to logging.getLogger('varmix.tools.foo').
    """
    if name == '__main__':
        # try to get the script path from __main__.__file__
        script_path = getattr(sys.modules['__main__'], '__file__', None)
        if not script_path:
            # or, if __main__ does not have a non-blank __file__ attribute,
            # extract the script path from sys.argv...
            script_path = sys.argv[0]
        # strip off the filename extension...
        remaining = os.path.splitext(script_path)[0]
        # ..and pop path name segments up to
        # (and including) the varmix toplevel package name
        aggregated_segments = collections.deque()
        while True:
            remaining, segment = os.path.split(remaining)
            segment = segment.replace('.', 'D')  # just in case of '.' or '..'
            aggregated_segments.appendleft(segment)
            if segment in TOPLEVEL_PACKAGES or remaining in ('', '/'):
                break
        name = '.'.join(aggregated_segments)
    return logging.getLogger(name)


_LOGGER = get_logger(__name__)

_loaded_configuration_paths = set()


def configure_logging(*file_paths):
    """
    Load logging configuration from the first readable of the given
    `logging.config.fileConfig()`-compliant files.

    Each path is loaded not more than once (subsequent attempts are
    ignored, with a warning). If none of the files can be opened,
    `RuntimeError` is raised.

    Note: the *varmix* library itself never calls this function --
    configuring logging is the application's business.
    """
    if not file_paths:
        raise TypeError('at least one file path needs to be given')
    for path in file_paths:
        if path in _loaded_configuration_paths:
            _LOGGER.warning('ignored attempt to load logging configuration '
                            'file %a that has already been used', path)
            return
        try:
            _try_reading(path)
        except OSError:
            continue
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
        except Exception:
            raise RuntimeError('error while configuring logging, '
                               'using settings from configuration file {0!a}:\n{1}'
                               .format(path, traceback.format_exc())) from None
        _LOGGER.info('logging configuration loaded from %a', path)
        _loaded_configuration_paths.add(path)
        return
    raise RuntimeError('logging configuration not loaded: '
                       'could not open any of the files: {0}'
                       .format(', '.join(map(ascii, file_paths))))


def _try_reading(path):
    open(path).close()
