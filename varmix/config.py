# Copyright (c) 2026 NASK. All rights reserved.

"""
Simple configuration-related tools: reading a configuration section
from an INI-like file (with `configparser`) and converting its option
values using a table of named *converters*.

>>> import io
>>> section = read_config_section(io.StringIO(
...     '[my_stuff]\\n'
...     'some_flag = yes\\n'
...     'some_number = 42\\n'), 'my_stuff')
>>> section
{'some_flag': 'yes', 'some_number': '42'}
>>> convert_config_section(
...     section,
...     opt_name_to_converter_spec={'some_flag': 'bool', 'some_number': 'int'})
{'some_flag': True, 'some_number': 42}
"""

import configparser
import io
import os
from collections.abc import Mapping
from typing import (
    Any,
    Callable,
    Union,
)

from varmix.common_helpers import (
    ascii_str,
    str_to_bool,
)
from varmix.log_helpers import get_logger


LOGGER = get_logger(__name__)


OptConverter = Callable[[str], Any]

BASIC_CONVERTERS = {
    'str': str,
    'bool': str_to_bool,
    'int': int,
    'float': float,
}


class ConfigError(Exception):

    """
    Raised when the configuration is missing or erroneous.

    Its `str()` representation is intended to be a message suitable
    to be presented to the administrator of the application.
    """

    def __str__(self):
        return 'Config error: {}'.format(ascii_str(super(ConfigError, self).__str__()))


def read_config_section(path_or_file, sect_name):
    # type: (Union[str, os.PathLike, io.TextIOBase], str) -> dict[str, str]
    """
    Read the specified section of an INI-like configuration file, and
    return its options as a `{<option name>: <raw string value>}` dict.

    `path_or_file` can be a path or an open text file object.

    Raises `ConfigError` if the file cannot be read/parsed, or if it
    does not contain the specified section.
    """
    parser = configparser.ConfigParser(
        default_section='__varmix_no_default_section__',
        interpolation=None,
        inline_comment_prefixes=(';',))
    try:
        if isinstance(path_or_file, (str, os.PathLike)):
            with open(path_or_file, encoding='utf-8') as f:
                parser.read_file(f)
        else:
            parser.read_file(path_or_file)
    except (OSError, configparser.Error) as exc:
        raise ConfigError('could not read the configuration from {!a} ({})'.format(
            path_or_file, exc)) from exc
    if not parser.has_section(sect_name):
        raise ConfigError('section [{}] not found in the configuration'.format(sect_name))
    section = dict(parser.items(sect_name))
    LOGGER.debug('read configuration section [%s]: %a', sect_name, section)
    return section


def convert_config_section(opt_name_to_raw_value,
                           opt_name_to_converter_spec,
                           converters=None):
    # type: (Mapping[str, str], Mapping[str, str], Mapping[str, OptConverter]) -> dict[str, Any]
    """
    Convert the given raw (string) option values, using the converters
    specified (by their names) in `opt_name_to_converter_spec`.

    Options which are not present in `opt_name_to_converter_spec` are
    illegal. Options that are absent are just omitted in the result.

    `converters` -- a mapping of converter names to converter callables
    (if not specified, `BASIC_CONVERTERS` is used).

    Raises `ConfigError` if an illegal option is encountered or a value
    cannot be converted.
    """
    if converters is None:
        converters = BASIC_CONVERTERS
    illegal = sorted(set(opt_name_to_raw_value).difference(opt_name_to_converter_spec))
    if illegal:
        raise ConfigError('illegal options: {}'.format(', '.join(map(ascii, illegal))))
    result = {}
    for opt_name, raw_value in opt_name_to_raw_value.items():
        converter_spec = opt_name_to_converter_spec[opt_name]
        try:
            converter = converters[converter_spec]
        except KeyError:
            raise ConfigError('unknown converter spec {!a} (for option {!a})'.format(
                converter_spec, opt_name)) from None
        try:
            result[opt_name] = converter(raw_value)
        except (ValueError, TypeError) as exc:
            raise ConfigError('error when converting the value of option {!a} '
                              '({!a}): {}'.format(opt_name, raw_value, exc)) from exc
    return result
