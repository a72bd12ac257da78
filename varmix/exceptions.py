# Copyright (c) 2026 NASK. All rights reserved.

"""
The *varmix* library's public exception classes.

There are two families of them:

* `DataConversionError` and its subclasses -- raised when the
  converted *data* are wrong (e.g., a required map key is missing,
  or a Variant's payload is not decodable to the field's type);

* `RecordSpecError` and its subclasses -- raised when a *record
  definition* is wrong (e.g., its `defaults()` mapping contains a
  key that is not a field name, or a field's type is not supported
  by the conversion machinery); these errors are *not* related to
  any particular input data.
"""

import collections
import contextlib
from collections.abc import (
    Iterable,
    Mapping,
)
from typing import (
    Generator,
    List,
    Optional,
    Union,
)

from varmix.class_helpers import attr_repr
from varmix.common_helpers import ascii_str


NameOrIndex = Union[str, int]


#
# Data-related errors
#

class DataConversionError(ValueError):

    """
    An exception that is supposed to be raised by converters when
    input data are wrong/invalid. It is expected (though not strictly
    required) that a user-friendly error message will be passed
    as the sole argument passed to the constructor.

    An additional feature: the `sublocation()` class method that
    returns a (single-use) context manager, which should be used by
    converters when entering conversion of some nested stuff whose
    *relative location* (within its parent structure) is a key/name
    (`str`) or an index (`int`). The method should be called with that
    *relative location* (`str` or `int`) as the sole argument; or with
    an iterable collection of such relative locations (`str`/`int`
    objects) if there is an ambiguity which one is the offending
    one (warning: such a collection must *not* be a mapping or a
    `bytes`/`bytearray`);

    thanks to that the `str()` representation of any `DataConversionError`
    raised within one or more `with` blocks of such context managers
    will be automatically prepended with a *location path* pointing to
    the problematic data item in the whole converted structure.

    For example:

    >>> def to_integers(input_list):
    ...     result = []
    ...     for index, value in enumerate(input_list):
    ...         with DataConversionError.sublocation(index):
    ...             if not isinstance(value, int):
    ...                 raise DataConversionError(
    ...                     '{!a} is not an integer number'.format(value))
    ...             result.append(value)
    ...     return result
    ...
    >>> def flatten(some_input_dict):
    ...     result = []
    ...     for name, sublist in sorted(some_input_dict.items()):
    ...         with DataConversionError.sublocation(name):
    ...             result.extend(to_integers(sublist))
    ...     return result
    ...
    >>> flatten({'bar': [0, 1, 2], 'foo': [15, 101]})
    [0, 1, 2, 15, 101]

    >>> flatten({'bar': [0, 1, 'spam'], 'foo': [15, 101]})   # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    varmix.exceptions.DataConversionError: [bar.2] 'spam' is not an integer number

    An example with an iterable collection of name/index alternatives:

    >>> with DataConversionError.sublocation(['spam', 0, 'foo']):
    ...     with DataConversionError.sublocation([]):  # <- empty collection will be skipped
    ...         with DataConversionError.sublocation(['ham']):  # <- single element like scalar
    ...             raise DataConversionError('Aha!')
    ...
    Traceback (most recent call last):
      ...
    varmix.exceptions.DataConversionError: [{spam,0,foo}.ham] Aha!
    """

    def __init__(self, *args):
        super(DataConversionError, self).__init__(*args)
        self._location_path = collections.deque()

    @classmethod
    @contextlib.contextmanager
    def sublocation(cls, name_or_index_or_alternatives_iter, /):
        # type: (Union[NameOrIndex, Iterable[NameOrIndex]]) -> Generator[None, None, None]
        path_item = cls._get_ready_path_item(name_or_index_or_alternatives_iter)
        try:
            yield
        except DataConversionError as exc:
            if path_item is not None:
                exc._location_path.appendleft(path_item)
            raise

    @property
    def location_path(self):
        # type: () -> List[Union[NameOrIndex, List[NameOrIndex]]]
        return list(self._location_path)

    @classmethod
    def _get_ready_path_item(cls, name_or_index_or_alternatives_iter):
        # type: (...) -> Optional[Union[NameOrIndex, List[NameOrIndex]]]
        if isinstance(name_or_index_or_alternatives_iter, (str, int)):
            path_item = name_or_index_or_alternatives_iter
            cls._verify_is_name_or_index(path_item)
        else:
            if isinstance(name_or_index_or_alternatives_iter, (Mapping, bytes, bytearray)):
                # (A `Mapping` or `bytes`/`bytearray`? Let's raise an error!)
                cls._verify_is_name_or_index(name_or_index_or_alternatives_iter)
            path_item = list(name_or_index_or_alternatives_iter)
            for name_or_index in path_item:
                cls._verify_is_name_or_index(name_or_index)
            if len(path_item) == 1:
                path_item = path_item[0]
            elif not path_item:
                path_item = None
        return path_item

    @staticmethod
    def _verify_is_name_or_index(name_or_index):
        # type: (NameOrIndex) -> None
        if not isinstance(name_or_index, (str, int)):
            raise TypeError('{!a} is neither a name (`str`) nor an '
                            'index (`int`)'.format(name_or_index))

    __repr__ = attr_repr('args', '_location_path')

    def __str__(self):
        return self._get_location_prefix() + super(DataConversionError, self).__str__()

    def _get_location_prefix(self):
        if self._location_path:
            path_as_ascii_str = '.'.join(map(self._format_path_item, self._location_path))
            return '[{}] '.format(path_as_ascii_str)
        return ''

    def _format_path_item(self, path_item):
        # type: (Union[NameOrIndex, List[NameOrIndex]]) -> str
        if isinstance(path_item, (str, int)):
            return ascii_str(path_item)
        # This is a list of multiple name/index alternatives, so
        # let's present them in the `{foo,bar,spam}`-like form.
        assert (isinstance(path_item, list)
                and all(isinstance(alt, (str, int)) for alt in path_item)
                and len(path_item) > 1), 'bug in implementation of DataConversionError?!'
        return '{' + ','.join(map(ascii_str, path_item)) + '}'


class _FieldNameErrorMixin(object):

    """
    Mix-in for *field-name*-related exception classes.

    Each instance of such a class:

    * should be initialized with the `field_name` keyword-only
      argument (a string) -- and, optionally, with a custom message
      as the sole positional argument (if not given, a message is
      generated using the `default_message_pattern` attribute);

    * exposes that argument as the `field_name` attribute (for
      possible later inspection).
    """

    #: (overridable in subclasses)
    default_message_pattern = '{!a}: erroneous field'

    def __init__(self, *args, field_name):
        self.field_name = field_name
        if not args:
            args = (self.default_message_pattern.format(field_name),)
        super(_FieldNameErrorMixin, self).__init__(*args)


class MissingFieldError(_FieldNameErrorMixin, DataConversionError):

    """
    Raised when a map being decoded lacks the key of a field which
    has no default value (and is not optional, if the particular
    conversion mix-in treats optional fields as omittable).

    >>> exc = MissingFieldError(field_name='s')
    >>> exc.field_name
    's'
    >>> str(exc)
    "'s' not found in map"
    """

    default_message_pattern = '{!a} not found in map'


class UnknownFieldError(_FieldNameErrorMixin, DataConversionError):

    """
    Raised when a map used to update a record contains a key that is
    not the name of any field of that record.

    >>> exc = UnknownFieldError(field_name='z')
    >>> exc.field_name
    'z'
    >>> str(exc)
    "'z' no such member"
    """

    default_message_pattern = '{!a} no such member'


class ScalarConversionError(DataConversionError):

    """
    Raised when a Variant's payload cannot be converted to the
    required type (or when a value being encoded does not match
    its declared type).
    """


#
# Record-definition-related errors
#

class RecordSpecError(TypeError):

    """
    The base class of errors in record definitions (as opposed to
    errors in converted data).

    Such errors are detected when a record class is used for the first
    time (or when its conversion traits are checked explicitly) and
    they do not depend on the input data.
    """


class UnsupportedTypeError(RecordSpecError):
    """Raised when no conversion is available for a type."""


class DefaultMissingError(RecordSpecError):
    """
    Raised when a record class lacks `defaults()` or lacks an entry
    in it, whereas the used conversion mix-in requires that.
    """


class DefaultKeyMismatchError(RecordSpecError):
    """Raised when `defaults()` contains a key which is not a field name."""


class DefaultTypeMismatchError(RecordSpecError):
    """Raised when a default value is not convertible to the field's type."""


class FieldMismatchError(RecordSpecError):
    """
    Raised when an *options* record cannot be used to update a record
    (a field name is unknown to the updated record, or a field's type
    is not assignable to the type of the corresponding field).
    """
