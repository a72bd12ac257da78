# Copyright (c) 2026 NASK. All rights reserved.

"""
The *reflection oracle*: for a record type (a `dataclasses`-based
class), it provides the ordered collection of field descriptors
(name + type + accessors).

>>> import dataclasses
>>> from typing import Optional
>>> @dataclasses.dataclass
... class Point:
...     x: int
...     y: int
...     label: Optional[str] = None
...
>>> schema = get_record_schema(Point)
>>> schema.field_names
('x', 'y', 'label')
>>> schema.name_to_field['label'].is_optional
True
>>> schema.name_to_field['label'].payload_type
<class 'str'>
>>> schema.name_to_field['x'].get(Point(1, 2))
1
"""

import dataclasses
import functools
import types
import typing
from typing import (
    Any,
    Iterator,
    Optional,
    Union,
)

from pyramid.decorator import reify

from varmix.class_helpers import (
    attr_repr,
    get_class_name,
    get_type_name,
)
from varmix.exceptions import RecordSpecError
from varmix.log_helpers import get_logger
from varmix.typing_helpers import TypeHint


LOGGER = get_logger(__name__)


_NoneType = type(None)
_UNION_TYPES = (Union, getattr(types, 'UnionType', Union))   # (`X | Y` needs Python 3.10+)


#
# Type hint inspection helpers
#

def is_record_type(obj):
    # type: (Any) -> bool
    """
    Is the given object a record type (i.e., a dataclass, *not* its instance)?

    >>> @dataclasses.dataclass
    ... class A:
    ...     a: int
    ...
    >>> is_record_type(A), is_record_type(A(1)), is_record_type(int)
    (True, False, False)
    """
    return isinstance(obj, type) and dataclasses.is_dataclass(obj)


def is_union(type_hint):
    # type: (TypeHint) -> bool
    return typing.get_origin(type_hint) in _UNION_TYPES


def is_optional(type_hint):
    # type: (TypeHint) -> bool
    """
    Is the given type hint an *optional* one (`Optional[T]`)?

    >>> is_optional(Optional[int]), is_optional(Union[None, str, int])
    (True, True)
    >>> is_optional(int), is_optional(Union[int, str]), is_optional(Any)
    (False, False, False)
    """
    return is_union(type_hint) and _NoneType in typing.get_args(type_hint)


def get_payload_type(type_hint):
    # type: (TypeHint) -> TypeHint
    """
    Get the *payload* type of an optional type hint (for other type
    hints -- just return the given type hint).

    >>> get_payload_type(Optional[int])
    <class 'int'>
    >>> get_payload_type(str)
    <class 'str'>
    """
    if not is_optional(type_hint):
        return type_hint
    non_none_args = tuple(arg for arg in typing.get_args(type_hint)
                          if arg is not _NoneType)
    if len(non_none_args) == 1:
        return non_none_args[0]
    return Union[non_none_args]


#
# Field descriptors and record schemas
#

class FieldDescriptor(object):

    """
    The descriptor of a record field: its `name`, its (resolved)
    `type_hint` and the accessors: `get(record)` and `set(record,
    value)`.

    The `is_optional` attribute tells whether the field's type is
    `Optional[...]`; `payload_type` is the type of the value if it
    is present (for non-optional fields it is just `type_hint`).
    """

    def __init__(self, name, type_hint):
        # type: (str, TypeHint) -> None
        self.name = name
        self.type_hint = type_hint
        self.is_optional = is_optional(type_hint)
        self.payload_type = get_payload_type(type_hint)

    __repr__ = attr_repr('name', 'type_hint')

    @property
    def type_name(self):
        # type: () -> str
        return get_type_name(self.type_hint)

    def get(self, record):
        # type: (Any) -> Any
        return getattr(record, self.name)

    def set(self, record, value):
        # type: (Any, Any) -> None
        setattr(record, self.name, value)


class RecordSchema(object):

    """
    The ordered collection of `FieldDescriptor` objects of a record
    type -- the fields that take part in the record's `__init__()`,
    in their declaration order.

    Do not instantiate this class directly -- use the function
    `get_record_schema()` (it caches the schemas).
    """

    def __init__(self, record_class):
        # type: (type) -> None
        if not is_record_type(record_class):
            raise RecordSpecError(
                '{!a} is not a record type (a record type needs '
                'to be a dataclass)'.format(record_class))
        self.record_class = record_class
        self.fields = tuple(self._generate_field_descriptors(record_class))

    __repr__ = attr_repr('record_class', 'field_names')

    def __iter__(self):
        # type: () -> Iterator[FieldDescriptor]
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

    @reify
    def field_names(self):
        return tuple(field.name for field in self.fields)

    @reify
    def name_to_field(self):
        return {field.name: field for field in self.fields}

    @reify
    def record_class_name(self):
        return get_class_name(self.record_class)

    def get_field(self, name):
        # type: (str) -> Optional[FieldDescriptor]
        return self.name_to_field.get(name)

    @staticmethod
    def _generate_field_descriptors(record_class):
        # type: (type) -> Iterator[FieldDescriptor]
        try:
            type_hints = typing.get_type_hints(record_class)
        except NameError as exc:
            raise RecordSpecError(
                'cannot resolve type hints of the record type '
                '{!a} ({})'.format(record_class, exc)) from exc
        for field in dataclasses.fields(record_class):
            if not field.init:
                continue
            yield FieldDescriptor(field.name, type_hints.get(field.name, field.type))


@functools.lru_cache(maxsize=None)
def get_record_schema(record_class):
    # type: (type) -> RecordSchema
    """
    Get the (cached) `RecordSchema` of the given record type.

    Raises `RecordSpecError` if the given object is not a record type
    (or if its type hints cannot be resolved).
    """
    schema = RecordSchema(record_class)
    LOGGER.debug('record schema prepared: %r', schema)
    return schema
