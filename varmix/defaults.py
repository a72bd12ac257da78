# Copyright (c) 2026 NASK. All rights reserved.

"""
The *defaults descriptor* of record types, and related predicates and
checks.

A record type may define a callable class attribute `defaults` (e.g.,
a class method or a static method) that returns a mapping: field name
-> default value (convertible to the type of the field) or the
`NoDefault` marker (which explicitly states that the field has *no*
default value).

>>> import dataclasses
>>> from typing import Optional
>>> @dataclasses.dataclass
... class Rec:
...     a: int
...     b: Optional[int]
...
...     @staticmethod
...     def defaults():
...         return {'a': 42, 'b': NoDefault}
...
>>> has_defaults(Rec)
True
>>> present(Rec, 'a'), present(Rec, 'b'), present(Rec, 'c')
(True, True, False)
>>> no_default(Rec, 'a'), no_default(Rec, 'b')
(False, True)
>>> has_default_value(Rec, 'a'), has_default_value(Rec, 'b'), has_default_value(Rec, 'c')
(True, False, False)
"""

from collections.abc import Mapping
from typing import Any

from varmix.class_helpers import get_class_name
from varmix.exceptions import (
    DataConversionError,
    DefaultKeyMismatchError,
    DefaultMissingError,
    DefaultTypeMismatchError,
    RecordSpecError,
)
from varmix.reflection import get_record_schema
from varmix.scalar import (
    get_from_variant_converter,
    get_to_variant_converter,
)


class _NoDefaultMeta(type):
    def __repr__(cls):
        return cls.__name__


class NoDefault(metaclass=_NoDefaultMeta):

    """
    The marker of "no default value" for entries of `defaults()`.

    Either the class itself or any its instance can be used.

    >>> NoDefault
    NoDefault
    >>> NoDefault()
    NoDefault
    """

    def __repr__(self):
        return 'NoDefault'


def is_no_default_marker(value):
    # type: (Any) -> bool
    return value is NoDefault or isinstance(value, NoDefault)


#
# Predicates

def has_defaults(record_class):
    # type: (type) -> bool
    """Does the record type define the `defaults()` callable?"""
    return callable(getattr(record_class, 'defaults', None))


def get_defaults(record_class):
    # type: (type) -> Mapping[str, Any]
    """
    Get the mapping returned by `defaults()` of the record type (or an
    empty `dict` if the record type does not define `defaults()`).

    Raises `RecordSpecError` if `defaults()` returns a non-mapping.
    """
    if not has_defaults(record_class):
        return {}
    defaults = record_class.defaults()
    if not isinstance(defaults, Mapping):
        raise RecordSpecError(
            '{}.defaults() returned {!a} which is not a mapping'.format(
                get_class_name(record_class),
                defaults))
    return defaults


def present(record_class, name):
    # type: (type, str) -> bool
    """Is `name` a key in `defaults()` of the record type?"""
    return name in get_defaults(record_class)


def no_default(record_class, name):
    # type: (type, str) -> bool
    """Is the entry for `name` in `defaults()` the `NoDefault` marker?"""
    defaults = get_defaults(record_class)
    return name in defaults and is_no_default_marker(defaults[name])


def has_default_value(record_class, name):
    # type: (type, str) -> bool
    """Does the field `name` have a default value in the record type?"""
    return (has_defaults(record_class)
            and present(record_class, name)
            and not no_default(record_class, name))


def get_default_value(record_class, name):
    # type: (type, str) -> Any
    """
    Get a *fresh* copy of the default value of the field `name`,
    converted to the type of that field.

    The default value is converted to a Variant and back (using the
    field's type), so that the returned object is never shared between
    records (even if the default is mutable) and is of the field's
    type (e.g., `0` specified as the default of a `float` field
    becomes `0.0`).

    Raises:
        `KeyError` if the field has no default value;
        `DefaultTypeMismatchError` if the default value is not
        convertible to the type of the field.
    """
    if not has_default_value(record_class, name):
        raise KeyError(name)
    field = get_record_schema(record_class).get_field(name)
    default = get_defaults(record_class)[name]
    if field is None:
        raise DefaultKeyMismatchError(
            '{}.defaults() contains {!a} which is not a field '
            'name'.format(get_class_name(record_class), name))
    try:
        variant = get_to_variant_converter(field.type_hint)(default)
        return get_from_variant_converter(field.type_hint)(variant)
    except (DataConversionError, RecordSpecError) as exc:
        raise DefaultTypeMismatchError(
            'the default value {!a} provided in {}.defaults() for {!a} '
            'does not match the type of the field ({}): {}'.format(
                default,
                get_class_name(record_class),
                name,
                field.type_name,
                exc)) from exc


#
# Checks

def check_has_defaults(record_class):
    # type: (type) -> None
    if not has_defaults(record_class):
        raise DefaultMissingError(
            'the record type {} must define the `defaults()` '
            'static/class method'.format(get_class_name(record_class)))


def check_orphan_keys(record_class):
    # type: (type) -> None
    """
    Check that all keys of `defaults()` are field names.

    Raises `DefaultKeyMismatchError` if that is not the case.
    """
    schema = get_record_schema(record_class)
    unknown = [key for key in get_defaults(record_class)
               if schema.get_field(key) is None]
    if unknown:
        raise DefaultKeyMismatchError(
            'there are unknown fields in {}.defaults(): {}'.format(
                get_class_name(record_class),
                ', '.join(map(ascii, unknown))))


def check_complete_coverage(record_class):
    # type: (type) -> None
    """
    Check that each field name is present in `defaults()`.

    Raises `DefaultMissingError` if that is not the case.
    """
    defaults = get_defaults(record_class)
    for field in get_record_schema(record_class):
        if field.name not in defaults:
            raise DefaultMissingError(
                '{!a} not present in {}.defaults()'.format(
                    field.name,
                    get_class_name(record_class)))


def check_default_types(record_class):
    # type: (type) -> None
    """
    Check that each default value (except `NoDefault` markers) is
    convertible to the type of its field.

    Raises `DefaultTypeMismatchError` if that is not the case.
    """
    schema = get_record_schema(record_class)
    for name in get_defaults(record_class):
        if schema.get_field(name) is not None and has_default_value(record_class, name):
            get_default_value(record_class, name)
