# Copyright (c) 2026 NASK. All rights reserved.

"""
The *conversion mix-ins* (traits) for record types (dataclasses):

* `Var` -- strict one-to-one mapping between a record and a map
  Variant (each field <-> the key being the field's name);

* `VarDef` -- a defaults-aware mapping (absent keys are filled with
  default values or left absent for optional fields; the output can
  omit some keys, according to the record type's `VarDefPolicy`);

* `VarDefExplicit` -- like `VarDef` with the stock policy, but
  additionally requiring that the record type's `defaults()` covers
  exactly all fields;

* `UpdateFromVar` -- partial in-place update of a record from a map
  Variant;

* `UpdateFromOpt` -- partial in-place update of a record from another
  record (an *options* record, typically having optional fields);

* `EqualityComparison` -- member-wise `==`/`!=`.

>>> import dataclasses
>>> from typing import Optional
>>> @dataclasses.dataclass
... class Item(Var, UpdateFromVar):
...     name: str
...     tags: list[str]
...     size: Optional[int]
...
>>> Item.to_variant(Item('spam', ['a', 'b'], None))
{'name': 'spam', 'tags': ['a', 'b'], 'size': None}
>>> item = Item.from_variant({'name': 'ham', 'tags': [], 'size': 3})
>>> item
Item(name='ham', tags=[], size=3)
>>> item.update_var({'tags': ['x']})
>>> item
Item(name='ham', tags=['x'], size=3)
>>> Item.from_variant({'name': 'ham', 'size': 3})
Traceback (most recent call last):
  ...
varmix.exceptions.MissingFieldError: 'tags' not found in map
>>> Item.from_variant({'name': 'ham', 'tags': ['x', 42], 'size': 3})
Traceback (most recent call last):
  ...
varmix.exceptions.ScalarConversionError: [tags.1] unexpected type of 42 (should be str)
"""

import collections.abc
import copy
import functools
import logging
import typing
from typing import Any

from varmix.class_helpers import get_class_name
from varmix.defaults import (
    check_complete_coverage,
    check_default_types,
    check_has_defaults,
    check_orphan_keys,
    get_default_value,
    get_defaults,
    has_default_value,
)
from varmix.exceptions import (
    DataConversionError,
    FieldMismatchError,
    MissingFieldError,
    UnknownFieldError,
)
from varmix.log_helpers import get_logger
from varmix.policy import VarDefPolicy
from varmix.reflection import (
    get_payload_type,
    get_record_schema,
    is_optional,
    is_record_type,
)
from varmix.scalar import (
    get_from_variant_converter,
    get_to_variant_converter,
)
from varmix.typing_helpers import (
    TypeHint,
    Variant,
    VariantMap,
)
from varmix.variant import variant_map


LOGGER = get_logger(__name__)

_STOCK_VAR_DEF_POLICY = VarDefPolicy()


_NoneType = type(None)


def _verify_is_record_instance(record_class, record):
    if not isinstance(record, record_class):
        raise TypeError('{!a} is not an instance of {}'.format(
            record,
            get_class_name(record_class)))


def _log_ignored_keys(record_class, input_map):
    if LOGGER.isEnabledFor(logging.DEBUG):
        field_names = get_record_schema(record_class).field_names
        ignored = [key for key in input_map if key not in field_names]
        if ignored:
            LOGGER.debug('%s: ignored unknown keys: %a',
                         get_class_name(record_class), ignored)


#
# Whole-record conversion mix-ins
#

class Var(object):

    """
    The mix-in that provides strict (one-to-one) conversion between
    a record and a map Variant.

    * `to_variant(record)` -- returns a `dict` whose keys are exactly
      the field names (in their declaration order); an absent optional
      field (i.e., `None`) is represented by `None`;

    * `from_variant(variant)` -- the Variant needs to be a map that
      contains the keys of *all* fields (otherwise `MissingFieldError`
      is raised); other keys are ignored.
    """

    @classmethod
    def to_variant(cls, record):
        # type: (Any) -> VariantMap
        _verify_is_record_instance(cls, record)
        result = {}
        for field in get_record_schema(cls):
            converter = get_to_variant_converter(field.type_hint)
            with DataConversionError.sublocation(field.name):
                result[field.name] = converter(field.get(record))
        return result

    @classmethod
    def from_variant(cls, variant):
        # type: (Variant) -> Any
        input_map = variant_map(variant)
        kwargs = {}
        for field in get_record_schema(cls):
            try:
                item = input_map[field.name]
            except KeyError:
                raise MissingFieldError(field_name=field.name) from None
            converter = get_from_variant_converter(field.type_hint)
            with DataConversionError.sublocation(field.name):
                kwargs[field.name] = converter(item)
        _log_ignored_keys(cls, input_map)
        return cls(**kwargs)


class VarDef(object):

    """
    The mix-in that provides defaults-aware conversion between a record
    and a map Variant.

    The behavior is configured by a `VarDefPolicy` (see its docs), which
    can be specified as a class keyword argument:

        @dataclasses.dataclass
        class MyRecord(VarDef, policy=VarDefPolicy(serialize_default_value=False)):
            ...

    (or, alternatively, by setting the `var_def_policy` class
    attribute); it is inherited by subclasses.

    Default values are taken from the `defaults()` static/class method
    of the record type (if any; see: `varmix.defaults`).

    `to_variant(record)` -- for each field (in declaration order):

    * an optional field being absent (`None`) is omitted;
    * an optional field being present is encoded;
    * a non-optional field is omitted if its value is equal to its
      default value, provided that `serialize_default_value` is false;
    * a non-optional field is omitted if its value is an empty
      container (e.g., an empty `list` or `str`), provided that
      `serialize_empty_container` is false;
    * otherwise the field is encoded.

    `from_variant(variant)` -- for each field (in declaration order):

    * if the key is present, its value is decoded (`None` for an
      optional field means: absent);
    * if the key is absent and the field has a default value, that
      value is assigned (as a fresh copy converted to the field's type);
    * if the key is absent and the field is optional, it is absent;
    * otherwise `MissingFieldError` is raised.

    Unknown keys are ignored.

    >>> import dataclasses
    >>> from typing import Optional
    >>> from varmix.defaults import NoDefault
    >>> @dataclasses.dataclass
    ... class Rec(VarDef, policy=VarDefPolicy(serialize_default_value=False)):
    ...     a: int
    ...     b: Optional[int]
    ...
    ...     @staticmethod
    ...     def defaults():
    ...         return {'a': 42, 'b': NoDefault}
    ...
    >>> Rec.from_variant({})
    Rec(a=42, b=None)
    >>> Rec.from_variant({'a': 1, 'b': None})
    Rec(a=1, b=None)
    >>> Rec.to_variant(Rec(a=42, b=None))
    {}
    >>> Rec.to_variant(Rec(a=1, b=9))
    {'a': 1, 'b': 9}
    """

    var_def_policy = _STOCK_VAR_DEF_POLICY   # type: VarDefPolicy

    def __init_subclass__(cls, /, policy=None, **kwargs):
        super(VarDef, cls).__init_subclass__(**kwargs)
        if policy is not None:
            if not isinstance(policy, VarDefPolicy):
                raise TypeError('policy={!a} is not a {} instance'.format(
                    policy,
                    VarDefPolicy.__qualname__))
            cls.var_def_policy = policy

    @classmethod
    def to_variant(cls, record):
        # type: (Any) -> VariantMap
        _verify_is_record_instance(cls, record)
        cls._verify_record_definition()
        policy = cls._get_policy()
        result = {}
        for field in get_record_schema(cls):
            value = field.get(record)
            if field.is_optional:
                if value is None:
                    continue
                converter = get_to_variant_converter(field.payload_type)
            else:
                converter = get_to_variant_converter(field.type_hint)
            with DataConversionError.sublocation(field.name):
                field_variant = converter(value)
            if not field.is_optional:
                if (not policy.serialize_default_value
                      and cls._is_equal_to_default(field.name, value)):
                    continue
                if (not policy.serialize_empty_container
                      and _is_empty_container(value)):
                    continue
            result[field.name] = field_variant
        return result

    @classmethod
    def from_variant(cls, variant):
        # type: (Variant) -> Any
        cls._verify_record_definition()
        input_map = variant_map(variant)
        kwargs = {}
        for field in get_record_schema(cls):
            if field.name in input_map:
                converter = get_from_variant_converter(field.type_hint)
                with DataConversionError.sublocation(field.name):
                    kwargs[field.name] = converter(input_map[field.name])
            elif has_default_value(cls, field.name):
                kwargs[field.name] = get_default_value(cls, field.name)
            elif field.is_optional:
                kwargs[field.name] = None
            else:
                raise MissingFieldError(
                    '{!a} not found in map, and its default value is '
                    'not provided'.format(field.name),
                    field_name=field.name)
        _log_ignored_keys(cls, input_map)
        return cls(**kwargs)

    @classmethod
    def _get_policy(cls):
        # type: () -> VarDefPolicy
        return cls.var_def_policy

    @classmethod
    def _is_equal_to_default(cls, field_name, value):
        return (has_default_value(cls, field_name)
                and get_defaults(cls)[field_name] == value)

    @classmethod
    def _verify_record_definition(cls):
        _verify_var_def_record_class(cls)


def _is_empty_container(value):
    return isinstance(value, collections.abc.Collection) and not value


# (successfully verified record classes; like the schema caches, kept
# for the lifetime of the process)
_var_def_verified_classes = set()


def _verify_var_def_record_class(record_class):
    if record_class in _var_def_verified_classes:
        return
    check_default_types(record_class)
    field_names = get_record_schema(record_class).field_names
    orphan_keys = [key for key in get_defaults(record_class) if key not in field_names]
    if orphan_keys:
        LOGGER.warning('%s.defaults() contains keys which are not field '
                       'names (they will be ignored): %a',
                       get_class_name(record_class), orphan_keys)
    _var_def_verified_classes.add(record_class)


class VarDefExplicit(VarDef):

    """
    The mix-in that provides the same conversions as `VarDef` (with the
    stock policy), requiring that the record type's `defaults()` is
    *explicit*, i.e.:

    * the record type defines `defaults()` (otherwise:
      `DefaultMissingError`);
    * each field name is a key in `defaults()` (otherwise:
      `DefaultMissingError`) -- the `NoDefault` marker can be used
      for fields that have no default value;
    * each key in `defaults()` is a field name (otherwise:
      `DefaultKeyMismatchError`);
    * each default value is convertible to the type of its field
      (otherwise: `DefaultTypeMismatchError`).

    The checks are made by the `check()` class method, which is invoked
    automatically by `to_variant()` and `from_variant()` (its successful
    outcome is cached per class).
    """

    def __init_subclass__(cls, /, **kwargs):
        if ('policy' in kwargs
              or cls.var_def_policy != _STOCK_VAR_DEF_POLICY):
            raise TypeError('{} does not accept a custom policy'.format(
                VarDefExplicit.__qualname__))
        super(VarDefExplicit, cls).__init_subclass__(**kwargs)

    @classmethod
    def check(cls):
        # type: () -> None
        if cls in _var_def_explicit_checked_classes:
            return
        check_has_defaults(cls)
        check_complete_coverage(cls)
        check_orphan_keys(cls)
        check_default_types(cls)
        _var_def_explicit_checked_classes.add(cls)
        LOGGER.debug('%s.defaults() checked successfully', get_class_name(cls))

    @classmethod
    def _get_policy(cls):
        # type: () -> VarDefPolicy
        return _STOCK_VAR_DEF_POLICY

    @classmethod
    def _verify_record_definition(cls):
        cls.check()


_var_def_explicit_checked_classes = set()


#
# In-place update mix-ins
#

class UpdateFromVar(object):

    """
    The mix-in that provides in-place update of a record from a map
    Variant: `record.update_var(variant)`.

    Each key of the map needs to be the name of a field (otherwise
    `UnknownFieldError` is raised); its value is decoded using the
    field's type. Fields whose names are not keys of the map are left
    unchanged.

    All values are decoded before any assignment is made, so if an
    exception is raised the record is left unchanged.
    """

    def update_var(self, variant):
        # type: (Variant) -> None
        schema = get_record_schema(type(self))
        decoded = []
        for key, item in variant_map(variant).items():
            field = schema.get_field(key)
            if field is None:
                raise UnknownFieldError(field_name=key)
            converter = get_from_variant_converter(field.type_hint)
            with DataConversionError.sublocation(key):
                decoded.append((field, converter(item)))
        for field, value in decoded:
            field.set(self, value)


class UpdateFromOpt(object):

    """
    The mix-in that provides in-place update of a record from another
    record (an *options* record): `record.update_opt(opt)`.

    For each field of the options record, the same-named field of the
    updated record is:

    * if the options record's field is optional -- set to a copy of
      its value only if that value is present (not `None`);
    * otherwise -- set to a copy of its value.

    An `int` value copied to a `float` field is converted to `float`.

    The compatibility of the pair of types (each field name of the
    options type needs to be a field name of the updated type, and the
    field's type needs to be assignable to the type of the corresponding
    field) is verified once per pair (otherwise `FieldMismatchError`
    is raised).

    The options type can be declared as a class keyword argument
    (`class MyRecord(UpdateFromOpt, opt=MyOptions)`); then other objects
    are rejected by `update_opt()`.

    >>> import dataclasses
    >>> from typing import Optional
    >>> @dataclasses.dataclass
    ... class Opt:
    ...     n: Optional[str] = None
    ...
    >>> @dataclasses.dataclass
    ... class Rec(UpdateFromOpt, opt=Opt):
    ...     n: str
    ...     v: int
    ...
    >>> rec = Rec(n='x', v=1)
    >>> rec.update_opt(Opt())
    >>> rec
    Rec(n='x', v=1)
    >>> rec.update_opt(Opt(n='y'))
    >>> rec
    Rec(n='y', v=1)
    """

    update_opt_class = None   # type: type

    def __init_subclass__(cls, /, opt=None, **kwargs):
        super(UpdateFromOpt, cls).__init_subclass__(**kwargs)
        if opt is not None:
            if not isinstance(opt, type):
                raise TypeError('opt={!a} is not a class'.format(opt))
            cls.update_opt_class = opt

    def update_opt(self, opt):
        # type: (Any) -> None
        opt_class = type(self).update_opt_class
        if opt_class is not None and not isinstance(opt, opt_class):
            raise TypeError('{!a} is not an instance of {}'.format(
                opt,
                get_class_name(opt_class)))
        field_pairs = _get_opt_field_pairs(type(self), type(opt))
        for opt_field, record_field, copy_value in field_pairs:
            value = opt_field.get(opt)
            if opt_field.is_optional and value is None:
                continue
            record_field.set(self, copy_value(value))


@functools.lru_cache(maxsize=None)
def _get_opt_field_pairs(record_class, opt_class):
    if not is_record_type(opt_class):
        raise FieldMismatchError(
            '{!a} is not a record type (cannot be used to update '
            '{})'.format(opt_class, get_class_name(record_class)))
    record_schema = get_record_schema(record_class)
    field_pairs = []
    for opt_field in get_record_schema(opt_class):
        record_field = record_schema.get_field(opt_field.name)
        if record_field is None:
            raise FieldMismatchError(
                '{!a} (a field of {}) is not a field of {}'.format(
                    opt_field.name,
                    get_class_name(opt_class),
                    get_class_name(record_class)))
        if not _is_assignable(opt_field.payload_type, record_field.type_hint):
            raise FieldMismatchError(
                'the type of {!a} in {} ({}) is not assignable to the '
                'type of {!a} in {} ({})'.format(
                    opt_field.name,
                    get_class_name(opt_class),
                    opt_field.type_name,
                    record_field.name,
                    get_class_name(record_class),
                    record_field.type_name))
        if (opt_field.payload_type is int
              and get_payload_type(record_field.type_hint) is float):
            copy_value = float
        else:
            copy_value = copy.deepcopy
        field_pairs.append((opt_field, record_field, copy_value))
    LOGGER.debug('%s can be updated from %s (fields: %a)',
                 get_class_name(record_class),
                 get_class_name(opt_class),
                 [opt_field.name for opt_field, _, _ in field_pairs])
    return tuple(field_pairs)


def _is_assignable(source_type, target_type):
    # type: (TypeHint, TypeHint) -> bool
    if source_type == target_type or target_type is Any or target_type is object:
        return True
    if is_optional(target_type):
        return (source_type is _NoneType
                or _is_assignable(get_payload_type(source_type),
                                  get_payload_type(target_type)))
    if target_type is float and source_type is int:
        return True
    if (isinstance(source_type, type) and typing.get_origin(source_type) is None
          and isinstance(target_type, type) and typing.get_origin(target_type) is None):
        return issubclass(source_type, target_type)
    return False


#
# Equality mix-in
#

class EqualityComparison(object):

    """
    The mix-in that provides member-wise `==` and `!=` for records of
    the same type (for records whose classes are declared with
    `@dataclasses.dataclass(eq=False)`, as otherwise the `__eq__()`
    generated by `dataclasses` takes precedence).

    >>> import dataclasses
    >>> @dataclasses.dataclass(eq=False)
    ... class Pair(EqualityComparison):
    ...     a: int
    ...     b: list[int]
    ...
    >>> Pair(1, [2]) == Pair(1, [2]), Pair(1, [2]) != Pair(1, [3])
    (True, True)
    """

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(field.get(self) == field.get(other)
                   for field in get_record_schema(type(self)))

    def __ne__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return any(field.get(self) != field.get(other)
                   for field in get_record_schema(type(self)))

    __hash__ = None
