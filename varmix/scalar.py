# Copyright (c) 2026 NASK. All rights reserved.

"""
The type-directed *scalar conversion dispatch*: converting a value of
a given type to a Variant (`ToVariant`) and a Variant to a value of a
given type (`FromVariant`).

For a given type (a class or a `typing` construct such as `list[int]`
or `Optional[str]`), a converter is selected (once; then it is cached)
according to the following priority order:

1. the type exposes a callable attribute `to_variant` (respectively:
   `from_variant`) -- e.g., a static method or a class method (note:
   record types that inherit any of the conversion mix-ins provided
   by `varmix.traits` fall into this category);

2. a converter has been registered for the type with the function
   `register_converter()`;

3. the type is one of those that a Variant is directly made of:
   `NoneType`, `bool`, `int`, `float`, `str` (or it is `Any` --
   then the converter dispatches on the runtime type of each value);

4. the type is a container type: `Optional[T]`, `list[T]`,
   `tuple[T, ...]`, `tuple[A, B, ...]`, `set[T]`, `frozenset[T]`
   (and their `typing`/`collections.abc` counterparts, such as
   `Sequence[T]`) -- all represented by the sequence Variant; or
   `dict[str, T]` (and `Mapping[str, T]` etc.) -- represented by the
   map Variant (note: the elements of a set are emitted in sorted
   order, provided that they are comparable with each other);

5. otherwise -- the type is not supported and `UnsupportedTypeError`
   is raised when the converter is being resolved.

>>> from typing import Optional
>>> to_variant([1, 2, 3])
[1, 2, 3]
>>> from_variant(list[int], [1, 2, 3])
[1, 2, 3]
>>> from_variant(dict[str, Optional[float]], {'a': 1, 'b': None})
{'a': 1.0, 'b': None}
>>> from_variant(list[int], [1, 'two', 3])
Traceback (most recent call last):
  ...
varmix.exceptions.ScalarConversionError: [1] unexpected type of 'two' (should be int)
"""

import collections.abc
import copy
import functools
import typing
from typing import (
    Any,
    Callable,
    Optional,
)

from varmix.class_helpers import (
    attr_repr,
    get_type_name,
)
from varmix.exceptions import (
    DataConversionError,
    ScalarConversionError,
    UnknownFieldError,
    UnsupportedTypeError,
)
from varmix.log_helpers import get_logger
from varmix.reflection import (
    get_payload_type,
    get_record_schema,
    is_optional,
    is_record_type,
    is_union,
)
from varmix.typing_helpers import (
    FromVariantFunc,
    ToVariantFunc,
    TypeHint,
    TypeSpec,
    Variant,
)
from varmix.variant import (
    SCALAR_VARIANT_TYPES,
    variant_map,
    variant_seq,
)


LOGGER = get_logger(__name__)


_NoneType = type(None)

# origin type -> factory of the decoded collection
_SEQUENCE_ORIGIN_TO_FACTORY = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Collection: list,
    collections.abc.Iterable: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}
_MAPPING_ORIGIN_TO_FACTORY = {
    dict: dict,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}

_type_to_registered_to_variant = {}     # type: dict[type, ToVariantFunc]
_type_to_registered_from_variant = {}   # type: dict[type, FromVariantFunc]


#
# Base classes
#

class _BaseScalarConverter(object):

    """
    The common base of `ToVariant` and `FromVariant`.

    A converter is a stateless (and, therefore, concurrency-safe)
    callable that takes exactly one argument and returns the result
    of the conversion.
    """

    def __init__(self, type_hint):
        # type: (TypeHint) -> None
        self.type_hint = type_hint

    __repr__ = attr_repr('type_hint')

    def __call__(self, data):
        """
        An abstract method: the main activity of the converter.

        Raises:
            * `DataConversionError` (typically, `ScalarConversionError`)
              -- to signal that the given data are wrong;
            * some other exception -- to signal a programming error.
        """
        raise NotImplementedError

    @staticmethod
    def verify_isinstance(value, type_spec, error_message=None):
        # type: (Any, TypeSpec, Optional[str]) -> None
        """
        Verify that `isinstance(value, type_spec)` is true. If not,
        raise `ScalarConversionError(error_message)` or -- if
        `error_message` is unspecified or specified as `None` -- a
        `ScalarConversionError` with an automatically generated
        `"unexpected type of..."`-like message.

        Note: `bool` values are never accepted as instances of other
        types (even though, technically, `bool` is a subclass of `int`).
        """
        if not isinstance(value, type_spec) or (
                isinstance(value, bool) and not _includes_bool(type_spec)):
            if error_message is None:
                if isinstance(type_spec, tuple):
                    error_message = 'unexpected type of {!a}'.format(value)
                else:
                    error_message = 'unexpected type of {!a} (should be {})'.format(
                        value,
                        get_type_name(type_spec))
            raise ScalarConversionError(error_message)


def _includes_bool(type_spec):
    # type: (TypeSpec) -> bool
    if isinstance(type_spec, tuple):
        return any(map(_includes_bool, type_spec))
    return issubclass(bool, type_spec) and type_spec is not int


class ToVariant(_BaseScalarConverter):

    """
    The base class of converters from values of a certain type to
    Variants.

    Use `ToVariant.for_type(<type hint>)` to get the appropriate
    converter (selected according to the rules described in the
    module's docs).
    """

    @staticmethod
    def for_type(type_hint):
        # type: (TypeHint) -> ToVariant
        return get_to_variant_converter(type_hint)

    def __call__(self, value):
        # type: (Any) -> Variant
        raise NotImplementedError


class FromVariant(_BaseScalarConverter):

    """
    The base class of converters from Variants to values of a certain
    type.

    Use `FromVariant.for_type(<type hint>)` to get the appropriate
    converter (selected according to the rules described in the
    module's docs).
    """

    @staticmethod
    def for_type(type_hint):
        # type: (TypeHint) -> FromVariant
        return get_from_variant_converter(type_hint)

    def __call__(self, variant):
        # type: (Variant) -> Any
        raise NotImplementedError


#
# Concrete `ToVariant` classes
#

class CustomToVariant(ToVariant):

    """Calls the `to_variant()` static/class method of the type."""

    def __init__(self, type_hint):
        super(CustomToVariant, self).__init__(type_hint)
        self._func = type_hint.to_variant

    def __call__(self, value):
        self.verify_isinstance(value, self.type_hint)
        variant = self._func(value)
        _verify_result_is_variant(variant, self._func)
        return variant


class RegisteredToVariant(ToVariant):

    """Calls the function registered with `register_converter()`."""

    def __init__(self, type_hint, func):
        # type: (type, ToVariantFunc) -> None
        super(RegisteredToVariant, self).__init__(type_hint)
        self._func = func

    def __call__(self, value):
        self.verify_isinstance(value, self.type_hint)
        variant = self._func(value)
        _verify_result_is_variant(variant, self._func)
        return variant


class PassingThruToVariant(ToVariant):

    """For the types of which Variants are directly made of."""

    def __call__(self, value):
        if self.type_hint is float:
            self.verify_isinstance(value, (int, float),
                                   'unexpected type of {!a} (should be float)'.format(value))
            return float(value)
        self.verify_isinstance(value, self.type_hint)
        return value


class RuntimeDispatchingToVariant(ToVariant):

    """For `Any`: dispatches on the runtime type of each value."""

    def __call__(self, value):
        return get_to_variant_converter(type(value))(value)


class OptionalToVariant(ToVariant):

    def __init__(self, type_hint):
        super(OptionalToVariant, self).__init__(type_hint)
        self._payload_converter = get_to_variant_converter(get_payload_type(type_hint))

    def __call__(self, value):
        if value is None:
            return None
        return self._payload_converter(value)


class SequenceToVariant(ToVariant):

    def __init__(self, type_hint, collection_type, element_type_hint=Any):
        # type: (TypeHint, type, TypeHint) -> None
        super(SequenceToVariant, self).__init__(type_hint)
        self._collection_type = collection_type
        self._element_converter = get_to_variant_converter(element_type_hint)

    def __call__(self, value):
        self.verify_isinstance(value, self._collection_type)
        if isinstance(value, (str, bytes, bytearray, collections.abc.Mapping)):
            raise ScalarConversionError(
                'unexpected type of {!a} (should be a collection of '
                'elements)'.format(value))
        if isinstance(value, collections.abc.Set):
            value = _sorted_if_possible(value)
        variant = []
        for index, element in enumerate(value):
            with DataConversionError.sublocation(index):
                variant.append(self._element_converter(element))
        return variant


class FixedTupleToVariant(ToVariant):

    def __init__(self, type_hint, element_type_hints):
        # type: (TypeHint, tuple) -> None
        super(FixedTupleToVariant, self).__init__(type_hint)
        self._element_converters = tuple(map(get_to_variant_converter, element_type_hints))

    def __call__(self, value):
        self.verify_isinstance(value, tuple)
        _verify_length(value, len(self._element_converters))
        variant = []
        for index, (converter, element) in enumerate(zip(self._element_converters, value)):
            with DataConversionError.sublocation(index):
                variant.append(converter(element))
        return variant


class MappingToVariant(ToVariant):

    def __init__(self, type_hint, value_type_hint=Any):
        # type: (TypeHint, TypeHint) -> None
        super(MappingToVariant, self).__init__(type_hint)
        self._value_converter = get_to_variant_converter(value_type_hint)

    def __call__(self, value):
        self.verify_isinstance(value, collections.abc.Mapping)
        variant = {}
        for key, val in value.items():
            if not isinstance(key, str):
                raise ScalarConversionError(
                    'unexpected non-string key ({!a}) in '
                    'the mapping'.format(key))
            with DataConversionError.sublocation(key):
                variant[key] = self._value_converter(val)
        return variant


#
# Concrete `FromVariant` classes
#

class CustomFromVariant(FromVariant):

    """Calls the `from_variant()` static/class method of the type."""

    def __init__(self, type_hint):
        super(CustomFromVariant, self).__init__(type_hint)
        self._func = type_hint.from_variant

    def __call__(self, variant):
        value = self._func(variant)
        _verify_result_is_instance(value, self.type_hint, self._func)
        return value


class RegisteredFromVariant(FromVariant):

    """Calls the function registered with `register_converter()`."""

    def __init__(self, type_hint, func):
        # type: (type, FromVariantFunc) -> None
        super(RegisteredFromVariant, self).__init__(type_hint)
        self._func = func

    def __call__(self, variant):
        value = self._func(variant)
        _verify_result_is_instance(value, self.type_hint, self._func)
        return value


class PassingThruFromVariant(FromVariant):

    """For the types of which Variants are directly made of."""

    def __call__(self, variant):
        if self.type_hint is float:
            self.verify_isinstance(variant, (int, float),
                                   'unexpected type of {!a} (should be float)'.format(variant))
            return float(variant)
        self.verify_isinstance(variant, self.type_hint)
        return variant


class AnyFromVariant(FromVariant):

    """For `Any`: the Variant is taken as is (well, as its deep copy)."""

    def __call__(self, variant):
        return copy.deepcopy(variant)


class OptionalFromVariant(FromVariant):

    def __init__(self, type_hint):
        super(OptionalFromVariant, self).__init__(type_hint)
        self._payload_converter = get_from_variant_converter(get_payload_type(type_hint))

    def __call__(self, variant):
        if variant is None:
            return None
        return self._payload_converter(variant)


class SequenceFromVariant(FromVariant):

    def __init__(self, type_hint, output_factory, element_type_hint=Any):
        # type: (TypeHint, Callable, TypeHint) -> None
        super(SequenceFromVariant, self).__init__(type_hint)
        self._output_factory = output_factory
        self._element_converter = get_from_variant_converter(element_type_hint)

    def __call__(self, variant):
        elements = []
        for index, element in enumerate(variant_seq(variant)):
            with DataConversionError.sublocation(index):
                elements.append(self._element_converter(element))
        try:
            return self._output_factory(elements)
        except TypeError as exc:
            # (e.g., unhashable elements of a set)
            raise ScalarConversionError(
                'cannot make {} from {!a} ({})'.format(
                    get_type_name(self.type_hint),
                    variant,
                    exc)) from exc


class FixedTupleFromVariant(FromVariant):

    def __init__(self, type_hint, element_type_hints):
        # type: (TypeHint, tuple) -> None
        super(FixedTupleFromVariant, self).__init__(type_hint)
        self._element_converters = tuple(map(get_from_variant_converter, element_type_hints))

    def __call__(self, variant):
        seq = variant_seq(variant)
        _verify_length(seq, len(self._element_converters))
        elements = []
        for index, (converter, element) in enumerate(zip(self._element_converters, seq)):
            with DataConversionError.sublocation(index):
                elements.append(converter(element))
        return tuple(elements)


class MappingFromVariant(FromVariant):

    def __init__(self, type_hint, output_factory, value_type_hint=Any):
        # type: (TypeHint, Callable, TypeHint) -> None
        super(MappingFromVariant, self).__init__(type_hint)
        self._output_factory = output_factory
        self._value_converter = get_from_variant_converter(value_type_hint)

    def __call__(self, variant):
        items = []
        for key, val in variant_map(variant).items():
            with DataConversionError.sublocation(key):
                items.append((key, self._value_converter(val)))
        return self._output_factory(items)


#
# Converter resolution
#

@functools.lru_cache(maxsize=None)
def get_to_variant_converter(type_hint):
    # type: (TypeHint) -> ToVariant
    """
    Get the (cached) `ToVariant` converter for the given type hint.

    Raises `UnsupportedTypeError` if no conversion is available.
    """
    converter = _resolve_converter(
        type_hint,
        custom_attr_name='to_variant',
        custom_converter_class=CustomToVariant,
        type_to_registered=_type_to_registered_to_variant,
        registered_converter_class=RegisteredToVariant,
        passing_thru_converter_class=PassingThruToVariant,
        any_converter_class=RuntimeDispatchingToVariant,
        optional_converter_class=OptionalToVariant,
        make_sequence_converter=(
            lambda origin, factory, element_type_hint: SequenceToVariant(
                type_hint,
                (origin if isinstance(origin, type) else collections.abc.Iterable),
                element_type_hint)),
        fixed_tuple_converter_class=FixedTupleToVariant,
        make_mapping_converter=(
            lambda factory, value_type_hint: MappingToVariant(type_hint, value_type_hint)))
    LOGGER.debug('resolved %r', converter)
    return converter


@functools.lru_cache(maxsize=None)
def get_from_variant_converter(type_hint):
    # type: (TypeHint) -> FromVariant
    """
    Get the (cached) `FromVariant` converter for the given type hint.

    Raises `UnsupportedTypeError` if no conversion is available.
    """
    converter = _resolve_converter(
        type_hint,
        custom_attr_name='from_variant',
        custom_converter_class=CustomFromVariant,
        type_to_registered=_type_to_registered_from_variant,
        registered_converter_class=RegisteredFromVariant,
        passing_thru_converter_class=PassingThruFromVariant,
        any_converter_class=AnyFromVariant,
        optional_converter_class=OptionalFromVariant,
        make_sequence_converter=(
            lambda origin, factory, element_type_hint: SequenceFromVariant(
                type_hint,
                factory,
                element_type_hint)),
        fixed_tuple_converter_class=FixedTupleFromVariant,
        make_mapping_converter=(
            lambda factory, value_type_hint: MappingFromVariant(
                type_hint,
                factory,
                value_type_hint)))
    LOGGER.debug('resolved %r', converter)
    return converter


def _resolve_converter(type_hint, *,
                       custom_attr_name,
                       custom_converter_class,
                       type_to_registered,
                       registered_converter_class,
                       passing_thru_converter_class,
                       any_converter_class,
                       optional_converter_class,
                       make_sequence_converter,
                       fixed_tuple_converter_class,
                       make_mapping_converter):
    origin = typing.get_origin(type_hint)
    args = typing.get_args(type_hint)
    is_plain_class = isinstance(type_hint, type) and origin is None

    # 1. custom `to_variant()`/`from_variant()`
    if is_plain_class and callable(getattr(type_hint, custom_attr_name, None)):
        return custom_converter_class(type_hint)

    # 2. registered
    if is_plain_class:
        for cls in type_hint.__mro__:
            func = type_to_registered.get(cls)
            if func is not None:
                return registered_converter_class(type_hint, func)

    # 3. directly Variant-compliant types (and `Any`)
    if type_hint is None:
        type_hint = _NoneType
    if type_hint in SCALAR_VARIANT_TYPES:
        return passing_thru_converter_class(type_hint)
    if type_hint is Any or type_hint is object:
        return any_converter_class(type_hint)

    # 4. containers
    if is_union(type_hint):
        if is_optional(type_hint) and not is_union(get_payload_type(type_hint)):
            return optional_converter_class(type_hint)
        raise UnsupportedTypeError(
            'unsupported type {} (unions other than `Optional[...]` '
            'are not supported)'.format(get_type_name(type_hint)))
    if is_plain_class:
        # (bare collection classes, including their subclasses)
        for base, factory in _MAPPING_ORIGIN_TO_FACTORY.items():
            if issubclass(type_hint, base):
                return make_mapping_converter(_get_factory(type_hint, factory), Any)
        for base, factory in _SEQUENCE_ORIGIN_TO_FACTORY.items():
            if issubclass(type_hint, base) and not issubclass(type_hint, (str, bytes, bytearray)):
                return make_sequence_converter(base, _get_factory(type_hint, factory), Any)
    elif origin is tuple:
        if not args:
            return make_sequence_converter(tuple, tuple, Any)
        if len(args) == 2 and args[1] is Ellipsis:
            return make_sequence_converter(tuple, tuple, args[0])
        if args == ((),):
            # (`tuple[()]`, i.e., the empty tuple type)
            return fixed_tuple_converter_class(type_hint, ())
        return fixed_tuple_converter_class(type_hint, args)
    elif origin in _MAPPING_ORIGIN_TO_FACTORY:
        key_type_hint, value_type_hint = (args or (str, Any))
        if key_type_hint not in (str, Any):
            raise UnsupportedTypeError(
                'unsupported type {} (map Variant keys must be '
                'strings)'.format(get_type_name(type_hint)))
        return make_mapping_converter(_MAPPING_ORIGIN_TO_FACTORY[origin], value_type_hint)
    elif origin in _SEQUENCE_ORIGIN_TO_FACTORY:
        [element_type_hint] = (args or (Any,))
        return make_sequence_converter(
            origin,
            _SEQUENCE_ORIGIN_TO_FACTORY[origin],
            element_type_hint)

    # 5. not supported
    if is_record_type(type_hint):
        raise UnsupportedTypeError(
            'unsupported type {} (a record type needs to inherit one of '
            'the conversion mix-ins, or to define the `{}()` static/class '
            'method)'.format(get_type_name(type_hint), custom_attr_name))
    raise UnsupportedTypeError(
        'unsupported type {} (no `{}()` static/class method, no registered '
        'converter, not a Variant-compliant type)'.format(
            get_type_name(type_hint),
            custom_attr_name))


def _get_factory(cls, default_factory):
    # type: (type, Callable) -> Callable
    if cls.__module__ == 'collections.abc' or getattr(cls, '__abstractmethods__', None):
        return default_factory
    return cls


def _sorted_if_possible(elements):
    try:
        return sorted(elements)
    except TypeError:
        return list(elements)


def _verify_length(seq, expected_length):
    if len(seq) != expected_length:
        raise ScalarConversionError(
            'expected a sequence of {} elements, got {} elements'.format(
                expected_length,
                len(seq)))


def _verify_result_is_variant(variant, func):
    if not isinstance(variant, SCALAR_VARIANT_TYPES + (list, dict)):
        raise TypeError(
            '{!a} returned {!a} which is not a Variant'.format(func, variant))


def _verify_result_is_instance(value, type_hint, func):
    if not isinstance(value, type_hint):
        raise TypeError(
            '{!a} returned {!a} which is not an instance of {}'.format(
                func,
                value,
                get_type_name(type_hint)))


#
# Public helpers
#

def register_converter(type_, *, to_variant=None, from_variant=None):
    # type: (type, Optional[ToVariantFunc], Optional[FromVariantFunc]) -> None
    """
    Register custom conversion functions for the given type (and for
    its subclasses that do not provide their own).

    >>> import datetime
    >>> register_converter(
    ...     datetime.date,
    ...     to_variant=datetime.date.isoformat,
    ...     from_variant=datetime.date.fromisoformat)
    >>> to_variant(datetime.date(2026, 10, 19))
    '2026-10-19'
    >>> from_variant(list[datetime.date], ['2026-10-19'])
    [datetime.date(2026, 10, 19)]
    >>> unregister_converter(datetime.date)

    Note: functions registered for a type take precedence over the
    built-in conversions, but not over the `to_variant()`/`from_variant()`
    static/class methods defined by the type itself.
    """
    if not isinstance(type_, type) or typing.get_origin(type_) is not None:
        raise TypeError('{!a} is not a (non-generic) class'.format(type_))
    if to_variant is None and from_variant is None:
        raise TypeError('at least one of the arguments `to_variant` '
                        'and `from_variant` needs to be given')
    if to_variant is not None:
        _type_to_registered_to_variant[type_] = to_variant
    if from_variant is not None:
        _type_to_registered_from_variant[type_] = from_variant
    _clear_converter_caches()
    LOGGER.debug('registered custom conversion for %r', type_)


def unregister_converter(type_):
    # type: (type) -> None
    _type_to_registered_to_variant.pop(type_, None)
    _type_to_registered_from_variant.pop(type_, None)
    _clear_converter_caches()


def _clear_converter_caches():
    get_to_variant_converter.cache_clear()
    get_from_variant_converter.cache_clear()


def to_variant(value):
    # type: (Any) -> Variant
    """
    Convert the given value to a Variant (dispatching on its type).

    >>> to_variant({'a': (1, 2.5), 'b': None})
    {'a': [1, 2.5], 'b': None}
    """
    return get_to_variant_converter(type(value))(value)


def from_variant(type_hint, variant):
    # type: (TypeHint, Variant) -> Any
    """
    Convert the given Variant to a value of the given type.

    >>> from_variant(tuple[int, str], [42, 'spam'])
    (42, 'spam')
    """
    return get_from_variant_converter(type_hint)(variant)


def from_variant_into(record, field_name, variant):
    # type: (Any, str, Variant) -> None
    """
    Convert the given Variant to a value of the type of the specified
    field of the given record, and assign the result to that field.

    Raises `UnknownFieldError` if the record has no such field.
    """
    field = get_record_schema(type(record)).get_field(field_name)
    if field is None:
        raise UnknownFieldError(field_name=field_name)
    with DataConversionError.sublocation(field_name):
        value = get_from_variant_converter(field.type_hint)(variant)
    field.set(record, value)
