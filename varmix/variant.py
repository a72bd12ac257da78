# Copyright (c) 2026 NASK. All rights reserved.

"""
The *Variant* -- a dynamically typed, self-describing value tree.

Here a Variant is just a plain Python object being one of:

* `None` (the *empty*/*null* Variant),
* `bool`,
* `int`,
* `float`,
* `str`,
* `list` of Variants (the *sequence* Variant),
* `dict` mapping `str` keys to Variants (the *map* Variant; its
  iteration order is the insertion order).

This module provides the few predicates and accessors the conversion
machinery needs.

>>> is_variant({'a': [1, 2.5, None], 'b': {'c': True}})
True
>>> is_variant({'a': (1, 2)})
False
>>> is_empty(None), is_empty(0), is_empty({})
(True, False, False)
>>> variant_map({'i': 7})
{'i': 7}
>>> variant_map([1, 2])
Traceback (most recent call last):
  ...
varmix.exceptions.ScalarConversionError: expected a map Variant, got [1, 2]
"""

from collections.abc import Mapping

from varmix.exceptions import ScalarConversionError
from varmix.typing_helpers import (
    Variant,
    VariantMap,
    VariantSeq,
)


SCALAR_VARIANT_TYPES = (type(None), bool, int, float, str)


def is_empty(variant):
    # type: (Variant) -> bool
    return variant is None


def is_map(variant):
    # type: (Variant) -> bool
    return isinstance(variant, Mapping)


def is_seq(variant):
    # type: (Variant) -> bool
    return isinstance(variant, list)


def is_variant(obj):
    # type: (object) -> bool
    """
    Check (recursively) whether the given object is a Variant.
    """
    # Note: iterative (not recursive) traversal -- to avoid hitting the
    # recursion limit for deeply nested structures.
    pending = [obj]
    while pending:
        obj = pending.pop()
        if isinstance(obj, SCALAR_VARIANT_TYPES):
            continue
        if isinstance(obj, list):
            pending.extend(obj)
        elif isinstance(obj, dict):
            if not all(isinstance(key, str) for key in obj):
                return False
            pending.extend(obj.values())
        else:
            return False
    return True


def variant_map(variant):
    # type: (Variant) -> VariantMap
    """
    Get the map payload of the given Variant.

    Raises `ScalarConversionError` if the Variant is not a map (or if
    it contains a non-`str` key).
    """
    if not is_map(variant):
        raise ScalarConversionError(
            'expected a map Variant, got {!a}'.format(variant))
    for key in variant:
        if not isinstance(key, str):
            raise ScalarConversionError(
                'unexpected non-string key ({!a}) in '
                'the map Variant'.format(key))
    return variant


def variant_seq(variant):
    # type: (Variant) -> VariantSeq
    """
    Get the sequence payload of the given Variant.

    Raises `ScalarConversionError` if the Variant is not a sequence.

    Note: apart from `list`, also a `tuple` is accepted (as it is a
    common result of hand-made Variant-like structures); a `str` is
    never treated as a sequence.
    """
    if not isinstance(variant, (list, tuple)):
        raise ScalarConversionError(
            'expected a sequence Variant, got {!a}'.format(variant))
    return variant
