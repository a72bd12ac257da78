# Copyright (c) 2026 NASK. All rights reserved.

from collections.abc import Callable
from typing import (
    Any,
    Union,
)


Variant = Union['VariantScalar', 'VariantCollection']
VariantScalar = Union[str, int, float, bool, None]
VariantMap = dict[str, Variant]
VariantSeq = list[Variant]
VariantCollection = Union[VariantMap, VariantSeq]

TypeSpec = Union[type, tuple['TypeSpec', ...]]  # type of `isinstance()/issubclass()`'s second arg
TypeHint = Any                                  # a class or a `typing` construct such as `list[int]`

ToVariantFunc = Callable[[Any], Variant]
FromVariantFunc = Callable[[Variant], Any]
