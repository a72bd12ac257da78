# Copyright (c) 2026 NASK. All rights reserved.

"""
*varmix* -- conversion mix-ins between dataclass-based records and
*Variants* (dynamic value trees made of `None`, `bool`, `int`,
`float`, `str`, `list` and `dict` with `str` keys).
"""

from varmix.defaults import (
    NoDefault,

    has_defaults,
    present,
    no_default,
    has_default_value,
)
from varmix.exceptions import (
    DataConversionError,
    MissingFieldError,
    UnknownFieldError,
    ScalarConversionError,

    RecordSpecError,
    UnsupportedTypeError,
    DefaultMissingError,
    DefaultKeyMismatchError,
    DefaultTypeMismatchError,
    FieldMismatchError,
)
from varmix.policy import (
    VarDefPolicy,
    load_policy_config,
)
from varmix.scalar import (
    ToVariant,
    FromVariant,

    to_variant,
    from_variant,
    from_variant_into,
    register_converter,
    unregister_converter,
)
from varmix.traits import (
    Var,
    VarDef,
    VarDefExplicit,
    UpdateFromVar,
    UpdateFromOpt,
    EqualityComparison,
)


__all__ = [
    'NoDefault',
    'has_defaults',
    'present',
    'no_default',
    'has_default_value',

    'DataConversionError',
    'MissingFieldError',
    'UnknownFieldError',
    'ScalarConversionError',
    'RecordSpecError',
    'UnsupportedTypeError',
    'DefaultMissingError',
    'DefaultKeyMismatchError',
    'DefaultTypeMismatchError',
    'FieldMismatchError',

    'VarDefPolicy',
    'load_policy_config',

    'ToVariant',
    'FromVariant',
    'to_variant',
    'from_variant',
    'from_variant_into',
    'register_converter',
    'unregister_converter',

    'Var',
    'VarDef',
    'VarDefExplicit',
    'UpdateFromVar',
    'UpdateFromOpt',
    'EqualityComparison',
]
