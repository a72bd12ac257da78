# Copyright (c) 2026 NASK. All rights reserved.

import dataclasses
from collections.abc import Mapping

from varmix.config import (
    convert_config_section,
    read_config_section,
)


DEFAULT_POLICY_SECT_NAME = 'varmix_policy'


@dataclasses.dataclass(frozen=True)
class VarDefPolicy:

    """
    The configuration of `VarDef`-based conversion.

    * `serialize_empty_container` (default: `True`) -- if false,
      fields whose values are empty containers (e.g., an empty list
      or string) are omitted when converting records to Variants;

    * `serialize_default_value` (default: `True`) -- if false,
      fields whose values are equal to their default values (see
      `varmix.defaults`) are omitted when converting records to
      Variants.

    Note: optional fields are not affected by the policy (when absent,
    they are always omitted).

    >>> VarDefPolicy.from_config_section({'serialize_default_value': 'no'})
    VarDefPolicy(serialize_empty_container=True, serialize_default_value=False)
    """

    serialize_empty_container: bool = True
    serialize_default_value: bool = True

    # (not a dataclass field, as it has no type annotation)
    CONFIG_OPT_NAME_TO_CONVERTER_SPEC = {
        'serialize_empty_container': 'bool',
        'serialize_default_value': 'bool',
    }

    def __post_init__(self):
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, bool):
                raise TypeError('{}: {!a} is not a bool'.format(field.name, value))

    @classmethod
    def from_config_section(cls, opt_name_to_raw_value):
        # type: (Mapping[str, str]) -> VarDefPolicy
        """
        Make a policy from the raw (string) option values of a
        configuration section.

        Raises `varmix.config.ConfigError` if the options are invalid.
        """
        kwargs = convert_config_section(
            opt_name_to_raw_value,
            cls.CONFIG_OPT_NAME_TO_CONVERTER_SPEC)
        return cls(**kwargs)


def load_policy_config(path_or_file, sect_name=DEFAULT_POLICY_SECT_NAME):
    """
    Load a `VarDefPolicy` from the specified section (by default:
    `[varmix_policy]`) of an INI-like configuration file.

    Raises `varmix.config.ConfigError` if the configuration cannot be
    read or is invalid.
    """
    return VarDefPolicy.from_config_section(read_config_section(path_or_file, sect_name))
