# Copyright (c) 2026 NASK. All rights reserved.

import dataclasses
import unittest
from typing import Optional

from unittest_expander import (
    expand,
    foreach,
    param,
)

from varmix.defaults import (
    NoDefault,
    check_complete_coverage,
    check_default_types,
    check_has_defaults,
    check_orphan_keys,
    get_default_value,
    get_defaults,
    has_default_value,
    has_defaults,
    is_no_default_marker,
    no_default,
    present,
)
from varmix.exceptions import (
    DefaultKeyMismatchError,
    DefaultMissingError,
    DefaultTypeMismatchError,
    RecordSpecError,
)


@dataclasses.dataclass
class _WithDefaults:
    a: int
    b: Optional[int]
    c: list[str]
    d: float

    @staticmethod
    def defaults():
        return {'a': 42, 'b': NoDefault, 'c': ['x'], 'd': 1}


@dataclasses.dataclass
class _WithoutDefaults:
    a: int


@dataclasses.dataclass
class _WithOrphan:
    a: int

    @classmethod
    def defaults(cls):
        return {'a': NoDefault(), 'zzz': 1}


@dataclasses.dataclass
class _WithBadDefault:
    a: int
    b: str

    @staticmethod
    def defaults():
        return {'a': 1.5, 'b': NoDefault}


@expand
class Test__predicates(unittest.TestCase):

    @foreach(
        param(_WithDefaults, True),
        param(_WithOrphan, True),
        param(_WithoutDefaults, False),
    )
    def test__has_defaults(self, record_class, expected_result):
        self.assertIs(has_defaults(record_class), expected_result)

    @foreach(
        param('a', True, False, True),
        param('b', True, True, False),
        param('c', True, False, True),
        param('nonexistent', False, False, False),
    )
    def test_field_predicates(self, name, expected_present,
                              expected_no_default, expected_has_default_value):
        self.assertIs(present(_WithDefaults, name), expected_present)
        self.assertIs(no_default(_WithDefaults, name), expected_no_default)
        self.assertIs(has_default_value(_WithDefaults, name), expected_has_default_value)

    def test_predicates_without_defaults(self):
        self.assertFalse(present(_WithoutDefaults, 'a'))
        self.assertFalse(no_default(_WithoutDefaults, 'a'))
        self.assertFalse(has_default_value(_WithoutDefaults, 'a'))

    def test_no_default_instance(self):
        self.assertTrue(no_default(_WithOrphan, 'a'))
        self.assertFalse(has_default_value(_WithOrphan, 'a'))

    @foreach(
        param(NoDefault, True),
        param(NoDefault(), True),
        param(None, False),
        param('NoDefault', False),
    )
    def test__is_no_default_marker(self, value, expected_result):
        self.assertIs(is_no_default_marker(value), expected_result)


class Test__get_defaults(unittest.TestCase):

    def test(self):
        self.assertEqual(get_defaults(_WithDefaults)['a'], 42)
        self.assertEqual(get_defaults(_WithoutDefaults), {})

    def test_non_mapping(self):
        @dataclasses.dataclass
        class Rec:
            a: int

            @staticmethod
            def defaults():
                return [('a', 1)]

        with self.assertRaises(RecordSpecError):
            get_defaults(Rec)


class Test__get_default_value(unittest.TestCase):

    def test_converted_to_field_type(self):
        value = get_default_value(_WithDefaults, 'd')
        self.assertEqual(value, 1.0)
        self.assertIs(type(value), float)

    def test_fresh_copy(self):
        value1 = get_default_value(_WithDefaults, 'c')
        value2 = get_default_value(_WithDefaults, 'c')
        self.assertEqual(value1, ['x'])
        self.assertIsNot(value1, value2)

    def test_no_default_value(self):
        for name in ('b', 'nonexistent'):
            with self.assertRaises(KeyError):
                get_default_value(_WithDefaults, name)

    def test_orphan_key(self):
        with self.assertRaises(DefaultKeyMismatchError):
            get_default_value(_WithOrphan, 'zzz')

    def test_type_mismatch(self):
        with self.assertRaisesRegex(DefaultTypeMismatchError, r"1\.5.*'a'"):
            get_default_value(_WithBadDefault, 'a')


class Test__checks(unittest.TestCase):

    def test_ok(self):
        check_has_defaults(_WithDefaults)
        check_orphan_keys(_WithDefaults)
        check_complete_coverage(_WithDefaults)
        check_default_types(_WithDefaults)

    def test__check_has_defaults(self):
        with self.assertRaises(DefaultMissingError):
            check_has_defaults(_WithoutDefaults)

    def test__check_orphan_keys(self):
        with self.assertRaisesRegex(DefaultKeyMismatchError, r"'zzz'"):
            check_orphan_keys(_WithOrphan)
        check_orphan_keys(_WithoutDefaults)

    def test__check_complete_coverage(self):
        with self.assertRaisesRegex(DefaultMissingError, r"'a' not present in _WithoutDefaults"):
            check_complete_coverage(_WithoutDefaults)
        check_complete_coverage(_WithOrphan)

    def test__check_default_types(self):
        with self.assertRaises(DefaultTypeMismatchError):
            check_default_types(_WithBadDefault)
        # (orphan keys are not this check's business)
        check_default_types(_WithOrphan)
