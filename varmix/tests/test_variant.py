# Copyright (c) 2026 NASK. All rights reserved.

import collections
import unittest

from unittest_expander import (
    expand,
    foreach,
    param,
)

from varmix.exceptions import ScalarConversionError
from varmix.variant import (
    is_empty,
    is_map,
    is_seq,
    is_variant,
    variant_map,
    variant_seq,
)


@expand
class Test__is_variant(unittest.TestCase):

    @foreach(
        param(None),
        param(True),
        param(42),
        param(4.2),
        param(''),
        param([]),
        param({}),
        param([1, 'a', None, [2.5, {'x': False}]]),
        param({'a': {'b': {'c': [None]}}}),
    )
    def test_variant(self, obj):
        self.assertTrue(is_variant(obj))

    @foreach(
        param(b'abc'),
        param((1, 2)),
        param({1, 2}),
        param({1: 'a'}),
        param([1, {'a': object()}]),
        param({'a': [1, (2,)]}),
        param(1j),
    )
    def test_not_variant(self, obj):
        self.assertFalse(is_variant(obj))

    def test_deeply_nested(self):
        obj = []
        for _ in range(10000):
            obj = [obj]
        self.assertTrue(is_variant(obj))


@expand
class Test__predicates(unittest.TestCase):

    @foreach(
        param(None, True, False, False),
        param(0, False, False, False),
        param('', False, False, False),
        param([], False, False, True),
        param({}, False, True, False),
    )
    def test(self, variant, expected_empty, expected_map, expected_seq):
        self.assertIs(is_empty(variant), expected_empty)
        self.assertIs(is_map(variant), expected_map)
        self.assertIs(is_seq(variant), expected_seq)


@expand
class Test__variant_map(unittest.TestCase):

    def test_ok(self):
        variant = {'b': 1, 'a': 2}
        self.assertIs(variant_map(variant), variant)

    def test_ordered_dict_is_accepted(self):
        variant = collections.OrderedDict([('b', 1), ('a', 2)])
        self.assertEqual(list(variant_map(variant)), ['b', 'a'])

    @foreach(
        param(None),
        param([('a', 1)]),
        param('a'),
        param({1: 'a'}),
    )
    def test_error(self, variant):
        with self.assertRaises(ScalarConversionError):
            variant_map(variant)


@expand
class Test__variant_seq(unittest.TestCase):

    @foreach(
        param([1, 2]),
        param((1, 2)),
        param([]),
    )
    def test_ok(self, variant):
        self.assertIs(variant_seq(variant), variant)

    @foreach(
        param(None),
        param('ab'),
        param({'a': 1}),
        param({1, 2}),
    )
    def test_error(self, variant):
        with self.assertRaises(ScalarConversionError):
            variant_seq(variant)
