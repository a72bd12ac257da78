# Copyright (c) 2026 NASK. All rights reserved.

import unittest

from unittest_expander import (
    expand,
    foreach,
    param,
)

from varmix.exceptions import (
    DataConversionError,
    DefaultKeyMismatchError,
    DefaultMissingError,
    DefaultTypeMismatchError,
    FieldMismatchError,
    MissingFieldError,
    RecordSpecError,
    ScalarConversionError,
    UnknownFieldError,
    UnsupportedTypeError,
)


@expand
class Test__DataConversionError(unittest.TestCase):

    def test_no_location(self):
        exc = DataConversionError('Oops!')
        self.assertEqual(str(exc), 'Oops!')
        self.assertEqual(exc.location_path, [])

    def test_nested_sublocations(self):
        with self.assertRaises(DataConversionError) as cm:
            with DataConversionError.sublocation('outer'):
                with DataConversionError.sublocation('items'):
                    with DataConversionError.sublocation(2):
                        raise DataConversionError('Oops!')
        self.assertEqual(cm.exception.location_path, ['outer', 'items', 2])
        self.assertEqual(str(cm.exception), '[outer.items.2] Oops!')

    def test_subclass_gets_location_too(self):
        with self.assertRaises(MissingFieldError) as cm:
            with DataConversionError.sublocation('spam'):
                raise MissingFieldError(field_name='ham')
        self.assertEqual(str(cm.exception), "[spam] 'ham' not found in map")

    def test_other_exceptions_pass_through_unchanged(self):
        with self.assertRaises(KeyError) as cm:
            with DataConversionError.sublocation('spam'):
                raise KeyError('ham')
        self.assertEqual(cm.exception.args, ('ham',))

    def test_non_ascii_location(self):
        with self.assertRaises(DataConversionError) as cm:
            with DataConversionError.sublocation('śmieci'):
                raise DataConversionError('Oops!')
        self.assertEqual(str(cm.exception), '[\\u015bmieci] Oops!')

    @foreach(
        param(1.5),
        param(None),
        param({'a': 1}),
        param(b'abc'),
        param([1, None]),
    )
    def test_illegal_sublocation(self, location):
        with self.assertRaises(TypeError):
            with DataConversionError.sublocation(location):
                pass


@expand
class Test__field_name_errors(unittest.TestCase):

    @foreach(
        param(MissingFieldError, "'s' not found in map"),
        param(UnknownFieldError, "'s' no such member"),
    )
    def test_default_message(self, exc_class, expected_str):
        exc = exc_class(field_name='s')
        self.assertEqual(exc.field_name, 's')
        self.assertEqual(str(exc), expected_str)
        self.assertIsInstance(exc, DataConversionError)
        self.assertIsInstance(exc, ValueError)

    @foreach(MissingFieldError, UnknownFieldError)
    def test_custom_message(self, exc_class):
        exc = exc_class('custom message', field_name='s')
        self.assertEqual(exc.field_name, 's')
        self.assertEqual(str(exc), 'custom message')

    @foreach(MissingFieldError, UnknownFieldError)
    def test_field_name_is_required(self, exc_class):
        with self.assertRaises(TypeError):
            exc_class()


@expand
class Test__exception_hierarchy(unittest.TestCase):

    @foreach(
        param(MissingFieldError, DataConversionError),
        param(UnknownFieldError, DataConversionError),
        param(ScalarConversionError, DataConversionError),
        param(DataConversionError, ValueError),
        param(UnsupportedTypeError, RecordSpecError),
        param(DefaultMissingError, RecordSpecError),
        param(DefaultKeyMismatchError, RecordSpecError),
        param(DefaultTypeMismatchError, RecordSpecError),
        param(FieldMismatchError, RecordSpecError),
        param(RecordSpecError, TypeError),
    )
    def test(self, exc_class, expected_base):
        self.assertTrue(issubclass(exc_class, expected_base))

    def test_families_are_disjoint(self):
        self.assertFalse(issubclass(RecordSpecError, DataConversionError))
        self.assertFalse(issubclass(DataConversionError, RecordSpecError))
