# Copyright (c) 2026 NASK. All rights reserved.

import dataclasses
import unittest
from typing import (
    Any,
    List,
    Optional,
    Union,
)

from unittest_expander import (
    expand,
    foreach,
    param,
)

from varmix.exceptions import RecordSpecError
from varmix.reflection import (
    FieldDescriptor,
    RecordSchema,
    get_payload_type,
    get_record_schema,
    is_optional,
    is_record_type,
)


@dataclasses.dataclass
class _Point:
    x: int
    y: int
    label: Optional[str] = None
    cache: dict = dataclasses.field(init=False, default_factory=dict)


@expand
class Test__type_hint_helpers(unittest.TestCase):

    @foreach(
        param(Optional[int], True),
        param(Union[int, None], True),
        param(Union[None, int, str], True),
        param(Optional[List[int]], True),
        param(int, False),
        param(Union[int, str], False),
        param(List[Optional[int]], False),
        param(Any, False),
        param(type(None), False),
    )
    def test__is_optional(self, type_hint, expected_result):
        self.assertIs(is_optional(type_hint), expected_result)

    @foreach(
        param(Optional[int], int),
        param(Optional[list[str]], list[str]),
        param(Union[None, int, str], Union[int, str]),
        param(str, str),
        param(list[Optional[int]], list[Optional[int]]),
    )
    def test__get_payload_type(self, type_hint, expected_result):
        self.assertEqual(get_payload_type(type_hint), expected_result)

    def test__is_record_type(self):
        self.assertTrue(is_record_type(_Point))
        self.assertFalse(is_record_type(_Point(1, 2)))
        self.assertFalse(is_record_type(dict))
        self.assertFalse(is_record_type(None))


class Test__get_record_schema(unittest.TestCase):

    def test_fields(self):
        schema = get_record_schema(_Point)
        self.assertIsInstance(schema, RecordSchema)
        self.assertEqual(schema.field_names, ('x', 'y', 'label'))
        self.assertEqual(len(schema), 3)
        self.assertEqual([field.name for field in schema], ['x', 'y', 'label'])
        self.assertTrue(all(isinstance(field, FieldDescriptor) for field in schema))
        self.assertIs(schema.record_class, _Point)
        self.assertEqual(schema.record_class_name, '_Point')

    def test_field_descriptor(self):
        schema = get_record_schema(_Point)
        x = schema.get_field('x')
        label = schema.get_field('label')
        self.assertIs(x.type_hint, int)
        self.assertFalse(x.is_optional)
        self.assertIs(x.payload_type, int)
        self.assertEqual(x.type_name, 'int')
        self.assertEqual(label.type_hint, Optional[str])
        self.assertTrue(label.is_optional)
        self.assertIs(label.payload_type, str)
        self.assertIsNone(schema.get_field('cache'))
        self.assertIsNone(schema.get_field('nonexistent'))

    def test_accessors(self):
        point = _Point(1, 2)
        field = get_record_schema(_Point).get_field('y')
        self.assertEqual(field.get(point), 2)
        field.set(point, 5)
        self.assertEqual(point.y, 5)

    def test_cached(self):
        self.assertIs(get_record_schema(_Point), get_record_schema(_Point))

    def test_inherited_fields(self):
        @dataclasses.dataclass
        class Point3D(_Point):
            z: int = 0

        self.assertEqual(get_record_schema(Point3D).field_names, ('x', 'y', 'label', 'z'))

    def test_string_annotations(self):
        @dataclasses.dataclass
        class WithStringAnnotations:
            a: 'int'
            b: 'Optional[str]'

        schema = get_record_schema(WithStringAnnotations)
        self.assertIs(schema.get_field('a').type_hint, int)
        self.assertTrue(schema.get_field('b').is_optional)

    def test_unresolvable_annotations(self):
        @dataclasses.dataclass
        class WithBadAnnotation:
            a: 'NoSuchType'  # noqa

        with self.assertRaises(RecordSpecError):
            get_record_schema(WithBadAnnotation)

    def test_not_a_record_type(self):
        with self.assertRaises(RecordSpecError):
            get_record_schema(dict)
        with self.assertRaises(RecordSpecError):
            get_record_schema(object())
