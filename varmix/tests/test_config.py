# Copyright (c) 2026 NASK. All rights reserved.

import io
import os.path
import tempfile
import unittest

from unittest_expander import (
    expand,
    foreach,
    param,
)

from varmix.config import (
    BASIC_CONVERTERS,
    ConfigError,
    convert_config_section,
    read_config_section,
)
from varmix.policy import (
    VarDefPolicy,
    load_policy_config,
)


@expand
class Test__BASIC_CONVERTERS(unittest.TestCase):

    @foreach(
        ('str', 'abc', 'abc'),
        ('bool', 'Yes', True),
        ('bool', 'off', False),
        ('int', '42', 42),
        ('float', '42', 42.0),
    )
    def test(self, name, arg, expected_result):
        self.assertEqual(BASIC_CONVERTERS[name](arg), expected_result)


@expand
class Test__convert_config_section(unittest.TestCase):

    def test_ok(self):
        result = convert_config_section(
            {'a': '1', 'b': 'true'},
            {'a': 'int', 'b': 'bool', 'c': 'str'})
        self.assertEqual(result, {'a': 1, 'b': True})

    def test_custom_converters(self):
        result = convert_config_section(
            {'a': 'x,y'},
            {'a': 'list'},
            converters={'list': lambda s: s.split(',')})
        self.assertEqual(result, {'a': ['x', 'y']})

    @foreach(
        param({'zzz': '1'}, {'a': 'int'}, r"illegal options: 'zzz'"),
        param({'a': 'spam'}, {'a': 'int'}, r"option 'a'"),
        param({'a': 'maybe'}, {'a': 'bool'}, r"option 'a'"),
        param({'a': '1'}, {'a': 'no_such_converter'}, r"unknown converter spec"),
    )
    def test_error(self, raw, spec, expected_regex):
        with self.assertRaisesRegex(ConfigError, expected_regex) as cm:
            convert_config_section(raw, spec)
        self.assertTrue(str(cm.exception).startswith('Config error: '))


class Test__read_config_section(unittest.TestCase):

    def test_from_file_object(self):
        f = io.StringIO('[foo]\n'
                        'a = 1 ; a comment\n'
                        'B = yes\n'
                        '[bar]\n'
                        'c = 2\n')
        self.assertEqual(read_config_section(f, 'foo'), {'a': '1', 'b': 'yes'})

    def test_from_path(self):
        with tempfile.TemporaryDirectory() as dir_path:
            path = os.path.join(dir_path, 'test.conf')
            with open(path, 'w', encoding='utf-8') as f:
                f.write('[foo]\na = 1\n')
            self.assertEqual(read_config_section(path, 'foo'), {'a': '1'})

    def test_no_such_section(self):
        with self.assertRaisesRegex(ConfigError, r'\[foo\]'):
            read_config_section(io.StringIO('[bar]\na = 1\n'), 'foo')

    def test_no_such_file(self):
        with tempfile.TemporaryDirectory() as dir_path:
            with self.assertRaises(ConfigError):
                read_config_section(os.path.join(dir_path, 'nonexistent.conf'), 'foo')

    def test_malformed(self):
        with self.assertRaises(ConfigError):
            read_config_section(io.StringIO('a = 1\n'), 'foo')


@expand
class Test__VarDefPolicy(unittest.TestCase):

    def test_defaults(self):
        policy = VarDefPolicy()
        self.assertIs(policy.serialize_empty_container, True)
        self.assertIs(policy.serialize_default_value, True)

    def test_immutable(self):
        policy = VarDefPolicy()
        with self.assertRaises(AttributeError):
            policy.serialize_default_value = False

    def test_non_bool(self):
        with self.assertRaises(TypeError):
            VarDefPolicy(serialize_empty_container=0)

    @foreach(
        param({}, VarDefPolicy()),
        param({'serialize_empty_container': 'no'},
              VarDefPolicy(serialize_empty_container=False)),
        param({'serialize_empty_container': 'on', 'serialize_default_value': 'False'},
              VarDefPolicy(serialize_default_value=False)),
    )
    def test__from_config_section(self, raw, expected_policy):
        self.assertEqual(VarDefPolicy.from_config_section(raw), expected_policy)

    def test__from_config_section__illegal_option(self):
        with self.assertRaisesRegex(ConfigError, r"'serialize_everything'"):
            VarDefPolicy.from_config_section({'serialize_everything': 'yes'})


class Test__load_policy_config(unittest.TestCase):

    def test_default_section(self):
        f = io.StringIO('[varmix_policy]\n'
                        'serialize_empty_container = no\n'
                        'serialize_default_value = false\n')
        self.assertEqual(load_policy_config(f), VarDefPolicy(
            serialize_empty_container=False,
            serialize_default_value=False))

    def test_custom_section(self):
        f = io.StringIO('[my_policy]\n'
                        'serialize_default_value = 0\n')
        self.assertEqual(load_policy_config(f, 'my_policy'),
                         VarDefPolicy(serialize_default_value=False))

    def test_invalid_value(self):
        f = io.StringIO('[varmix_policy]\n'
                        'serialize_default_value = perhaps\n')
        with self.assertRaisesRegex(ConfigError, r"'serialize_default_value'"):
            load_policy_config(f)
