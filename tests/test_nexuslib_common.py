from inspect import cleandoc
import unittest

from nexuslib.plumbing.common import (AlreadyExists, ExecutionError, HTTPError, InvalidArgument,
                                      NexusError, NotFound, ProtocolError, Result, State)

from .plumbing import collect_all, collect_pair, created, default, success, success_value, unchanged


class TestResult(unittest.TestCase):

    maxDiff = None

    def test_state_default(self):
        self.assertEqual(default().state, State.unchanged)

    def test_state_unchanged(self):
        self.assertEqual(unchanged().state, State.unchanged)

    def test_state_success(self):
        self.assertEqual(success().state, State.success)

    def test_state_parts_success(self):
        self.assertEqual(collect_pair().state, State.success)

    def test_state_parts_created(self):
        self.assertEqual(collect_all().state, State.created)

    def test_value_unset(self):
        with self.assertRaises(ValueError):
            success().value

    def test_value_set(self):
        self.assertEqual(success_value("test").value, "test")

    def test_value_collect_unset(self):
        with self.assertRaises(ValueError):
            collect_pair().value

    def test_value_collect(self):
        self.assertEqual(collect_all().value, "test")

    def test_caller_inspect(self):
        self.assertEqual(default().caller, "tests.plumbing:default")

    def test_caller_custom(self):
        self.assertEqual(Result(caller=default).caller, "tests.plumbing:default")

    def test_truthy_unchanged(self):
        self.assertFalse(unchanged())

    def test_truthy_success(self):
        self.assertTrue(success())

    def test_truthy_created(self):
        self.assertTrue(created())

    def test_collect(self):
        result = collect_pair()
        self.assertEqual(result.parts[0].caller, "tests.plumbing:unchanged")
        self.assertEqual(result.parts[1].caller, "tests.plumbing:success")

    def test_str(self):
        self.assertEqual(str(collect_all()), cleandoc("""
        tests.plumbing:collect_all: created 'test'
            tests.plumbing:unchanged: unchanged
            tests.plumbing:success: success
            tests.plumbing:success_value: success 'test'
            tests.plumbing:created: created
        """))


class TestErrors(unittest.TestCase):

    def test_not_found_message(self):
        self.assertEqual(str(NotFound("Script 'x' does not exist")), "Script 'x' does not exist")

    def test_not_found_key_error(self):
        with self.assertRaises(KeyError):
            raise NotFound("missing")

    def test_value_errors(self):
        for cls in (AlreadyExists, InvalidArgument, ProtocolError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, ValueError))
                self.assertTrue(issubclass(cls, NexusError))

    def test_execution_error(self):
        ex = ExecutionError("boom", "script")
        self.assertEqual(str(ex), "boom")
        self.assertEqual(ex.name, "script")

    def test_http_error(self):
        ex = HTTPError("GET x returned a status code of 502", 502, b"bad gateway")
        self.assertEqual(ex.status, 502)
        self.assertEqual(ex.body, b"bad gateway")


if __name__ == "__main__":
    unittest.main()
