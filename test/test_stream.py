# python
"""
ArgumentStream and KeywordRegistry behavioral tests.

Scope
- Keyword validation and registry immutability.
- Per-token classification: commands, switches, options (glued or not),
  other values, invalid strings and the "--" terminator.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from argot import (
    ArgumentStream,
    Command,
    DuplicateKeyError,
    End,
    InvalidKeyError,
    InvalidUtf8,
    Key,
    KeyWithValue,
    KeywordKind,
    KeywordRegistry,
    Other,
    valid_command,
    valid_key,
)

KEYS = (
    ("--long", False),
    ("--m", True),
    ("--n", True),
    ("-s", False),
    ("-t", True),
    ("-u", True),
)


class TestValidation(TestCase):
    """Behavioral tests for keyword validation."""

    def testValidKeys(self):
        for char in "0aZ9":
            with self.subTest(char=char):
                self.assertTrue(valid_key(f"-{char}"))
                self.assertTrue(valid_key(f"--{char}"))
                self.assertTrue(valid_key(f"--{char}a-Z_0123"))

    def testInvalidKeys(self):
        for keyword in ("", "-", "--", "---", "--_", "--Björk", "-abc", "-Björk", "0", "0bc", "_abc", "a", "abc"):
            with self.subTest(keyword=keyword):
                self.assertFalse(valid_key(keyword))

    def testCommands(self):
        self.assertTrue(valid_command("build"))
        self.assertTrue(valid_command("0day_x-y"))
        self.assertFalse(valid_command(""))
        self.assertFalse(valid_command("-build"))
        self.assertFalse(valid_command("_build"))
        self.assertFalse(valid_command("Björk"))


class TestKeywordRegistry(TestCase):
    """Behavioral tests for KeywordRegistry."""

    def testImmutable(self):
        empty = KeywordRegistry()
        registry = empty.with_command("build")
        self.assertEqual(len(empty), 0)
        self.assertEqual(len(registry), 1)
        self.assertIs(registry.get("build"), KeywordKind.COMMAND)

    def testKinds(self):
        registry = KeywordRegistry().with_switches(["-v"]).with_options(["--out"]).with_commands(["make"])
        self.assertIs(registry.get("-v"), KeywordKind.KEY)
        self.assertIs(registry.get("--out"), KeywordKind.KEY_WITH_VALUE)
        self.assertIs(registry.get("make"), KeywordKind.COMMAND)
        self.assertIsNone(registry.get("--missing"))
        self.assertIn("make", registry)
        self.assertEqual(set(registry), {"-v", "--out", "make"})

    def testBulkEqualsPiecewise(self):
        together = KeywordRegistry().with_keys([
            ("--switch1", False),
            ("--switch2", False),
            ("--opt1", True),
            ("--opt2", True),
        ])
        apart = KeywordRegistry().with_switches(["--switch1", "--switch2"]).with_options(["--opt1", "--opt2"])
        self.assertEqual(together, apart)

    def testDuplicate(self):
        registry = KeywordRegistry().with_switches(["--switch1"])
        with self.assertRaises(DuplicateKeyError) as context:
            registry.with_key("--switch1", value=True)
        self.assertEqual(context.exception.key, "--switch1")
        self.assertEqual(context.exception.message, "Duplicate key: --switch1")

    def testInvalid(self):
        with self.assertRaises(InvalidKeyError) as context:
            KeywordRegistry().with_key("-abc")
        self.assertEqual(context.exception.message, "Invalid key: -abc")
        with self.assertRaises(InvalidKeyError):
            KeywordRegistry().with_command("-build")

    def testBlankIgnored(self):
        registry = KeywordRegistry().with_switches(["  ", ""])
        self.assertEqual(len(registry), 0)

    def testKeywordsTrimmed(self):
        registry = KeywordRegistry().with_switches([" -v "])
        self.assertIn("-v", registry)

    def testFind(self):
        registry = KeywordRegistry().with_options(["-t", "--m"]).with_command("build")
        self.assertEqual(registry.find("-t"), ("-t", KeywordKind.KEY_WITH_VALUE))
        self.assertEqual(registry.find("-t2"), ("-t", KeywordKind.KEY_WITH_VALUE))
        self.assertEqual(registry.find("--m=yar"), ("--m", KeywordKind.KEY_WITH_VALUE))
        self.assertEqual(registry.find("build"), ("build", KeywordKind.COMMAND))
        self.assertIsNone(registry.find("--myar"))
        self.assertIsNone(registry.find("_x"))
        self.assertIsNone(registry.find(""))


class TestArgumentStream(TestCase):
    """Behavioral tests for ArgumentStream."""

    def setUp(self):
        self.tokens = [
            "subcommand", "", "-s", "--long", "-t2", "--m=yar", "--n", "yar", "-u", "2", "/foo/bar", "--",
        ]

    def stream(self, tokens):
        return ArgumentStream(tokens).with_command("subcommand").with_keys(KEYS)

    def testScenario(self):
        self.assertEqual(list(self.stream(self.tokens)), [
            Command("subcommand"),
            Key("-s"),
            Key("--long"),
            KeyWithValue("-t", "2"),
            KeyWithValue("--m", "yar"),
            KeyWithValue("--n", "yar"),
            KeyWithValue("-u", "2"),
            Other("/foo/bar"),
        ])

    def testScenarioWithRemainder(self):
        arguments = list(self.stream(self.tokens + ["--end", "--m=yar"]))
        self.assertEqual(arguments[-1], End(("--end", "--m=yar")))
        self.assertEqual(len(arguments), 9)

    def testGluedLongValue(self):
        stream = ArgumentStream(["--threads=4", "build"]).with_options(["--threads"])
        self.assertEqual(list(stream), [KeyWithValue("--threads", "4"), Other("build")])

    def testEmptyGluedValue(self):
        stream = ArgumentStream(["--threads="]).with_options(["--threads"])
        self.assertEqual(list(stream), [KeyWithValue("--threads", "")])

    def testUndeclaredKeysAreOther(self):
        self.assertEqual(list(ArgumentStream(["-v", "--x=1"])), [Other("-v"), Other("--x=1")])

    def testSwitchWithGluedValueIsKey(self):
        stream = ArgumentStream(["-vv"]).with_switches(["-v"])
        self.assertEqual(list(stream), [Key("-v")])

    def testEmptyEnd(self):
        stream = ArgumentStream(["a", "--"])
        self.assertEqual(list(stream), [Other("a")])
        self.assertTrue(stream.ended)

    def testEndKeepsRawTokens(self):
        stream = ArgumentStream([b"a", b"--", b"\xff", "x"])
        self.assertEqual(list(stream), [Other("a"), End((b"\xff", "x"))])

    def testEmptyDrain(self):
        stream = ArgumentStream([])
        self.assertEqual(list(stream), [])
        with self.assertRaises(StopIteration):
            next(stream)

    def testInvalidBytes(self):
        self.assertEqual(list(ArgumentStream([b"\xff", b"ok"])), [InvalidUtf8(b"\xff"), Other("ok")])

    def testInvalidSurrogateString(self):
        self.assertEqual(list(ArgumentStream(["\udcff"])), [InvalidUtf8(b"\xff")])

    def testInvalidLoneSurrogate(self):
        raw = "\ud800".encode("utf-8", "surrogatepass")
        self.assertEqual(list(ArgumentStream(["\ud800", "ok"])), [InvalidUtf8(raw), Other("ok")])
        stream = ArgumentStream(["--out", "\ud800"]).with_options(["--out"])
        self.assertEqual(list(stream), [InvalidUtf8(b"--out=" + raw)])

    def testInvalidOptionValueIsMerged(self):
        stream = ArgumentStream([b"--out", b"\xff"]).with_options(["--out"])
        self.assertEqual(list(stream), [InvalidUtf8(b"--out=\xff")])

    def testDanglingOptionEndsStream(self):
        stream = ArgumentStream(["a", "--out"]).with_options(["--out"])
        self.assertEqual(list(stream), [Other("a")])
        self.assertTrue(stream.ended)

    def testEmptyOptionValueKept(self):
        stream = ArgumentStream(["--out", ""]).with_options(["--out"])
        self.assertEqual(list(stream), [KeyWithValue("--out", "")])

    def testDeclareAfterStart(self):
        stream = ArgumentStream(["a", "b"])
        next(stream)
        with self.assertRaises(RuntimeError):
            stream.with_switches(["-v"])

    def testSharedRegistry(self):
        registry = KeywordRegistry().with_options(["-o"])
        stream = ArgumentStream(["-ofile"], keywords=registry)
        self.assertIs(stream.keywords, registry)
        self.assertEqual(list(stream), [KeyWithValue("-o", "file")])

    def testRejectsOtherRegistries(self):
        with self.assertRaises(TypeError):
            ArgumentStream([], keywords={"-v": KeywordKind.KEY})


if __name__ == "__main__":
    unittest.main()
