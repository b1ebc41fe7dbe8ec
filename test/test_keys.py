# python
"""
Key classification behavioral tests.

Scope
- classify(): every token shape, with and without "=" offsets.
- split()/tokenize(): glued keys come apart, everything else is untouched.
- memoryview tokens split into views over the same buffer.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from argot import Classification, KeyKind, classify, split, tokenize


class TestClassify(TestCase):
    """Behavioral tests for classify()."""

    def testNotKeys(self):
        for token in (b"", b"-", b"--", b"a", b"abc", b"-0", b"--0", b"-_", b"---", b"--=", b"0-k"):
            with self.subTest(token=token):
                self.assertIs(classify(token).kind, KeyKind.NONE)
                self.assertIsNone(classify(token).offset)

    def testShort(self):
        self.assertEqual(classify(b"-k"), Classification(KeyKind.SHORT))
        self.assertEqual(classify(b"-Z"), Classification(KeyKind.SHORT))

    def testShortWithValue(self):
        self.assertEqual(classify(b"-kVal"), Classification(KeyKind.SHORT_VALUE))
        self.assertEqual(classify(b"-k="), Classification(KeyKind.SHORT_VALUE))
        self.assertEqual(classify("-Björk".encode()), Classification(KeyKind.SHORT_VALUE))

    def testLong(self):
        self.assertEqual(classify(b"--key"), Classification(KeyKind.LONG))
        self.assertEqual(classify(b"--k"), Classification(KeyKind.LONG))
        self.assertEqual(classify("--Björk".encode()), Classification(KeyKind.LONG))

    def testLongWithValue(self):
        self.assertEqual(classify(b"--yes="), Classification(KeyKind.LONG_VALUE, 5))
        self.assertEqual(classify(b"--key=val"), Classification(KeyKind.LONG_VALUE, 5))
        self.assertEqual(classify(b"--a=b=c"), Classification(KeyKind.LONG_VALUE, 3))
        self.assertEqual(classify("--Björk=Yes".encode()), Classification(KeyKind.LONG_VALUE, 8))

    def testOnlyPrefixInspected(self):
        self.assertIs(classify(b"-k\xff\xfe").kind, KeyKind.SHORT_VALUE)
        self.assertIs(classify(b"--k\xff=\xfe").kind, KeyKind.LONG_VALUE)

    def testMemoryview(self):
        self.assertEqual(classify(memoryview(b"--key=val")), Classification(KeyKind.LONG_VALUE, 5))
        self.assertIs(classify(memoryview(b"-k")).kind, KeyKind.SHORT)

    def testKindProperties(self):
        self.assertFalse(KeyKind.NONE.is_key)
        self.assertTrue(KeyKind.SHORT.is_key)
        self.assertFalse(KeyKind.LONG.has_value)
        self.assertTrue(KeyKind.SHORT_VALUE.has_value)
        self.assertTrue(KeyKind.LONG_VALUE.has_value)


class TestSplit(TestCase):
    """Behavioral tests for split() and tokenize()."""

    def testSplitShortValue(self):
        self.assertEqual(split(classify(b"-kVal"), b"-kVal"), (b"-k", b"Val"))

    def testSplitLongValue(self):
        self.assertEqual(split(classify(b"--key=Val"), b"--key=Val"), (b"--key", b"Val"))

    def testTrailingEqualsIsEmptyValue(self):
        self.assertEqual(split(classify(b"--yes="), b"--yes="), (b"--yes", b""))

    def testUnsplittable(self):
        for token in (b"value", b"-k", b"--key", b"--"):
            with self.subTest(token=token):
                self.assertEqual(split(classify(token), token), (token, None))

    def testTokenize(self):
        self.assertEqual(tokenize(b"-kVal"), (True, b"-k", b"Val"))
        self.assertEqual(tokenize(b"--key"), (True, b"--key", None))
        self.assertEqual(tokenize(b"file.txt"), (False, b"file.txt", None))

    def testReassembles(self):
        for token in (b"-kVal", b"--key=Val", b"--a=b=c", b"--yes=", "--Björk=Yes".encode()):
            with self.subTest(token=token):
                classification = classify(token)
                key, value = split(classification, token)
                glue = b"=" if classification.kind is KeyKind.LONG_VALUE else b""
                self.assertEqual(key + glue + value, token)

    def testMemoryviewStaysBorrowed(self):
        buffer = b"--key=val"
        key, value = split(classify(memoryview(buffer)), memoryview(buffer))
        self.assertIsInstance(key, memoryview)
        self.assertIsInstance(value, memoryview)
        self.assertIs(value.obj, buffer)
        self.assertEqual(bytes(value), b"val")


if __name__ == "__main__":
    unittest.main()
