"""
Converters module behavioral tests.

Scope
- Built-in table: every entry converts its canonical textual form.
- bool spelling rules and enum lookup (by name, then by value).
- Custom converter callables, registration, subclass lookup.
- Failure normalization: ConversionError chains the original exception;
  unknown classes raise InvalidTypeError.
- zero(): the empty value of a type.

Conventions
- Test method names follow CamelCase per project convention.
- Registration tests use classes local to the test so the global table is not polluted
  for other tests.
"""
import datetime
import decimal
import enum
import fractions
import ipaddress
import pathlib
import re
import unittest
import uuid
from unittest import TestCase

from argmatch.converters import *
from argmatch.faults import ConversionError, InvalidTypeError


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


class Level(enum.IntEnum):
    LOW = 1
    HIGH = 2


class TestBuiltinTable(TestCase):
    """Canonical conversions of the built-in table."""

    def testNumbers(self):
        self.assertEqual(convert(int, "42"), 42)
        self.assertEqual(convert(int, "-7"), -7)
        self.assertEqual(convert(float, "2.5"), 2.5)
        self.assertEqual(convert(complex, "1+2j"), 1 + 2j)
        self.assertEqual(convert(decimal.Decimal, "0.1"), decimal.Decimal("0.1"))
        self.assertEqual(convert(fractions.Fraction, "1/3"), fractions.Fraction(1, 3))

    def testString(self):
        self.assertEqual(convert(str, "Alice"), "Alice")

    def testBooleanSpellings(self):
        for token in ("true", "True", "T", "yes", "Y", "on", "1"):
            with self.subTest(token=token):
                self.assertIs(convert(bool, token), True)
        for token in ("false", "FALSE", "f", "no", "N", "off", "0"):
            with self.subTest(token=token):
                self.assertIs(convert(bool, token), False)

    def testBooleanRejectsOtherWords(self):
        with self.assertRaises(ConversionError):
            convert(bool, "maybe")

    def testPaths(self):
        self.assertEqual(convert(pathlib.Path, "a/b.txt"), pathlib.Path("a/b.txt"))
        value = convert(pathlib.PurePosixPath, "a/b.txt")
        self.assertIsInstance(value, pathlib.PurePosixPath)

    def testUuid(self):
        token = "12345678-1234-5678-1234-567812345678"
        self.assertEqual(convert(uuid.UUID, token), uuid.UUID(token))

    def testDatesAndTimes(self):
        self.assertEqual(convert(datetime.date, "2024-02-29"), datetime.date(2024, 2, 29))
        self.assertEqual(convert(datetime.time, "13:45:00"), datetime.time(13, 45))
        self.assertEqual(
            convert(datetime.datetime, "2024-02-29T13:45:00"),
            datetime.datetime(2024, 2, 29, 13, 45),
        )

    def testAddresses(self):
        self.assertEqual(convert(ipaddress.IPv4Address, "127.0.0.1"), ipaddress.IPv4Address("127.0.0.1"))
        self.assertEqual(convert(ipaddress.IPv6Address, "::1"), ipaddress.IPv6Address("::1"))
        with self.assertRaises(ConversionError):
            convert(ipaddress.IPv4Address, "::1")

    def testPattern(self):
        pattern = convert(re.Pattern, r"^\d+$")
        self.assertTrue(pattern.match("123"))
        with self.assertRaises(ConversionError):
            convert(re.Pattern, "(")

    def testEnumByName(self):
        self.assertIs(convert(Color, "RED"), Color.RED)

    def testEnumByValue(self):
        self.assertIs(convert(Color, "green"), Color.GREEN)
        self.assertIs(convert(Level, "2"), Level.HIGH)

    def testEnumRejectsUnknownMember(self):
        with self.assertRaises(ConversionError):
            convert(Color, "blue")


class TestFailures(TestCase):
    def testConversionErrorChainsCause(self):
        with self.assertRaises(ConversionError) as context:
            convert(int, "abc")
        self.assertIsInstance(context.exception.__cause__, ValueError)
        self.assertEqual(context.exception.options["token"], "abc")
        self.assertIs(context.exception.options["type"], int)

    def testConversionErrorIsValueError(self):
        with self.assertRaises(ValueError):
            convert(float, "x")

    def testArithmeticFailuresAreNormalized(self):
        with self.assertRaises(ConversionError):
            convert(decimal.Decimal, "abc")
        with self.assertRaises(ConversionError):
            convert(fractions.Fraction, "1/0")

    def testTokenMustBeString(self):
        with self.assertRaises(TypeError) as context:
            convert(int, 5)
        self.assertNotIsInstance(context.exception, ConversionError)

    def testUnknownClassIsInvalid(self):
        class Thing:
            pass

        with self.assertRaises(InvalidTypeError):
            resolve(Thing)
        with self.assertRaises(TypeError):
            resolve(Thing)

    def testNonCallableIsInvalid(self):
        with self.assertRaises(InvalidTypeError):
            resolve(42)


class TestCustomConverters(TestCase):
    def testPlainCallable(self):
        def upper(token):
            return token.upper()

        self.assertIs(resolve(upper), upper)
        self.assertEqual(convert(upper, "abc"), "ABC")

    def testCallableFailureIsNormalized(self):
        def strict(token):
            raise KeyError(token)

        with self.assertRaises(ConversionError):
            convert(strict, "abc")

    def testSubclassUsesBaseConverter(self):
        class Name(str):
            pass

        self.assertIs(resolve(Name), str)
        self.assertIs(resolve(bool), resolve(bool))
        self.assertIsNot(resolve(bool), int)

    def testRegisterDirect(self):
        class Point:
            def __init__(self, x, y):
                self.x, self.y = x, y

        def point(token):
            x, y = token.split(",")
            return Point(int(x), int(y))

        self.assertIs(register(Point, point), point)
        value = convert(Point, "3,4")
        self.assertEqual((value.x, value.y), (3, 4))

    def testRegisterDecorator(self):
        class Celsius(float):
            pass

        @register(Celsius)
        def celsius(token):
            return Celsius(token.removesuffix("C"))

        self.assertEqual(convert(Celsius, "21.5C"), 21.5)

    def testRegisterValidation(self):
        with self.assertRaises(TypeError):
            register(lambda token: token, str)
        with self.assertRaises(TypeError):
            register(str, 42)
        with self.assertRaises(TypeError):
            register()


class TestZero(TestCase):
    def testZeroValues(self):
        self.assertIs(zero(bool), False)
        self.assertEqual(zero(int), 0)
        self.assertEqual(zero(float), 0.0)
        self.assertEqual(zero(complex), 0j)
        self.assertEqual(zero(decimal.Decimal), decimal.Decimal(0))
        self.assertEqual(zero(fractions.Fraction), fractions.Fraction(0))

    def testEverythingElseIsNone(self):
        for type in (str, pathlib.Path, Color, Level, str.upper):
            with self.subTest(type=type):
                self.assertIsNone(zero(type))


if __name__ == "__main__":
    unittest.main()
