"""
Argmatch converters: the string-to-type capability used by every descriptor.

Overview
- resolve(type): look up the converter for a declared value type.
  • Classes are looked up in a table (exact type first, then by subclass), Enum
    subclasses get a member converter, plain callables are used as-is.
  • A class with no known conversion raises InvalidTypeError.
- convert(type, token): resolve and apply, normalizing failures to ConversionError.
- zero(type): the “empty” value of a type, used when a descriptor is declared
  without an explicit default.
- register(type, converter): extend the table for application types.

Built-in table
- str, int, float, complex, bool, Decimal, Fraction
- pathlib.Path (and subclasses), uuid.UUID
- datetime.date, datetime.time, datetime.datetime (ISO formats)
- ipaddress.IPv4Address, ipaddress.IPv6Address
- re.Pattern (compiled with re.compile)

Quick example
    >>> convert(int, "42")
    42
    >>> convert(bool, "Yes")
    True
"""
import builtins
import datetime
import decimal
import enum
import fractions
import ipaddress
import pathlib
import re
import uuid

from .faults import *
from .utils import *

_TRUTHY = ("true", "t", "yes", "y", "on", "1")
_FALSY = ("false", "f", "no", "n", "off", "0")


def _boolean(token, /):
    if (lowered := token.strip().lower()) in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"{token!r} is not a boolean (expected one of {', '.join(_TRUTHY + _FALSY)})")


def _datetime(token, /):
    return datetime.datetime.fromisoformat(token)


_converters = {
    str: str,
    int: int,
    float: float,
    complex: complex,
    bool: _boolean,
    decimal.Decimal: decimal.Decimal,
    fractions.Fraction: fractions.Fraction,
    uuid.UUID: uuid.UUID,
    datetime.datetime: _datetime,
    datetime.date: datetime.date.fromisoformat,
    datetime.time: datetime.time.fromisoformat,
    ipaddress.IPv4Address: ipaddress.IPv4Address,
    ipaddress.IPv6Address: ipaddress.IPv6Address,
    re.Pattern: re.compile,
}

_zeros = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    decimal.Decimal: decimal.Decimal(0),
    fractions.Fraction: fractions.Fraction(0),
}


def _enumeration(cls, /):
    """
    build a converter for an Enum subclass: member name first, then member value.

    values are compared through their string form so that integer-valued enums
    accept "2" as well as their member names.
    """
    def converter(token):
        try:
            return cls[token]
        except KeyError:
            pass
        for member in cls:
            if str(member.value) == token:
                return member
        raise ValueError(f"{token!r} is not a valid {cls.__name__} (choices: {', '.join(cls.__members__)})")

    return rename(converter, f"{cls.__name__.lower()}_converter")


def resolve(type, /):
    """
    Return the converter for a declared value type.

    Resolution order
    - Enum subclasses: a name-then-value member converter.
    - Classes: exact table hit, then the first table entry the class subclasses
      (this is how bool is kept apart from int: bool is an exact hit).
      PurePath subclasses convert with the class itself.
    - Other callables (functions, lambdas, partials): used as the converter.

    Raises
    - InvalidTypeError: the type is a class with no known string conversion, or
      is not callable at all.
    """
    if isinstance(type, builtins.type):
        if issubclass(type, enum.Enum):
            return _enumeration(type)
        if issubclass(type, pathlib.PurePath):
            return type
        try:
            converter = _converters[type]
        except KeyError:
            pass
        else:
            return converter
        for candidate, converter in _converters.items():
            if issubclass(type, candidate):
                return converter
        raise InvalidTypeError(
            f"{type.__name__} is an invalid type, it must be convertible from a string",
            title="invalid type",
            code=FaultCode.INVALID_TYPE,
            hint=f"register a converter with argmatch.converters.register({type.__name__}, ...)",
            type=type,
        )
    if callable(type):
        return type
    raise InvalidTypeError(
        f"{type!r} is an invalid type, it must be a class or a callable",
        title="invalid type",
        code=FaultCode.INVALID_TYPE,
        type=type,
    )


def convert(type, token, /):
    """
    Convert a token string to the declared type.

    Failures of the underlying converter (ValueError, TypeError, ArithmeticError,
    KeyError, re.error) are re-raised as ConversionError with the original chained.
    InvalidTypeError from resolve() propagates unchanged.
    """
    if not isinstance(token, str):
        raise TypeError("convert() second argument must be a string")
    converter = resolve(type)
    try:
        return converter(token)
    except ConversionError:
        raise
    except (ValueError, TypeError, ArithmeticError, KeyError, re.error) as exception:
        name = getattr(type, "__name__", repr(type))
        raise ConversionError(
            f"cannot convert {token!r} to {name}",
            title="conversion failed",
            code=FaultCode.CONVERSION_FAILED,
            token=token,
            type=type,
        ) from exception


def zero(type, /):
    """
    Return the empty value of a type, or None when it has none.

    bool -> False, int -> 0, float -> 0.0, complex -> 0j, Decimal/Fraction -> 0.
    Everything else (str, enums, subclasses of the above) is None.
    """
    if not isinstance(type, builtins.type) or issubclass(type, enum.Enum):
        return None
    try:
        return _zeros[type]
    except KeyError:
        return None


def register(*parameters):
    """
    Register a converter for a type, or return a decorator that does so.

    Forms
    - register(type, converter)
    - @register(type) on a converter function

    Registered entries take precedence over subclass lookups of the built-in
    table because exact hits are checked first.
    """
    match len(parameters):
        case 2:
            type, converter = parameters
            if not isinstance(type, builtins.type):
                raise TypeError("register() first argument must be a class")
            if not callable(converter):
                raise TypeError("register() second argument must be callable")
            _converters[type] = converter
            return converter
        case 1:
            type, = parameters

            def wrapper(converter):
                return register(type, converter)

            return rename(wrapper, "register")
        case _:
            raise TypeError("register takes 1 to 2 arguments but %d were given" % len(parameters))


__all__ = (
    "resolve",
    "convert",
    "zero",
    "register",
)
