"""
Argmatch faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing fault, grouped by
  domain so messages and searches stay predictable.
- ArgumentException / ArgumentWarning: base types carrying a message plus
  read-only options; they know how to render (rich) and how to surface
  themselves (raise, print or warn).
- trigger(): single entry point to surface a fault with runtime options merged in.

Fault kinds
- InvalidTypeError: a descriptor declares a value type with no string conversion.
  Raised at construction time; also a TypeError.
- ConversionError: a token could not be converted to the declared type. Also a
  ValueError. Descriptors catch it and degrade to their default value.
- MissingRequiredArgumentError: a required argument did not receive a valid value.
  In shell mode it is printed (with the help screen) and parsing returns None;
  otherwise it is raised.
- ConversionWarning: emitted through the warnings machinery whenever a matched
  token degrades to the default value because it failed conversion.

A help request is not a fault: the parser prints the help screen and returns None.

Rendering
- Header: "[ <prog> — <code> | <Title> ]", then the message, then " → <hint>".
- Styles apply only when the "colorful" option is set; custom palettes can be
  passed through the "styles" option.
"""
import copy
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import *


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - descriptor configuration (2110x)
      • INVALID_TYPE
    - value extraction (2111x/2112x)
      • CONVERSION_FAILED, MISSING_REQUIRED
    - warnings (22xxx)
      • CONVERSION_WARNING
    """
    # --- descriptor configuration errors (21xxx) ---
    INVALID_TYPE       = 21101

    # --- value extraction errors (21xxx) ---
    CONVERSION_FAILED  = 21111
    MISSING_REQUIRED   = 21121

    # --- warnings (22xxx) ---
    CONVERSION_WARNING = 22111

    def normalize(self):
        """
        return the code as a display string.
        """
        return str(self.value)


def _render(fault, palette, /):
    """
    build the rich renderable shared by exceptions and warnings.

    the header and hint are omitted piecewise when the matching options are
    missing, so a bare fault (message only) still renders as a single line.
    """
    styles = defaultdict(str, palette | dict(fault.options.get("styles", {})))
    colorful = fault.options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    renders = []

    if (code := fault.options.get("code")) is not None:
        header = Text.assemble("[ ")
        if prog := fault.options.get("prog"):
            header.append_text(text(prog, "prog-name"))
            header.append(" — ")
        header.append_text(text(code.normalize(), "code"))
        if title := fault.options.get("title"):
            header.append(" | ")
            header.append_text(text(title.title(), "title"))
        header.append(" ]")
        renders.append(header)

    renders.append(text(coalesce(fault.message, ""), "message"))

    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    return Group(*renders)


class ArgumentException(Exception):
    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | UnsetType):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # pinky title
            "message": "#C8C8D0",  # soft gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        coalesce(self.options.get("console", Unset), Console(stderr=True)).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidTypeError(ArgumentException, TypeError): ...
class ConversionError(ArgumentException, ValueError): ...
class MissingRequiredArgumentError(ArgumentException): ...


class ArgumentWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | UnsetType):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber code for warnings
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        # attributed to the descriptor method that degraded the value
        warnings.warn(self, stacklevel=4)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConversionWarning(ArgumentWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault (copy.replace) before triggering;
      the original fault object is left untouched.

    typical options
    - prog, shell, colorful, console, styles, title, code, hint, and any context the
      renderer may want to show (argument, token, ...).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ArgumentException",
    "InvalidTypeError",
    "ConversionError",
    "MissingRequiredArgumentError",
    "ArgumentWarning",
    "ConversionWarning",
    "trigger",
)
