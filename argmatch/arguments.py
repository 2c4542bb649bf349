r"""
Argmatch argument descriptors.

Overview
- Descriptors
  • NamedArgument[_T]: identified by one or more aliases (e.g., -n/--num); either a
    presence-only flag (has_value=False) or a value-bearing option (has_value=True).
  • PositionalArgument[_T]: identified by its zero-based position among the tokens
    that remain once every named occurrence has been removed.
  • Argument: the abstract base both share (metadata, validation hook, help labels).

- Matching
  • Matching.EXACT: whitespace tokenization, an alias only matches a whole token
    (or the head of an inline "alias=value" token).
  • Matching.PATTERN: alias alternation searched as a regular expression over the
    whitespace-collapsed line; values are restricted to \w+ runs and an alias may
    match inside a longer token. Kept for compatibility with command lines written
    against that behavior.

- Introspection & representation
  • ArgumentType metaclass exposes the names listed in __introspectable__ as
    read-only properties (see utils.mirror) and provides stable __repr__ and
    __rich_repr__ implementations.

Metadata (sanitized on construction)
- Shared
  • type: class or converter callable; classes must be resolvable by
    argmatch.converters, otherwise InvalidTypeError is raised.
  • default: defaults to converters.zero(type); must be None or an instance of
    type when type is a class.
  • value_name / help_text: strings, trimmed.
  • required: bool.
  • on_match: None or a callable receiving the extracted value.
- Named only
  • definitions: at least one alias; aliases are non-empty, contain no whitespace
    and are unique.
  • has_value: bool.
  • passed_value: value produced by a flag; defaults to `not default` for bool
    flags and to default otherwise.
- Positional only
  • position: non-negative integer.

Validation hook
- on_match is called with every successfully extracted value. Returning exactly
  False rejects the value and the descriptor yields its default instead. Any other
  return value (None included) accepts it. The hook runs at most once per call.

Quick example:
    >>> number = NamedArgument("-n", "--num", type=int, has_value=True, value_name="NUM")
    >>> number.get_value("-n 42")
    42
    >>> source = PositionalArgument("SOURCE", position=0)
    >>> source.get_value("a.txt b.txt")
    'a.txt'

Public API
- Classes: Argument, NamedArgument, PositionalArgument, Matching, Occurrence
"""
import builtins
import enum
import functools
import operator
import re
from collections import namedtuple

from rich.console import Console
from rich.text import Text

from .converters import *
from .faults import *
from .utils import *


class Matching(enum.Enum):
    """
    Alias matching strategy used by named arguments and the positional stripper.
    """
    EXACT = "exact"
    PATTERN = "pattern"


Occurrence = namedtuple("Occurrence", ("start", "end", "value"))
Occurrence.__doc__ = """
Where a named argument was found in a whitespace-collapsed command line.

- start/end: character offsets of the alias (and its value, when it carries one).
- value: the raw value token, or None for presence-only flags.
"""


@functools.cache
def _pattern(definitions, has_value, /):
    r"""
    Compile (and cache) the alternation used by Matching.PATTERN.

    "(-a|--alpha)\s[\w]+" for value-bearing arguments, "(-a|--alpha)" otherwise.
    Aliases are escaped, so regex metacharacters inside an alias match literally.
    """
    alternation = "(" + "|".join(map(re.escape, definitions)) + ")"
    return re.compile(alternation + (r"\s[\w]+" if has_value else ""))


class ArgumentType(type):
    """
    Metaclass for descriptors.

    Responsibilities
    - Derive __typename__ from the class name ("NamedArgument" -> "named-argument")
      for messages and representations.
    - Publish every name of __introspectable__ as a read-only property.
    - Provide __repr__/__rich_repr__ listing the introspectable fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options,
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Example
            - named-argument(definitions=('-v', '--verbose'), has_value=False, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _check_instance(cls, type, value, field, /):
    """
    Internal: reject values that cannot be of the declared type.

    Only classes are checked; converter callables make no promise about the type
    they return, so their values are trusted.
    """
    if value is None or not isinstance(type, builtins.type):
        return
    if not isinstance(value, type):
        raise TypeError(f"{cls.__typename__} {field!r} must be an instance of {type.__name__}, not {builtins.type(value).__name__}")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the metadata shared by every descriptor.

    Responsibilities
    - type: resolved through converters.resolve (raises InvalidTypeError).
    - default: Unset becomes converters.zero(type); otherwise type-checked.
    - value_name/help_text: must be strings, trimmed.
    - required: coerced to bool.
    - on_match: None or callable.

    Side effects
    - Mutates the provided metadata dict in place.
    """
    resolve(metadata["type"])

    if metadata["default"] is Unset:
        metadata["default"] = zero(metadata["type"])
    _check_instance(cls, metadata["type"], metadata["default"], "default")

    if not isinstance(value_name := metadata["value_name"], str):
        raise TypeError(f"{cls.__typename__} 'value_name' must be a string")
    metadata["value_name"] = value_name.strip()

    if not isinstance(help_text := metadata["help_text"], str):
        raise TypeError(f"{cls.__typename__} 'help_text' must be a string")
    metadata["help_text"] = help_text.strip()

    metadata["required"] = bool(metadata["required"])

    if metadata["on_match"] is not None and not callable(metadata["on_match"]):
        raise TypeError(f"{cls.__typename__} 'on_match' must be callable")


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate aliases and flag wiring of named descriptors.

    Responsibilities
    - definitions: required, each a non-empty string without inner whitespace,
      duplicates rejected. Order is kept: the first alias is the display name.
    - has_value: coerced to bool.
    - passed_value: Unset becomes `not default` for bool, default otherwise;
      an explicit value is type-checked like default.
    """
    if not metadata["definitions"]:
        raise TypeError(f"{cls.__typename__} must specify at least one definition")

    definitions = []
    for definition in metadata["definitions"]:
        if not isinstance(definition, str):
            raise TypeError(f"{cls.__typename__} definitions must be strings")
        elif not (definition := definition.strip()):
            raise ValueError(f"{cls.__typename__} definitions cannot be empty-strings")
        elif re.search(r"\s", definition):
            raise ValueError(f"{cls.__typename__} definitions cannot contain whitespace")
        elif definition in definitions:
            raise ValueError(f"{cls.__typename__} definitions cannot contain duplicates")
        definitions.append(definition)
    metadata["definitions"] = tuple(definitions)

    metadata["has_value"] = bool(metadata["has_value"])

    if metadata["passed_value"] is Unset:
        if metadata["type"] is bool:
            metadata["passed_value"] = not metadata["default"]
        else:
            metadata["passed_value"] = metadata["default"]
    _check_instance(cls, metadata["type"], metadata["passed_value"], "passed_value")


def _sanitize_positional_metadata(cls, metadata, /):
    """
    Internal: validate the position of positional descriptors.
    """
    if isinstance(position := metadata["position"], bool) or not isinstance(position, int):
        raise TypeError(f"{cls.__typename__} 'position' must be an integer")
    if position < 0:
        raise ValueError(f"{cls.__typename__} 'position' cannot be negative")


class Argument(metaclass=ArgumentType):
    """
    Abstract descriptor: metadata, the validation hook and help rendering.

    Concrete descriptors implement `name`, `labels` and `get_value`. Instances are
    hashable by identity so they can key the parser's result mapping.
    """

    __introspectable__ = (
        "value_name",
        "help_text",
        "required",
        "default",
        "on_match",
        "type",
    )

    def __new__(cls, *args, **kwargs):
        if cls is Argument:
            raise TypeError("type 'Argument' cannot be instantiated directly")
        return super().__new__(cls)

    @property
    def name(self):
        raise NotImplementedError

    @property
    def labels(self):
        """
        Help labels, primary first (see format_help).
        """
        raise NotImplementedError

    def get_value(self, command_line, /):
        raise NotImplementedError

    def render(self, column=30, width=Unset, /, *, console=Unset, style="", help_style=""):
        """
        Render this descriptor as (optionally styled) rich Text.

        layout
        - The primary label is padded with spaces up to `column`, then a single space
          and the help text follow.
        - With `width`, the help text wraps so no line exceeds it; wrapped lines are
          right-trimmed and aligned with the help column. Nothing wraps when fewer
          than ten columns remain for the help text.
        - Every further label goes on its own continuation line, indented by four
          spaces.

        `style` applies to the labels, `help_style` to the help text.
        """
        for name, value in (("column", column), ("width", coalesce(width, 0))):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"render() {name!r} must be an integer")

        primary, *others = self.labels
        entry = Text()
        entry.append(primary.ljust(column), style)

        if self.help_text:
            entry.append(" ")
            offset = max(len(primary), column) + 1
            lines = [Text(self.help_text)]
            if width is not Unset and width - offset >= 10:
                if console is Unset:
                    console = Console(width=width, highlight=False)
                lines = list(Text(self.help_text).wrap(console, width - offset))
            for index, line in enumerate(lines):
                line.rstrip()
                if index:
                    entry.append("\n" + " " * offset)
                entry.append(line.plain, help_style)
        else:
            entry.rstrip()

        for label in others:
            entry.append("\n    ").append(label, style)
        return entry

    def format_help(self, column=30, width=Unset):
        """
        Render this descriptor as plain help text (see render for the layout).
        """
        return self.render(column, width).plain

    def _accept(self, value):
        if self.on_match is not None and self.on_match(value) is False:
            return self.default
        return value

    def _degrade(self, token, exception):
        trigger(ConversionWarning(
            "%s received %r which cannot be converted, the default is used instead" % (self.name, token),
            title="conversion failed",
            code=FaultCode.CONVERSION_WARNING,
            hint=str(exception),
            argument=self,
            token=token,
        ))
        return self.default


class NamedArgument[_T](Argument):
    """
    Argument identified by one or more aliases.

    Presence-only when has_value is False (the flag yields passed_value), value
    bearing otherwise (the token after the alias, or the inline "alias=value"
    form in exact matching, is converted with `type`).
    """

    __introspectable__ = (
        "definitions",
        "has_value",
        "passed_value",
        "value_name",
        "help_text",
        "required",
        "default",
        "on_match",
        "type",
    )

    def __init__(
            self,
            *definitions,
            type=str,
            value_name="",
            help_text="",
            required=False,
            default=Unset,
            has_value=False,
            passed_value=Unset,
            on_match=None,
    ):
        """
        Construct a named descriptor.

        Parameters
        - definitions: one or more str aliases, e.g. "-g", "--greeting".
        - type: class or converter callable for the value (and for checking
          default/passed_value when it is a class).
        - value_name: placeholder shown in help, e.g. "NUM".
        - help_text: one-line description shown in help.
        - required: parsing aborts when the argument yields its default.
        - default: value when absent or invalid (converters.zero(type) if omitted).
        - has_value: whether a value token follows the alias.
        - passed_value: value of a present flag (has_value=False).
        - on_match: hook called with the extracted value; returning False rejects it.
        """
        metadata = {
            "definitions": definitions,
            "type": type,
            "value_name": value_name,
            "help_text": help_text,
            "required": required,
            "default": default,
            "has_value": has_value,
            "passed_value": passed_value,
            "on_match": on_match,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def name(self):
        return self._definitions[0]

    @property
    def labels(self):
        if self.value_name:
            return tuple(f"{definition} [{self.value_name}]" for definition in self._definitions)
        return self._definitions

    def find(self, command_line, /, *, matching=Matching.EXACT, reserved=()):
        """
        Locate the first occurrence of this argument in a command line.

        The line is collapsed first (see utils.collapse); offsets of the returned
        Occurrence refer to that collapsed form. Returns None when nothing matches.

        exact
        - tokens equal to an alias match; a value-bearing alias needs a following
          token or the inline "alias=value" form. An alias at the very end, or one
          followed by a token listed in `reserved` (the aliases a parser knows), is
          skipped, so a token is never both a value and an alias.

        pattern
        - the first regex match of the alias alternation (see _pattern); the value
          is the last space-separated piece of the match. `reserved` is not used.
        """
        if not isinstance(command_line, str):
            raise TypeError("find() argument must be a string")

        line = collapse(command_line)

        match Matching(matching):
            case Matching.PATTERN:
                if (found := _pattern(self._definitions, self._has_value).search(line)) is None:
                    return None
                value = found.group().split(" ")[-1] if self._has_value else None
                return Occurrence(found.start(), found.end(), value)
            case Matching.EXACT:
                tokens = line.split(" ") if line else []
                offset = 0
                for index, token in enumerate(tokens):
                    start, offset = offset, offset + len(token) + 1
                    if token in self._definitions:
                        if not self._has_value:
                            return Occurrence(start, start + len(token), None)
                        if index + 1 < len(tokens) and tokens[index + 1] not in reserved:
                            value = tokens[index + 1]
                            return Occurrence(start, start + len(token) + 1 + len(value), value)
                    elif self._has_value:
                        alias, separator, value = token.partition("=")
                        if separator and value and alias in self._definitions:
                            return Occurrence(start, start + len(token), value)
                return None

    def get_value(self, command_line, /, *, matching=Matching.EXACT, reserved=()):
        """
        Extract this argument's value from a full command line.

        behavior
        - no occurrence (see find): default (on_match is not called).
        - value-bearing: the value token is converted with `type`; a conversion
          failure emits ConversionWarning and yields default.
        - presence-only: passed_value.
        - the extracted value then goes through on_match (False rejects it).
        """
        if (occurrence := self.find(command_line, matching=matching, reserved=reserved)) is None:
            return self.default

        if not self._has_value:
            return self._accept(self.passed_value)

        try:
            value = convert(self._type, occurrence.value)
        except ConversionError as exception:
            return self._degrade(occurrence.value, exception)
        return self._accept(value)


class PositionalArgument[_T](Argument):
    """
    Argument identified by its index among positional tokens.

    The parser hands it a line from which every named occurrence was removed, so
    position 0 is the first token that is not a named argument (or its value).
    """

    __introspectable__ = (
        "position",
        "value_name",
        "help_text",
        "required",
        "default",
        "on_match",
        "type",
    )

    def __init__(
            self,
            value_name="",
            /,
            position=0,
            type=str,
            help_text="",
            required=False,
            default=Unset,
            on_match=None,
    ):
        metadata = {
            "position": position,
            "type": type,
            "value_name": value_name,
            "help_text": help_text,
            "required": required,
            "default": default,
            "on_match": on_match,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_positional_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def name(self):
        # unnamed positionals fall back to a 1-based placeholder
        return self._value_name or f"ARG{self._position + 1}"

    @property
    def labels(self):
        if self.value_name:
            return (f"Position: {self._position + 1} [{self.value_name}]",)
        return (f"Position: {self._position + 1}",)

    def get_value(self, command_line, /):
        """
        Extract this argument's value from a positional-only line.

        behavior
        - fewer tokens than position + 1: default.
        - conversion failure: ConversionWarning, then default.
        - otherwise the converted value goes through on_match (False rejects it).
        """
        if not isinstance(command_line, str):
            raise TypeError("get_value() argument must be a string")

        tokens = command_line.split()
        if self._position >= len(tokens):
            return self.default

        try:
            value = convert(self._type, token := tokens[self._position])
        except ConversionError as exception:
            return self._degrade(token, exception)
        return self._accept(value)


__all__ = (
    # Classes (descriptors)
    "Argument",
    "NamedArgument",
    "PositionalArgument",

    # Matching
    "Matching",
    "Occurrence",
)

# Not part of the public API.
del ArgumentType
