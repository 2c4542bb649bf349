"""
Argmatch parser: match a command line against descriptors and render help.

What this module provides
- Parser: holds an immutable set of descriptors plus formatting/runtime options.
  • parse(): help check, named-then-positional extraction, required enforcement.
  • strip(): remove every named occurrence to obtain the positional-only line.
  • format_usage()/format_help()/print_help(): deterministic help screen (rich).
- HelpArgument: the built-in -h/--help flag, checked before anything else.

Parsing flow
1. The prompt (string, iterable of strings, or sys.argv[1:]) is joined into one line.
2. If the help flag is present, the help screen is printed and parse() returns None.
3. Descriptors are visited named first, positional second (declaration order kept
   inside each group). Named ones read the full line; positional ones read the
   line with all named occurrences stripped.
4. A value that is not None and differs from the descriptor default is recorded.
   A required descriptor without such a value aborts the parse:
   • shell mode: "<name> is required to be passed.", a blank line, the help
     screen, then parse() returns None.
   • otherwise: MissingRequiredArgumentError is raised.
5. The mapping of descriptor -> value is returned (possibly empty).

Help layout
    Usage: prog -i [Options] SOURCE <TARGET>

    Options:
        -h                             Shows this help screen.
            --help
        -i [INPUT]                     Input file.
            --input [INPUT]

    Positional Options:
        Position: 1 [SOURCE]           Where to read from.
        Position: 2 [TARGET]           Where to write to.

Quick start
    from argmatch import Parser, NamedArgument, PositionalArgument

    parser = Parser(
        NamedArgument("-n", "--num", type=int, has_value=True, value_name="NUM"),
        PositionalArgument("NAME", required=True),
        prog="greet",
    )
    values = parser.parse("-n 3 Alice")
    if values is None:
        raise SystemExit(2)
"""
import copy
import sys
from collections.abc import Iterable, Mapping

from rich.console import Console
from rich.text import Text

from .arguments import *
from .faults import *
from .utils import *

HelpArgument = NamedArgument(
    "-h",
    "--help",
    type=bool,
    default=False,
    passed_value=True,
    help_text="Shows this help screen.",
)


class Parser:
    """
    Declarative command-line parser over a fixed set of descriptors.

    Responsibilities
    - Validation: descriptors must be Argument instances, unique, and named
      aliases must not collide (the built-in -h/--help included).
    - Extraction: see parse(); a parser holds no per-parse state, so the same
      instance can parse any number of command lines.
    - Rendering: usage line and option tables through rich, optionally styled.

    Options
    - prog: program name shown after "Usage:" (omitted when None).
    - named_first: usage lists required named aliases before positionals.
    - max_line_length: help text wraps at this width.
    - column: width the option labels are padded to.
    - matching: Matching.EXACT (default) or Matching.PATTERN.
    - shell: print usage outcomes (True) or raise them (False).
    - colorful: apply the style palette when printing.
    - styles: palette overrides (see _palette keys).
    - console: rich Console used for printing (a stdout console by default).
    """

    __introspectable__ = (
        "arguments",
        "prog",
        "named_first",
        "max_line_length",
        "column",
        "matching",
        "shell",
        "colorful",
        "styles",
    )

    _palette = {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "section-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "value-name": "bold #FFD600",
        "help-text": "#9CA3AF",
        "problem": "bold #EF4444",
    }

    arguments = mirror("arguments")
    prog = mirror("prog")
    named_first = mirror("named_first")
    max_line_length = mirror("max_line_length")
    column = mirror("column")
    matching = mirror("matching")
    shell = mirror("shell")
    colorful = mirror("colorful")
    styles = mirror("styles")

    def __init__(
            self,
            *arguments,
            prog=None,
            named_first=True,
            max_line_length=80,
            column=30,
            matching=Matching.EXACT,
            shell=True,
            colorful=False,
            styles=Unset,
            console=Unset,
    ):
        seen = set()
        aliases = dict.fromkeys(HelpArgument.definitions, HelpArgument)
        for argument in arguments:
            if not isinstance(argument, Argument):
                raise TypeError("Parser() arguments must be argument descriptors")
            if argument in seen:
                raise ValueError(f"{argument.name!r} is declared more than once")
            seen.add(argument)
            if isinstance(argument, NamedArgument):
                for definition in argument.definitions:
                    if (other := aliases.setdefault(definition, argument)) is not argument:
                        raise ValueError(f"definition {definition!r} is already used by {other.name!r}")

        if prog is not None and (not isinstance(prog, str) or not prog.strip()):
            raise TypeError("Parser() 'prog' must be a non-empty string")
        for name, value in (("max_line_length", max_line_length), ("column", column)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Parser() {name!r} must be an integer")
            if value < 1:
                raise ValueError(f"Parser() {name!r} must be positive")
        if not isinstance(styles, Mapping | UnsetType):
            raise TypeError("Parser() 'styles' must be a mapping")
        if not isinstance(console, Console | UnsetType):
            raise TypeError("Parser() 'console' must be a rich console")

        self._arguments = tuple(arguments)
        self._reserved = frozenset(aliases)
        self._prog = prog.strip() if prog is not None else None
        self._named_first = bool(named_first)
        self._max_line_length = max_line_length
        self._column = column
        self._matching = Matching(matching)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._styles = dict(coalesce(styles, {}))
        self._console = console

    def __repr__(self):
        return "parser(%s)" % ", ".join("%s=%r" % (name, getattr(self, name)) for name in self.__introspectable__)

    @property
    def console(self):
        if self._console is Unset:
            self._console = Console(highlight=False)
        return self._console

    @property
    def named(self):
        """
        Named descriptors in declaration order.
        """
        return tuple(argument for argument in self._arguments if isinstance(argument, NamedArgument))

    @property
    def positional(self):
        """
        Positional descriptors in declaration order.
        """
        return tuple(argument for argument in self._arguments if isinstance(argument, PositionalArgument))

    @property
    def ordered(self):
        """
        Stable partition of the descriptors: named first, then positional.

        Computed on every access; the declared order is never rewritten.
        """
        return self.named + self.positional

    def strip(self, command_line, /):
        """
        Remove the first occurrence of every named argument from a command line.

        Every named descriptor is located on the same collapsed line, with the
        parser's matching mode and known aliases, so the spans cut out are exactly
        the ones parse() reads values from, whatever the declaration order. A span
        overlapping one that starts earlier is left alone. What remains are the
        positional tokens.
        """
        if not isinstance(command_line, str):
            raise TypeError("strip() argument must be a string")
        line = collapse(command_line)

        occurrences = sorted(
            (
                occurrence
                for argument in self.named
                if (occurrence := argument.find(line, matching=self._matching, reserved=self._reserved)) is not None
            ),
            key=lambda x: (x.start, x.end),
        )

        pieces, offset = [], 0
        for occurrence in occurrences:
            if occurrence.start < offset:
                continue
            pieces.append(line[offset:occurrence.start])
            offset = occurrence.end
        pieces.append(line[offset:])
        return collapse(" ".join(pieces))

    def parse(self, command_line=Unset, /):
        """
        Parse a command line into a mapping of descriptor -> value.

        Parameters
        - command_line:
          • Unset: sys.argv[1:].
          • str: used as-is.
          • Iterable[str]: items are trimmed, empty ones dropped, then joined with
            single spaces.

        Returns
        - dict: descriptors whose value is not None and differs from their default.
        - None: help was requested, or (shell mode) a required argument is missing.

        Raises
        - TypeError: the prompt is not a string or an iterable of strings.
        - MissingRequiredArgumentError: a required argument is missing and the
          parser is not in shell mode.
        """
        line = self._prompt(command_line)

        if HelpArgument.get_value(line, matching=self._matching) == HelpArgument.passed_value:
            self.print_help()
            return None

        values = {}
        stripped = Unset

        for argument in self.ordered:
            if isinstance(argument, NamedArgument):
                value = argument.get_value(line, matching=self._matching, reserved=self._reserved)
            else:
                if stripped is Unset:
                    stripped = self.strip(line)
                value = argument.get_value(stripped)

            if value is not None and value != argument.default:
                values[argument] = value
            elif argument.required:
                return self.trigger(MissingRequiredArgumentError(
                    f"{argument.name} is required to be passed.",
                    title="missing required argument",
                    code=FaultCode.MISSING_REQUIRED,
                    hint="run '%s' to see every argument" % " ".join(filter(None, (self._prog, "--help"))),
                    argument=argument,
                ))

        return values

    def trigger(self, fault, /, **options):
        """
        Surface a usage fault with this parser's runtime options.

        Explicit options take precedence over the parser's own (prog, shell,
        colorful, styles, console). In shell mode the fault message is printed above
        the help screen and None is returned; otherwise the fault is raised.
        """
        fault = copy.replace(fault, **{
            "prog": self._prog,
            "shell": self._shell,
            "colorful": self._colorful,
            "styles": self._styles,
            "console": self.console,
            **options,
        })
        if fault.options["shell"]:
            return fault.options["console"].print(self.render(fault.message), soft_wrap=True, highlight=False)
        trigger(fault)

    def _prompt(self, command_line):
        if command_line is Unset:
            return " ".join(sys.argv[1:])
        if isinstance(command_line, str):
            return command_line
        if isinstance(command_line, Iterable):
            tokens = []
            for item in command_line:
                if not isinstance(item, str):
                    raise TypeError("parse() argument must be a string or an iterable of strings")
                if item := item.strip():
                    tokens.append(item)
            return " ".join(tokens)
        raise TypeError("parse() argument must be a string or an iterable of strings")

    def _styler(self, style):
        if not self._colorful:
            return ""
        return (self._palette | self._styles).get(style, "")

    def _usage(self):
        usage = Text()
        usage.append("Usage:", self._styler("usage-label"))

        items = []
        if self._prog:
            items.append(Text(self._prog, self._styler("program-name")))

        required = [Text(argument.name, self._styler("option-name")) for argument in self.named if argument.required]
        positional = [
            Text(argument.name if argument.required else f"<{argument.name}>", self._styler("value-name"))
            for argument in sorted(self.positional, key=lambda x: not x.required)
        ]
        options = Text("[Options]")

        if self._named_first:
            items.extend(required + [options] + positional)
        else:
            items.extend(positional + [options] + required)

        for item in items:
            usage.append(" ").append_text(item)
        return usage

    def _entry(self, argument):
        """
        Indent the descriptor's own help rendering by four spaces per line.
        """
        indent = 4
        entry = argument.render(
            self._column,
            self._max_line_length - indent,
            console=self.console,
            style=self._styler("option-name" if isinstance(argument, NamedArgument) else "value-name"),
            help_style=self._styler("help-text"),
        )
        return Text("\n").join(Text(" " * indent).append_text(line) for line in entry.split("\n"))

    def render(self, problem=Unset, /):
        """
        Build the full help screen as rich Text (styled when colorful is set).
        """
        if not isinstance(problem, str | UnsetType):
            raise TypeError("render() argument must be a string")

        screen = Text()
        if problem is not Unset:
            screen.append(problem, self._styler("problem")).append("\n\n")

        screen.append_text(self._usage())
        screen.append("\n\n")
        screen.append("Options:", self._styler("section-label"))
        for argument in (HelpArgument,) + self.named:
            screen.append("\n").append_text(self._entry(argument))

        if positional := self.positional:
            screen.append("\n\n")
            screen.append("Positional Options:", self._styler("section-label"))
            for argument in positional:
                screen.append("\n").append_text(self._entry(argument))
        return screen

    def format_usage(self):
        """
        Return the usage line as plain text.
        """
        return self._usage().plain

    def format_help(self, problem=Unset, /):
        """
        Return the full help screen as plain text (see module docstring for the layout).
        """
        return self.render(problem).plain

    def print_help(self, problem=Unset, /):
        """
        Print the help screen, preceded by `problem` and a blank line when given.
        """
        self.console.print(self.render(problem), soft_wrap=True, highlight=False)


__all__ = (
    "Parser",
    "HelpArgument",
)
