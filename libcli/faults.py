"""
libcli faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- CommandException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- report(): central entry point to print any fault to stderr through rich.

Propagation
- Every fallible operation raises one of the CommandException subclasses below.
  Nothing recovers from a fault automatically except the two explicit "ignore"
  policies (Option.failure and ArrayValue.failure), which turn a value fault into
  an absence of value.
- The CLI facade converts a fault into its message string at the host boundary
  (see libcli.cli), so the command tree stays valid for the next invocation.

Options carried by faults (all optional)
- code: FaultCode, title: str, hint: str
- tool: program name shown in rendered headers
- colorful/fancy: rendering switches (see CLI)
- context such as input, command, parsed (partial ParsedOptions) or accumulated
  (option tokens read before a tokenizer fault).
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across libcli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND, UNKNOWN_SUBCOMMAND, NO_COMMAND
    - options (1111x)
      • INVALID_NAME, UNKNOWN_OPTION, DUPLICATE_OPTION, MISSING_REQUIRED_OPTION,
        OPTION_VALUE
    - values (1112x)
      • MISSING_VALUE, EMPTY_VALUE, INVALID_NUMBER, INVALID_BOOLEAN, ARRAY_ELEMENT
    - configuration (1113x)
      • INVALID_CONFIGURATION

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101
    UNKNOWN_SUBCOMMAND          = 11102
    NO_COMMAND                  = 11103

    # --- option errors (11xxx) ---
    INVALID_NAME                = 11111
    UNKNOWN_OPTION              = 11112
    DUPLICATE_OPTION            = 11115
    MISSING_REQUIRED_OPTION     = 11117
    OPTION_VALUE                = 11118

    # --- value errors (11xxx) ---
    MISSING_VALUE               = 11121
    EMPTY_VALUE                 = 11122
    INVALID_NUMBER              = 11123
    INVALID_BOOLEAN             = 11124
    ARRAY_ELEMENT               = 11125

    # --- configuration errors (11xxx) ---
    INVALID_CONFIGURATION       = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("tool", "libcli")), styler("prog-name"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "error", styler("code")),
            " | ",
            text(self.options.get("title", type(self).__name__).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        message = overrides.pop("message", self.message)
        return type(self)(message, **{**self.options, **overrides})


class InvalidNameError(CommandException, ValueError): ...
class UnknownOptionError(CommandException): ...
class DuplicateOptionError(CommandException): ...
class MissingRequiredOptionError(CommandException): ...
class OptionValueError(CommandException, ValueError): ...
class UnknownCommandError(CommandException): ...
class NoCommandError(CommandException): ...
class UnknownSubcommandError(CommandException): ...
class InvalidConfigurationError(CommandException, ValueError): ...


class ValueParseError(CommandException, ValueError):
    """
    base for faults raised by value parsers (libcli.values).

    a value parser only knows the raw token; the option/command layers add the
    option name to the message when they surface it.
    """


class MissingValueError(ValueParseError): ...
class EmptyValueError(ValueParseError): ...
class InvalidNumberError(ValueParseError): ...
class InvalidBooleanError(ValueParseError): ...
class ArrayElementError(ValueParseError): ...


def report(fault, /, **options):
    """
    print a fault to stderr through the shared rich console.

    options are merged into the fault (copy.replace) before rendering, so callers
    can inject tool/colorful/fancy without mutating the original fault.
    """
    if not isinstance(fault, CommandException):
        raise TypeError("report() argument must be a command exception")
    console.print(copy.replace(fault, **options) if options else fault)


__all__ = (
    "CommandException",
    "InvalidNameError",
    "UnknownOptionError",
    "DuplicateOptionError",
    "MissingRequiredOptionError",
    "OptionValueError",
    "UnknownCommandError",
    "NoCommandError",
    "UnknownSubcommandError",
    "InvalidConfigurationError",
    "ValueParseError",
    "MissingValueError",
    "EmptyValueError",
    "InvalidNumberError",
    "InvalidBooleanError",
    "ArrayElementError",
    "FaultCode",
    "report",
)
