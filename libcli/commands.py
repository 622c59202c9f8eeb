"""
libcli command layer: declare command trees and run them over a token stream.

What this module provides
- ParsedOptions: the read-only result of option parsing for one run.
- Command: a named node with options, subcommands and an optional handler.
- command(...): decorator that turns a handler function into a Command.

Command execution (Command.run)
- Options are parsed first, up to the first non-option token.
- If the next token names a subcommand (name or alias), the subcommand runs on the
  same token stream and the parent handler is never called.
- Otherwise, if a handler is defined, it is called with the remaining tokens and
  the parsed options; a non-matching token stays in the stream for the handler.
- Without a handler, a leftover token is an unknown subcommand, and no leftover
  token at all renders this command's help.

Quick start
    from libcli import Command, Option, Tokens

    def greet(command, cli, tokens, options):
        print("hello, %s!" % options["name"])

    tool = Command("greet", "say hello", greet, options=[
        Option.string("name", default="world", description="who to greet"),
    ]).validate()

    tool.run(None, Tokens("--name=Alice"))  # hello, Alice!

Commands are configuration: run() and parse_options() never modify a command or
its options, every run builds its own ParsedOptions from scratch.
"""
import copy
import difflib
import logging
from collections import defaultdict
from collections.abc import Mapping

from rich.console import Console, Group
from rich.padding import Padding
from rich.table import Table
from rich.text import Text

from .faults import *
from .options import Multiple, Option
from .utils import *

logger = logging.getLogger(__name__)
console = Console()


class ParsedOptions(Mapping):
    """
    Option values parsed for one run, keyed by canonical option name.

    A value is either a single parsed value or a list of values (array options,
    options with multiple="append"). Lookups of absent names through get() and
    the get_* helpers return None; iteration visits every present name once.
    """

    def __init__(self, options=Unset, /):
        self._options = dict(coalesce(options, {}))

    def __getitem__(self, name, /):
        return self._options[name]

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return f"{type(self).__name__}({self._options!r})"

    def __rich_repr__(self):
        yield from self._options.items()

    def has(self, name, /):
        return name in self._options

    def get_all(self, name, /):
        """Return the value as a list ([value] for a scalar), or None if absent."""
        if name not in self._options:
            return None
        value = self._options[name]
        return list(value) if isinstance(value, list) else [value]

    def get_last(self, name, /):
        """Return the last element of a list value, the scalar value, or None."""
        value = self._options.get(name)
        if isinstance(value, list):
            return value[-1] if value else None
        return value

    def get_flattened(self, name, /):
        """
        Return the value as one flat list, or None if absent.

        Useful for array options with multiple="append", whose value is a list
        of lists: '--id=1,2 --id=3' → [[1, 2], [3]] → [1, 2, 3].
        """
        if name not in self._options:
            return None
        return flatten(self._options[name])

    def set(self, name, value, /):
        self._options[name] = value

    def insert(self, name, value, /):
        """
        Accumulate a value under name.

        - absent → [value]
        - list   → value is appended
        - scalar → [scalar, value]
        """
        if name not in self._options:
            self._options[name] = [value]
        elif isinstance(current := self._options[name], list):
            current.append(value)
        else:
            self._options[name] = [current, value]


def _invalid(message, **options):
    return InvalidConfigurationError(
        message,
        title="invalid configuration",
        code=FaultCode.INVALID_CONFIGURATION,
        **options
    )


def _option(object):
    if isinstance(object, Option):
        return object
    if isinstance(object, Mapping):
        return Option.from_args(object)
    raise TypeError("command options must be options or mappings of option arguments")


class Command:
    """
    A command (or subcommand) of a CLI.

    Parameters
    - name: str
      the command name (validated by check_name()).
    - description: str | None
      short help text.
    - handler: Callable[[Command, CLI, Tokens, ParsedOptions], object] | None
      called by run(); the return value is ignored.
    - aliases: Iterable[str]
      alternative names used when this command is a subcommand.
    - options: Iterable[Option | Mapping]
      declared options, in declaration order (mappings go through Option.from_args).
    - subcommands: Iterable[Command]
      child commands, in declaration order.

    Both construction paths (keywords here, or the fluent builders below) converge
    on validate(), which is never called implicitly.
    """

    def __init__(
            self,
            name,
            description=None,
            handler=None,
            /,
            *,
            aliases=(),
            options=(),
            subcommands=(),
    ):
        self.name = name
        self.description = description
        self.handler = handler
        self.aliases = list(aliases)
        self.options = list(map(_option, options))
        self.subcommands = list(subcommands)

    def __repr__(self):
        return "command(name=%r, aliases=%r, options=%r, subcommands=%r)" % (
            self.name,
            self.aliases,
            [option.name for option in self.options],
            [subcommand.name for subcommand in self.subcommands],
        )

    # ── builders ────────────────────────────────────────────────────────────

    def set_description(self, description, /):
        self.description = description
        return self

    def set_handler(self, handler, /):
        self.handler = handler
        return self

    def add_alias(self, alias, /):
        self.aliases.append(alias)
        return self

    def add_aliases(self, aliases, /):
        for alias in aliases:
            self.add_alias(alias)
        return self

    def insert_option(self, option, /):
        self.options.append(_option(option))
        return self

    def insert_options(self, options, /):
        for option in options:
            self.insert_option(option)
        return self

    def add_string_option(self, name=None, /, **args):
        return self.insert_option(Option.string(args.pop("name", name), **args))

    def add_number_option(self, name=None, /, **args):
        return self.insert_option(Option.number(args.pop("name", name), **args))

    def add_boolean_option(self, name=None, /, **args):
        return self.insert_option(Option.boolean(args.pop("name", name), **args))

    def add_subcommand(self, subcommand, /):
        if not isinstance(subcommand, Command):
            raise TypeError("add_subcommand() argument must be a command")
        self.subcommands.append(subcommand)
        return self

    def command(self, name, description=None, /, **kwargs):
        """
        Decorator: build a subcommand around a handler and attach it here.

            @root.command("child", "a child command")
            def child(command, cli, tokens, options): ...

        The decorated name is bound to the new subcommand.
        """
        def wrapper(handler, /):
            self.add_subcommand(subcommand := command(name, description, **kwargs)(handler))
            return subcommand
        return wrapper

    # ── validation ──────────────────────────────────────────────────────────

    def validate(self):
        """
        Check this command, its options and its subcommands (recursively).

        Returns
        - self.

        Raises
        - InvalidConfigurationError naming the first invalid part.
        """
        if reason := check_name(self.name):
            raise _invalid("invalid command name %r: %s" % (self.name, reason), input=self.name)

        for alias in self.aliases:
            if reason := check_name(alias):
                raise _invalid("invalid alias %r in command %r: %s" % (alias, self.name, reason), input=alias)

        if self.description is not None and not isinstance(self.description, str | Text):
            raise _invalid("invalid description for command %r: description must be a string" % self.name)

        if self.handler is not None and not callable(self.handler):
            raise _invalid("invalid handler for command %r: handler must be callable" % self.name)

        for option in self.options:
            try:
                option.validate()
            except InvalidConfigurationError as exception:
                raise _invalid(
                    "invalid option %r in command %r: %s" % (option.name, self.name, exception.message),
                    input=option.name,
                ) from exception

        for subcommand in self.subcommands:
            try:
                subcommand.validate()
            except InvalidConfigurationError as exception:
                raise _invalid(
                    "invalid subcommand %r in command %r: %s" % (subcommand.name, self.name, exception.message),
                    input=subcommand.name,
                ) from exception

        return self

    # ── lookup ──────────────────────────────────────────────────────────────

    def matches(self, name, /):
        return name == self.name or name in self.aliases

    def find_option(self, name, /):
        for option in self.options:
            if option.matches(name):
                return option
        return None

    def find_subcommand(self, name, /):
        for subcommand in self.subcommands:
            if subcommand.matches(name):
                return subcommand
        return None

    # ── parsing ─────────────────────────────────────────────────────────────

    def parse_options(self, tokens, /):
        """
        Read the leading option tokens and resolve them against this command.

        Steps
        - drain every consecutive option token from the stream;
        - resolve each (name, value) pair, in input order, to the first declared
          option that matches it, and parse the value with that option;
        - record the value under the option's canonical name following its
          'multiple' policy (a value dropped by failure="ignore" is not recorded
          and does not count as an occurrence);
        - for every declared option still absent: use its default, or fail when it
          is required.

        Returns
        - ParsedOptions.

        Raises
        - InvalidNameError, UnknownOptionError, OptionValueError,
          DuplicateOptionError, MissingRequiredOptionError. Each fault carries the
          partially built ParsedOptions in its 'parsed' option.
        """
        parsed = ParsedOptions()

        try:
            pairs = tokens.next_option_tokens()
        except InvalidNameError as exception:
            raise copy.replace(exception, message="failed to get option tokens: %s" % exception.message, parsed=parsed) from None

        for input, value in pairs:
            option = self.find_option(input)
            if option is None:
                suggestions = difflib.get_close_matches(input, [name for option in self.options for name in (option.name, *option.aliases)], 1)
                raise UnknownOptionError(
                    "unknown option '--%s'" % input,
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    input=input,
                    suggestions=suggestions,
                    hint="did you mean '--%s'?" % suggestions[0] if suggestions else "run '%s' without arguments to see its options" % self.name,
                    parsed=parsed,
                )

            try:
                value = option.parse_value(value)
            except ValueParseError as exception:
                raise OptionValueError(
                    "failed to parse value for option '--%s': %s" % (input, exception.message),
                    **{"title": "invalid option value", "code": FaultCode.OPTION_VALUE, **exception.options, "input": input, "parsed": parsed},
                ) from exception

            if value is Unset:
                continue

            match option.multiple:
                case Multiple.FAIL:
                    if parsed.has(option.name):
                        raise DuplicateOptionError(
                            "duplicate option '--%s'" % input,
                            title="duplicate option",
                            code=FaultCode.DUPLICATE_OPTION,
                            input=input,
                            hint="keep a single '--%s'; it can be specified only once" % option.name,
                            parsed=parsed,
                        )
                    parsed.set(option.name, value)
                case Multiple.SET:
                    parsed.set(option.name, value)
                case Multiple.APPEND:
                    parsed.insert(option.name, value)

        for option in self.options:
            if parsed.has(option.name):
                continue
            if option.default_value is not Unset:
                parsed.set(option.name, copy.deepcopy(option.default_value))
            elif option.default is not None:
                try:
                    value = option.parse_value(option.default)
                except ValueParseError as exception:
                    raise OptionValueError(
                        "failed to parse default value for option '--%s': %s" % (option.name, exception.message),
                        **{"title": "invalid option value", "code": FaultCode.OPTION_VALUE, **exception.options, "input": option.name, "parsed": parsed},
                    ) from exception
                if value is not Unset:
                    parsed.set(option.name, value)
            elif option.required:
                raise MissingRequiredOptionError(
                    "missing required option '--%s'" % option.name,
                    title="missing required option",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    input=option.name,
                    hint="add '--%s=<value>'" % option.name,
                    parsed=parsed,
                )

        return parsed

    # ── execution ───────────────────────────────────────────────────────────

    def run(self, cli, tokens, /):
        """
        Parse this command's options, then delegate, call the handler or show help.

        Parameters
        - cli: the CLI context handed through to handlers (may be None).
        - tokens: Tokens; subcommands keep reading from the same stream.

        Raises
        - option faults from parse_options(), re-raised with the message prefixed
          by this command's name (nothing else runs);
        - UnknownSubcommandError when a token is left, matches no subcommand and
          there is no handler;
        - faults from subcommands, unchanged.
        """
        try:
            options = self.parse_options(tokens)
        except CommandException as exception:
            raise copy.replace(
                exception,
                message="failed to parse options for command %r: %s" % (self.name, exception.message),
                command=self,
            ) from exception.__cause__

        if (token := tokens.peek()) is not None:
            if subcommand := self.find_subcommand(token):
                tokens.next()
                logger.debug("command %r delegates to subcommand %r", self.name, subcommand.name)
                return subcommand.run(cli, tokens)

            if self.handler is None:
                names = [name for subcommand in self.subcommands for name in (subcommand.name, *subcommand.aliases)]
                suggestions = difflib.get_close_matches(token, names, 1)
                raise UnknownSubcommandError(
                    "unknown subcommand %r for command %r" % (token, self.name),
                    title="unknown subcommand",
                    code=FaultCode.UNKNOWN_SUBCOMMAND,
                    input=token,
                    command=self,
                    suggestions=suggestions,
                    hint="did you mean %r?" % suggestions[0] if suggestions else "run '%s' without arguments to see its subcommands" % self.name,
                )

        if self.handler is not None:
            logger.debug("invoking handler of command %r", self.name)
            self.handler(self, cli, tokens, options)
            return None

        self.print_help(cli)
        return None

    # ── help ────────────────────────────────────────────────────────────────

    def print_help(self, cli=Unset, /):
        """
        Render this command's help to the console.

        Sections
        - header: name and description;
        - options: '--name' with aliases, description, default and a required mark;
        - subcommands: name with aliases and description.

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - Styling only applies when the CLI context is colorful.
        """
        logger.debug("rendering help for command %r", self.name)
        colorful = getattr(cli, "colorful", False)
        styles = defaultdict(str, {
            "command-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "description": "italic #A3A3A3",  # Neutral gray
            "group-label": "bold #FFFFFF",  # Pure white headers
            "option-name": "bold #00E6FF",  # CYAN for options
            "alias-name": "#00E6FF dim",
            "default": "#FFD600",  # AMBER for defaults
            "required": "bold #EF4444",  # RED marker
            "children": "bold #36C5F0",  # Sky-blue subcommands
            "argument-description": "#9CA3AF",  # Muted gray
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), styles[style] if colorful else "")

        renders = [Text.assemble(
            text(self.name, "command-name"),
            *((" - ", text(self.description, "description")) if self.description else ()),
        )]

        def section(label, rows):
            table = Table.grid(padding=(0, 2))
            table.add_column(no_wrap=True)
            table.add_column()
            for row in rows:
                table.add_row(*row)
            renders.append(Text.assemble("  ", text(label, "group-label")))
            renders.append(Padding(table, (0, 0, 0, 4)))

        if self.options:
            rows = []
            for option in self.options:
                names = Text(", ").join([
                    text("--" + option.name, "option-name"),
                    *(text("--" + alias, "alias-name") for alias in option.aliases),
                ])
                notes = Text.assemble(
                    text(option.description, "argument-description"),
                    *((" ", text("[default: %s]" % option.default, "default")) if option.default is not None else ()),
                    *((" ", text("(required)", "required")) if option.required else ()),
                )
                rows.append((names, notes))
            section("Options:", rows)

        if self.subcommands:
            rows = []
            for subcommand in self.subcommands:
                names = Text(", ").join([
                    text(subcommand.name, "children"),
                    *(text(alias, "alias-name") for alias in subcommand.aliases),
                ])
                rows.append((names, text(subcommand.description, "argument-description")))
            section("Subcommands:", rows)

        console.print(Group(*renders))


def command(name, description=None, /, **kwargs):
    """
    Decorator: build a Command whose handler is the decorated function.

        @command("greet", "say hello", options=[Option.string("name", default="world")])
        def greet(command, cli, tokens, options):
            print("hello, %s!" % options["name"])

    Keyword arguments (aliases, options, subcommands) are forwarded to Command.
    """
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        return Command(name, description, handler, **kwargs)
    return wrapper


__all__ = (
    "ParsedOptions",
    "Command",
    "command",
)
