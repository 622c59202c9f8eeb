"""
libcli options: named, value-bearing command options (--name[=value]).

Overview
- Option wraps one value parser (libcli.values) and adds the policy shared by all
  option kinds:
  • name and aliases (matched exactly, without the leading '--');
  • default (raw text, parsed with the option's own parser and cached by validate());
  • required (mutually exclusive with default);
  • delimiter (turns the option into an array of its kind, see ArrayValue);
  • failure: Failure.ERROR | Failure.IGNORE (what a bad value does);
  • multiple: Multiple.SET | Multiple.APPEND | Multiple.FAIL (what a repeated
    option does, applied by Command.parse_options).

Defining options
- Configuration path (keywords):
      Option.number("count", default="1", description="how many")
      Option.from_args({"kind": "string", "name": "name", "required": True})
- Builder path (fluent setters return the option):
      Option.string("id").set_delimiter(",").set_multiple("append")
Both paths converge on validate().

Safety
- Validation is not automatic. An unvalidated option can be used, but an invalid
  configuration (e.g. a misspelled policy) may then fail in surprising ways
  instead of with a clean InvalidConfigurationError.
"""
from enum import StrEnum

from .faults import *
from .utils import Unset, check_name
from .values import *


class Multiple(StrEnum):
    """
    what a repeated option does.

    - SET: the last occurrence wins.
    - APPEND: every occurrence is kept, in input order.
    - FAIL: a second occurrence is a DuplicateOptionError.
    """
    SET = "set"
    APPEND = "append"
    FAIL = "fail"


_KINDS = {
    "string": StringValue,
    "number": NumberValue,
    "boolean": BooleanValue,
}


def _invalid(message, **options):
    return InvalidConfigurationError(
        message,
        title="invalid configuration",
        code=FaultCode.INVALID_CONFIGURATION,
        **options
    )


class Option:
    """
    A named option for a command.

    Parameters
    - name: str
      the option name, without '--' (validated by check_name()).
    - inner: ValueParser
      parser for one value (StringValue, NumberValue, BooleanValue, ...).
    - aliases: Iterable[str]
      alternative names, matched exactly like the name.
    - default: str | None
      raw default, parsed like a value given on the command line.
    - delimiter: str | None
      when set, the option value is an array split on this delimiter.
    - description: str | None
      short help text.
    - failure: Failure | str
      "error" (default) or "ignore".
    - multiple: Multiple | str
      "fail" (default), "set" or "append".
    - required: bool
      parsing fails when the option is absent.
    """

    def __init__(
            self,
            name,
            inner,
            /,
            *,
            aliases=(),
            default=None,
            delimiter=None,
            description=None,
            failure=Failure.ERROR,
            multiple=Multiple.FAIL,
            required=False,
    ):
        self.name = name
        self.aliases = list(aliases)
        self.default = default
        self.delimiter = delimiter
        self.description = description
        self.failure = failure
        self.multiple = multiple
        self.required = required
        self._default = Unset
        self._inner = inner

    @classmethod
    def string(cls, name, /, **args):
        return cls(name, StringValue(), **args)

    @classmethod
    def number(cls, name, /, **args):
        return cls(name, NumberValue(), **args)

    @classmethod
    def boolean(cls, name, /, **args):
        return cls(name, BooleanValue(), **args)

    @classmethod
    def from_args(cls, args, /):
        """
        Build an option from a declarative mapping.

        The mapping holds the keyword arguments of Option plus 'name' and 'kind'
        ("string", "number" or "boolean"; "string" when omitted).

        Raises
        - InvalidConfigurationError for an unknown kind.
        - TypeError for unknown keys.
        """
        args = dict(args)
        kind = args.pop("kind", "string")
        try:
            inner = _KINDS[kind]()
        except (KeyError, TypeError):
            raise _invalid(
                "invalid `kind`: %r (valid values are %s)" % (kind, ", ".join(map(repr, _KINDS))),
                input=kind,
            ) from None
        return cls(args.pop("name", None), inner, **args)

    @property
    def inner(self):
        return self._inner

    @property
    def default_value(self):
        """The default parsed by validate(), or Unset."""
        return self._default

    def __repr__(self):
        return "option(name=%r, inner=%r, aliases=%r, default=%r, delimiter=%r, failure=%r, multiple=%r, required=%r)" % (
            self.name,
            self._inner,
            self.aliases,
            self.default,
            self.delimiter,
            str(self.failure),
            str(self.multiple),
            self.required,
        )

    def set_aliases(self, aliases, /):
        self.aliases = list(aliases)
        return self

    def add_alias(self, alias, /):
        self.aliases.append(alias)
        return self

    def set_default(self, default, /):
        """
        Set the raw default (parsed like a command-line value).

        The option becomes invalid if it is also required; see validate().
        """
        self.default = default
        self._default = Unset
        return self

    def set_delimiter(self, delimiter=",", /):
        """
        Make this an array option split on 'delimiter' ("," by default).

        Examples (string option)
        - set_delimiter(",") → '1,2,3' parses to ['1', '2', '3'], '1;2' to ['1;2']
        - set_delimiter("")  → '1,2,3' parses to ['1,2,3']
        """
        self.delimiter = delimiter
        return self

    def set_description(self, description, /):
        self.description = description
        return self

    def set_failure(self, failure, /):
        self.failure = failure
        return self

    def set_multiple(self, multiple, /):
        self.multiple = multiple
        return self

    def set_required(self, required=True, /):
        """
        Mark this option as required.

        The option becomes invalid if it also has a default; see validate().
        """
        self.required = required
        return self

    def matches(self, token, /):
        return token == self.name or token in self.aliases

    def parse_value(self, token, /):
        """
        Parse a raw value for this option.

        Returns
        - the parsed value;
        - Unset when the value failed to parse and failure is "ignore" (the option
          then behaves as if it had not been given).

        Raises
        - ValueParseError subclasses when failure is "error". With a delimiter, a
          missing value (bare '--name') is always an error.
        """
        if self.delimiter is not None:
            return ArrayValue(self._inner, self.delimiter, self.failure).parse_value(token)
        try:
            return self._inner.parse_value(token)
        except ValueParseError:
            if self.failure == Failure.IGNORE:
                return Unset
            raise

    def validate(self):
        """
        Check this option's configuration and cache its parsed default.

        Returns
        - self, so the call can end a builder chain.

        Raises
        - InvalidConfigurationError when:
          • the name or an alias is rejected by check_name();
          • there is no inner parser;
          • delimiter is neither None nor a string;
          • failure is not "error"/"ignore", multiple is not "set"/"append"/"fail";
          • the option is both required and has a default;
          • the default does not parse.
        """
        if reason := check_name(self.name):
            raise _invalid("invalid `name`: %r: %s" % (self.name, reason), input=self.name)

        for alias in self.aliases:
            if reason := check_name(alias):
                raise _invalid(
                    "invalid alias %r in `aliases` for option %r: %s" % (alias, self.name, reason),
                    input=alias,
                )

        if self._inner is None:
            raise _invalid("option %r is missing an inner parser for its values" % self.name)

        if self.delimiter is not None and not isinstance(self.delimiter, str):
            raise _invalid("invalid `delimiter`: %r (must be a string)" % (self.delimiter,))

        if self.failure not in Failure:
            raise _invalid("invalid `failure`: %r (valid values are 'error', 'ignore')" % (self.failure,))

        if self.multiple not in Multiple:
            raise _invalid("invalid `multiple`: %r (valid values are 'set', 'append', 'fail')" % (self.multiple,))

        if self.required and self.default is not None:
            raise _invalid("option %r cannot be required and have a default value at the same time" % self.name)

        if self.default is not None:
            try:
                self._default = self.parse_value(self.default)
            except ValueParseError as exception:
                raise _invalid(
                    "invalid `default`: %r (option %r): %s" % (self.default, self.name, exception.message),
                    input=self.default,
                ) from exception

        return self


__all__ = (
    "Multiple",
    "Option",
)
