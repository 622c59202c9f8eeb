"""
libcli value parsers: turn one raw option value into a typed value.

Every parser implements a single capability, parse_value(token), where token is
the raw text after '=' ('' for '--name='), or None when the option was given
bare ('--name'). Failures raise a ValueParseError subclass (see libcli.faults).

Parsers
- StringValue: identity; a bare option is an error.
- NumberValue: int for integer text, float otherwise; bare/empty/non-numeric text
  is an error.
- BooleanValue: a bare option means True; otherwise 'true'/'false' in any case.
- ArrayValue: splits the text on a literal delimiter and parses every element
  with another parser (composition: the array owns its element parser).

Array values are not a parser kind of their own for options: an option becomes
array-valued when it has a delimiter (see Option.parse_value).
"""
import math
from abc import ABC, abstractmethod
from enum import StrEnum

from .faults import *


class Failure(StrEnum):
    """
    what to do when a value fails to parse.

    - ERROR: surface the fault.
    - IGNORE: drop the value silently (the option, or the array element, is absent).
    """
    ERROR = "error"
    IGNORE = "ignore"


class ValueParser(ABC):
    kind = "value"

    @abstractmethod
    def parse_value(self, token, /):
        raise NotImplementedError

    def _missing(self):
        return MissingValueError(
            "missing value for %s option" % self.kind,
            title="missing value",
            code=FaultCode.MISSING_VALUE,
            hint="pass a value with '=' (for example: --name=value)",
        )

    def __repr__(self):
        return f"{type(self).__name__}()"


class StringValue(ValueParser):
    kind = "string"

    def parse_value(self, token, /):
        if token is None:
            raise self._missing()
        return token


class NumberValue(ValueParser):
    """
    Decimal numbers only: underscores and non-ASCII digits are rejected even
    though int() and float() accept them.
    """
    kind = "number"

    def parse_value(self, token, /):
        if token is None:
            raise self._missing()
        if token == "":
            raise EmptyValueError(
                "empty value for number option",
                title="empty value",
                code=FaultCode.EMPTY_VALUE,
                hint="add a number after '=' (for example: --count=3)",
            )
        value = math.nan
        if token.isascii() and "_" not in token:
            try:
                return int(token)
            except ValueError:
                pass
            try:
                value = float(token)
            except ValueError:
                pass
        if not math.isfinite(value):
            raise InvalidNumberError(
                "invalid number %r for number option" % token,
                title="invalid number",
                code=FaultCode.INVALID_NUMBER,
                input=token,
                hint="use a decimal number such as 42, -7 or 3.5",
            )
        return value


class BooleanValue(ValueParser):
    """
    Presence means True: '--verbose' parses to True without any value.
    """
    kind = "boolean"

    def parse_value(self, token, /):
        if token is None:
            return True
        match token.lower():
            case "true":
                return True
            case "false":
                return False
        raise InvalidBooleanError(
            "invalid boolean %r for boolean option" % token,
            title="invalid boolean",
            code=FaultCode.INVALID_BOOLEAN,
            input=token,
            hint="use true or false (any case), or pass the flag without a value",
        )


class ArrayValue(ValueParser):
    """
    Parse a delimited list of elements with an element parser.

    - None → fault (an array always needs '=').
    - ''   → [] (empty array).
    - delimiter '' → the whole text is one element.
    - otherwise the text is split on every literal occurrence of the delimiter, so
      leading, trailing and doubled delimiters produce empty elements:
          '1,2,3,' → ['1', '2', '3', '']
          ',1'     → ['', '1']
          '1,,2'   → ['1', '', '2']
      every element then goes through the element parser on its own.

    Under Failure.ERROR the first failing element aborts the whole array; under
    Failure.IGNORE failing elements are dropped and the others keep their order.
    """
    kind = "array"

    def __init__(self, element, delimiter=",", failure=Failure.ERROR):
        self.element = element
        self.delimiter = delimiter
        self.failure = Failure(failure)

    def __repr__(self):
        return f"{type(self).__name__}({self.element!r}, {self.delimiter!r}, {self.failure.value!r})"

    def parse_value(self, token, /):
        if token is None:
            raise self._missing()
        if token == "":
            return []

        elements = [token] if self.delimiter == "" else token.split(self.delimiter)
        values = []
        for element in elements:
            try:
                values.append(self.element.parse_value(element))
            except ValueParseError as exception:
                if self.failure is Failure.IGNORE:
                    continue
                raise ArrayElementError(
                    "failed to parse element %r for array option: %s" % (element, exception.message),
                    title="invalid array element",
                    code=FaultCode.ARRAY_ELEMENT,
                    input=element,
                    hint=exception.options.get("hint"),
                ) from exception
        return values


__all__ = (
    "Failure",
    "ValueParser",
    "StringValue",
    "NumberValue",
    "BooleanValue",
    "ArrayValue",
)
