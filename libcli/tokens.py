r"""
libcli token stream: shell-like lexing with one token of lookahead.

Lexing rules
- Tokens are runs of characters separated by ASCII whitespace (a no-break space
  is part of a token).
      foo bar baz            → 'foo', 'bar', 'baz'
- A quote (" or ') keeps whitespace until the matching quote; the quotes themselves
  are dropped. A missing closing quote keeps everything up to the end of input.
      foo "bar baz"          → 'foo', 'bar baz'
      foo "bar baz           → 'foo', 'bar baz'
- A backslash takes the next character literally (quotes, backslashes, whitespace).
  A trailing backslash with nothing after it is a literal backslash.
      foo \"bar \baz\"       → 'foo', '"bar', 'baz"'
      foo bar\\baz           → 'foo', 'bar\baz'
      foo "bar \"baz\" qux"  → 'foo', 'bar "baz" qux'
- A token exactly equal to '--' is never returned: it marks the end of options and
  every later token is positional, even when it starts with '--'.
- A token that starts with '--' (before the end-of-options marker) is an option token:
      --name=value → ('name', 'value')
      --name=      → ('name', '')
      --name       → ('name', None)

The stream is lazy: characters are only lexed when a token is requested.
"""
import logging

from .faults import FaultCode, InvalidNameError
from .utils import check_name

logger = logging.getLogger(__name__)

# ASCII whitespace only; a no-break space stays inside a token.
_WHITESPACE = " \t\n\r\f\v"


class Tokens:
    """
    Lazy token stream over one raw input string.

    State
    - input: the raw string.
    - index: cursor of the next character to lex.
    - buffered token (at most one) used by peek() and by the option/non-option
      readers to push a token back, plus the cursor where that token started.
    - end_of_options: monotonic; once set by a '--' token it never resets.

    A Tokens instance belongs to a single run. Two instances built from the same
    input always yield the same token sequence.
    """

    def __init__(self, input="", /, validator=check_name):
        if not isinstance(input, str):
            raise TypeError("Tokens() argument must be a string")
        self.input = input
        self.index = 0
        self._validator = validator
        self._parsed = None
        self._mark = 0
        self._end_of_options = False

    @property
    def end_of_options(self):
        return self._end_of_options

    def __repr__(self):
        return f"{type(self).__name__}({self.input!r}, index={self.index})"

    def __iter__(self):
        while (token := self.next()) is not None:
            yield token

    def _lex(self):
        """
        Lex the next token from the input, or return None at end of input.

        Advances self.index past the token and the whitespace that ended it.
        """
        input = self.input
        length = len(input)
        while True:
            quote = None
            parts = []
            while self.index < length:
                char = input[self.index]
                if char == "\\":
                    if self.index + 1 == length:
                        parts.append("\\")
                        self.index += 1
                        break
                    parts.append(input[self.index + 1])
                    self.index += 2
                elif quote:
                    if char == quote:
                        quote = None
                    else:
                        parts.append(char)
                    self.index += 1
                elif char in "\"'":
                    quote = char
                    self.index += 1
                elif char in _WHITESPACE:
                    self.index += 1
                    if parts:
                        break
                else:
                    parts.append(char)
                    self.index += 1

            if not parts:
                return None

            token = "".join(parts)
            if token != "--":
                return token

            if not self._end_of_options:
                logger.debug("end of options reached at index %d", self.index)
            self._end_of_options = True

    def _push(self, token, mark):
        self._parsed = token
        self._mark = mark

    def next(self):
        """
        Consume and return the next token, or None when the input is exhausted.
        """
        if self._parsed is not None:
            token, self._parsed = self._parsed, None
            return token
        return self._lex()

    def peek(self):
        """
        Return the next token without consuming it (None at end of input).
        """
        if self._parsed is not None:
            return self._parsed
        mark = self.index
        token = self._lex()
        if token is not None:
            self._push(token, mark)
        return token

    def next_option_token(self):
        """
        Consume the next token if it is an option token.

        Returns
        - (name, value) where value is None when there is no '=' and '' when
          nothing follows it.
        - None when the next token is not an option (it stays in the stream),
          when the end of options was reached, or at end of input.

        Raises
        - InvalidNameError when the option name is rejected by the validator; the
          validator's reason is kept verbatim in the message.
        """
        if self._end_of_options:
            return None

        mark = self.index if self._parsed is None else self._mark
        token = self.next()
        if token is None:
            return None
        if self._end_of_options or not token.startswith("--"):
            self._push(token, mark)
            return None

        name, equals, value = token[2:].partition("=")
        if not equals:
            value = None

        if reason := self._validator(name):
            raise InvalidNameError(
                "invalid option name %r: %s" % (name, reason),
                title="invalid option name",
                code=FaultCode.INVALID_NAME,
                input=name,
                hint="option names look like --name or --name=value",
            )

        return name, value

    def next_option_tokens(self):
        """
        Consume every consecutive option token.

        Returns
        - list[tuple[str, str | None]] in input order.

        Raises
        - InvalidNameError from next_option_token(); the pairs read before the
          faulty token are attached as the 'accumulated' option.
        """
        options = []
        while True:
            try:
                option = self.next_option_token()
            except InvalidNameError as exception:
                raise InvalidNameError(exception.message, **{**exception.options, "accumulated": options}) from None
            if option is None:
                return options
            options.append(option)

    def next_non_option(self):
        """
        Consume the next token unless it is an option token.

        After the end of options every token is returned, whatever it looks like.
        Otherwise an option token is left in the stream and None is returned.
        """
        mark = self.index if self._parsed is None else self._mark
        token = self.next()
        if token is not None and (self._end_of_options or not token.startswith("--")):
            return token
        self._push(token, mark)
        return None

    def remaining(self):
        """
        Return the unconsumed tail of the raw input (a buffered token included).
        """
        if self._parsed is not None:
            return self.input[self._mark:]
        return self.input[self.index:]


__all__ = (
    "Tokens",
)
