"""
libcli utilities (internal helpers, carefully exposed)

Scope
- Core building blocks used across the package for consistent semantics.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the tokens/options/commands layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- check_name(name)
  • The name predicate shared by options, option aliases, commands and command aliases.
  • Returns the reason a name is rejected, or None when the name is valid.

- flatten(value)
  • Recursively flatten nested lists into a single flat list (used on retrieval of
    accumulated array values, never on storage).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> check_name("dry-run") is None
    True
    >>> check_name("-x")
    'must start and end with an alphanumeric character'
    >>> flatten([1, [2, [3]], 4])
    [1, 2, 3, 4]
"""
import functools
import re
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters and as the
    “no value” result of parsers running under an ignore policy.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    This returns the given object unless it is the Unset sentinel, in which case
    the provided default is returned. Falsey values like None, 0, "", or [] are
    preserved as-is; they are not treated as “unset”.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None   # None is preserved, not replaced
    """
    return object if object is not Unset else default


# ASCII only: str.isalnum() would also accept letters and digits from other scripts.
_ALLOWED = re.compile(r"[A-Za-z0-9_-]*")
_BOUNDED = re.compile(r"[A-Za-z0-9](?:.*[A-Za-z0-9])?", re.DOTALL)


def check_name(name, /):
    """
    Check whether a string is a valid option or command name.

    Rules (checked in this order, the first violation is reported)
    - the name must contain at least one character;
    - only ASCII letters, digits, hyphens and underscores are allowed;
    - the first and the last character must be ASCII alphanumeric
      (a single alphanumeric character satisfies both ends).

    Parameters
    - name: str | None
      candidate name, without any leading '--'.

    Returns
    - None when the name is valid.
    - str: a short, lowercased reason otherwise (callers prefix it with context).

    Examples
    - check_name("id")       -> None
    - check_name("dry_run")  -> None
    - check_name("")         -> "must contain at least one character"
    - check_name("a b")      -> "must only contain ASCII letters, numbers, hyphens, and underscores"
    - check_name("_private") -> "must start and end with an alphanumeric character"
    """
    if name is None or name == "":
        return "must contain at least one character"
    if not isinstance(name, str):
        return "must be a string"
    if not _ALLOWED.fullmatch(name):
        return "must only contain ASCII letters, numbers, hyphens, and underscores"
    if not _BOUNDED.fullmatch(name):
        return "must start and end with an alphanumeric character"
    return None


def flatten(object, /):
    """
    Recursively flatten nested lists/tuples into a new flat list.

    Non-sequence values (including strings) are leaves. A leaf passed at the top
    level is returned wrapped in a one-element list.
    """
    if not isinstance(object, list | tuple):
        return [object]
    flattened = []
    for item in object:
        flattened.extend(flatten(item))
    return flattened


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.

Notes
- Singleton: there is only one Unset instance (also across copy/deepcopy).
- Distinct from None: equality and identity checks must not treat it as None.
- Falsey: bool(Unset) is False, but it is not equivalent to None or 0.
"""


__all__ = (
    # Functions
    "coalesce",
    "check_name",
    "flatten",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
