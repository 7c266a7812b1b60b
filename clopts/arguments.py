r"""
clopts argument specifications and flag identities.

Overview
- TakesValue: whether an option must be followed by a value (NECESSARY) or must
  never carry one (FORBIDDEN). Applies to both the long and the short form.
- Arg: one installable option, e.g. ``Arg("count", short="c", takes_value=TakesValue.NECESSARY)``.
  • long: mandatory descriptive name, given without the leading dashes.
  • short: optional single byte (one ASCII character, one-byte bytes, or an int 0-255).
  • takes_value: TakesValue policy (FORBIDDEN by default).
- Flag identities (what the parser records for every occurrence)
  • Short(byte): matched through the short form, e.g. ``-c``.
  • Long(name): matched through the long form, e.g. ``--count``.
  Both are immutable, hashable, and know whether they identify a given Arg.

Introspection & representation
- SpecType metaclass derives __typename__, exposes the fields listed in
  __introspectable__ as read-only properties, and generates __repr__ and
  __rich_repr__ from them.

Validation highlights
- long must be a non-empty ASCII string, without '=' and without leading '-'.
- short must be a single byte other than '-' and '='.
- takes_value must be a TakesValue member.

Quick example:
    >>> from clopts.arguments import Arg, Long, Short, TakesValue
    >>> COUNT = Arg("count", short="c", takes_value=TakesValue.NECESSARY)
    >>> str(COUNT)
    '--count (-c)'
    >>> Short("c").matches(COUNT), Long("count").matches(COUNT)
    (True, True)
"""
import enum
import functools
import operator
import re
from collections import defaultdict

from rich.text import Text

from .utils import *


class SpecType(type):
    """
    Metaclass that makes specs and identities introspectable.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by the private "_{name}" slot (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations unless the class
      defines its own __repr__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in validation messages.
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
        )

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)

        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise representation, e.g. arg(long='count', short=99, ...).
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"

        if "__repr__" not in namespace:
            self.__repr__ = __repr__

        return self


class TakesValue(enum.Enum):
    """
    Whether a flag takes a value. Applies to both long and short arguments.
    """

    #: The flag has to be followed by a value.
    NECESSARY = "necessary"

    #: The flag is an error if a value is attached to it.
    FORBIDDEN = "forbidden"

    def __repr__(self):
        return f"{type(self).__name__}.{self.name}"


def _tobyte(object, what, /):
    """
    Normalize a short identifier into a single byte (int 0-255).

    Accepted forms: a one-character ASCII str, a one-byte bytes object, or an int.
    """
    if isinstance(object, bool):
        raise TypeError(f"{what} must be a single character, a single byte or an integer")
    if isinstance(object, int):
        if not 0 <= object <= 255:
            raise ValueError(f"{what} must fit in a single byte")
        return object
    if isinstance(object, str):
        if len(object) != 1 or not object.isascii():
            raise ValueError(f"{what} must be a single ascii character")
        return ord(object)
    if isinstance(object, (bytes, bytearray)):
        if len(object) != 1:
            raise ValueError(f"{what} must be a single byte")
        return object[0]
    raise TypeError(f"{what} must be a single character, a single byte or an integer")


def _showbyte(byte, /):
    """
    Render a short identifier for humans, escaping non-ascii bytes.
    """
    return bytes((byte,)).decode("ascii", errors="backslashreplace")


class Flag(metaclass=SpecType):
    """
    Identity of a matched option, independent of any value.

    A flag is either Short or Long because both kinds have to live in the same
    ordered log of matches. Only those two variants exist.
    """
    __slots__ = ()

    def __new__(cls, *args, **kwargs):
        if cls is Flag:
            raise TypeError("flag must be built as Short(...) or Long(...)")
        return super().__new__(cls)

    def matches(self, arg, /):
        """
        Whether this identity was produced by the given Arg.
        """
        raise NotImplementedError

    def _key(self):
        return tuple(getattr(self, name) for name in type(self).__introspectable__)

    def __eq__(self, other):
        if not isinstance(other, Flag):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__, self._key()))


class Short(Flag):
    """
    A flag matched through its short form, e.g. ``-l``.
    """
    __slots__ = ("_byte",)
    __introspectable__ = ("byte",)

    def __init__(self, byte, /):
        self._byte = _tobyte(byte, "short flag")

    def matches(self, arg, /):
        return arg.short == self._byte

    def __repr__(self):
        return "Short(%r)" % bytes((self._byte,))

    def __str__(self):
        return "-" + _showbyte(self._byte)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Short' is not an acceptable base type")


class Long(Flag):
    """
    A flag matched through its long form, e.g. ``--long``.
    """
    __slots__ = ("_name",)
    __introspectable__ = ("name",)

    def __init__(self, name, /):
        if not isinstance(name, str):
            raise TypeError("long flag must be a string")
        self._name = name

    def matches(self, arg, /):
        return arg.long == self._name

    def __repr__(self):
        return "Long(%r)" % self._name

    def __str__(self):
        return "--" + self._name

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Long' is not an acceptable base type")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the metadata of an Arg.

    Responsibilities
    - long: required non-empty ASCII string, without leading '-' and without '='.
      Long names are compared against raw input bytes, so they must be plain ASCII.
    - short: Unset or a single byte, normalized to an int; '-' and '=' are rejected
      because the tokenizer gives them a meaning of their own.
    - takes_value: must be a TakesValue member.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when a field has the right type but an unusable value.

    Side effects
    - Mutates the provided metadata dict in place.
    """
    if not isinstance(long := metadata["long"], str):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif not long:
        raise ValueError(f"{cls.__typename__} 'long' cannot be empty")
    elif not long.isascii():
        raise ValueError(f"{cls.__typename__} 'long' must be plain ascii")
    elif long.startswith("-"):
        raise ValueError(f"{cls.__typename__} 'long' must be given without leading dashes")
    elif "=" in long:
        raise ValueError(f"{cls.__typename__} 'long' cannot contain '='")

    if (short := metadata["short"]) is not Unset:
        short = _tobyte(short, f"{cls.__typename__} 'short'")
        if short in b"-=":
            raise ValueError(f"{cls.__typename__} 'short' cannot be {_showbyte(short)!r}")
    metadata["short"] = coalesce(short)

    if not isinstance(metadata["takes_value"], TakesValue):
        raise TypeError(f"{cls.__typename__} 'takes_value' must be a TakesValue")


class Arg(metaclass=SpecType):
    """
    An argument that can be matched by one of the user's input tokens.

    Properties
    - long: str, the descriptive name (all flags have one).
    - short: int | None, the single byte of the short form, if any.
    - takes_value: TakesValue policy.

    Specs are created once at configuration time, are immutable, and outlive
    every parse that uses them.
    """
    __slots__ = ("_long", "_short", "_takes_value")
    __introspectable__ = ("long", "short", "takes_value")

    def __init__(self, long, /, short=Unset, takes_value=TakesValue.FORBIDDEN):
        metadata = {
            "long": long,
            "short": short,
            "takes_value": takes_value,
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            super().__setattr__("_" + name, object)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    def __reduce__(self):
        return type(self), (self.long, Unset if self.short is None else self.short, self.takes_value)

    def __eq__(self, other):
        if not isinstance(other, Arg):
            return NotImplemented
        return (self.long, self.short, self.takes_value) == (other.long, other.short, other.takes_value)

    def __hash__(self):
        return hash((self.long, self.short, self.takes_value))

    def __str__(self):
        if self.short is None:
            return "--" + self.long
        return "--%s (-%s)" % (self.long, _showbyte(self.short))

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "arg-long": "bold #00E5FF",  # neon cyan long name
            "arg-short": "#9CE19C",  # gentle green short alias
        } | getattr(main, "__styles__", {}))

        if self.short is None:
            return Text("--" + self.long, styles["arg-long"])
        return Text.assemble(
            ("--" + self.long, styles["arg-long"]),
            " (",
            ("-" + _showbyte(self.short), styles["arg-short"]),
            ")",
        )


__all__ = (
    # Types
    "TakesValue",
    "Flag",
    "Short",
    "Long",
    "Arg",
)
