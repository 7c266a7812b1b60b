"""
clopts parse results.

Scope
- MatchedFlags: the ordered log of every flag occurrence together with its
  attached value (bytes) or None, exactly in the order given on the command line.
- Matches: the full outcome of one parse, free tokens plus matched flags.

Query semantics
- has(arg):   most recent first; true iff a value-less occurrence identifies arg.
- get(arg):   most recent first; the value of the first value-bearing occurrence
              identifying arg, so the last one given wins.
- count(arg): every occurrence identifying arg, valued or not.

Long and short occurrences share one log because "last wins" has to know where
they are in relation to one another: ``-c 1 --count 2`` resolves to b"2".

Note
- has() and get() do not re-check the value policy of the arg they are given:
  asking has() about a NECESSARY arg is always False, and get() about a
  FORBIDDEN arg is always None.
"""
from .arguments import Flag, SpecType


class MatchedFlags(metaclass=SpecType):
    """
    Queryable history of every flag occurrence in a parse.

    Properties
    - flags: tuple[tuple[Flag, bytes | None], ...] in encounter order.
    """
    __introspectable__ = ("flags",)

    def __init__(self, flags=(), /):
        flags = tuple(flags)
        for entry in flags:
            if not (
                isinstance(entry, tuple)
                and len(entry) == 2
                and isinstance(entry[0], Flag)
                and (entry[1] is None or isinstance(entry[1], bytes))
            ):
                raise TypeError("matched flags must be (Flag, bytes | None) pairs")
        self._flags = flags

    def has(self, arg, /):
        """
        Whether the given argument was specified without a value.
        """
        return any(
            value is None and flag.matches(arg)
            for flag, value in reversed(self._flags)
        )

    def get(self, arg, /):
        """
        If the given argument was specified with a value, return the latest one.
        The value is raw bytes and is not guaranteed to be valid text.
        """
        for flag, value in reversed(self._flags):
            if value is not None and flag.matches(arg):
                return value
        return None

    def count(self, arg, /):
        """
        Count the occurrences of the given argument.
        """
        return sum(1 for flag, _ in self._flags if flag.matches(arg))

    def __len__(self):
        return len(self._flags)

    def __iter__(self):
        return iter(self._flags)

    def __eq__(self, other):
        if not isinstance(other, MatchedFlags):
            return NotImplemented
        return self._flags == other._flags

    __hash__ = None


class Matches(metaclass=SpecType):
    """
    The result of parsing the user's command-line tokens.

    Properties
    - frees: tuple[bytes, ...], every token that was not matched as a flag or a
      flag's value, plus everything after the special "--" token.
    - flags: MatchedFlags parsed from the user's input.
    """
    __introspectable__ = ("frees", "flags")

    def __init__(self, frees=(), flags=None, /):
        frees = tuple(frees)
        if not all(isinstance(free, bytes) for free in frees):
            raise TypeError("free tokens must be bytes")
        if flags is None:
            flags = MatchedFlags()
        elif not isinstance(flags, MatchedFlags):
            flags = MatchedFlags(flags)
        self._frees = frees
        self._flags = flags

    def __eq__(self, other):
        if not isinstance(other, Matches):
            return NotImplemented
        return (self._frees, self._flags) == (other._frees, other._flags)

    __hash__ = None


__all__ = (
    "MatchedFlags",
    "Matches",
)
