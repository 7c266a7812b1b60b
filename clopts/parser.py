"""
clopts option parser.

Syntax
- Long options: ``--inode``, ``--grid``
- Long options with values: ``--sort size``, ``--level=4``
- Short options: ``-i``, ``-G``
- Short options with values: ``-ssize``, ``-L=4``, ``-L 4``
- Clusters: ``-lssize`` is ``-l`` followed by ``-s size``
- ``--`` stops option parsing; everything after it is a free token.
- ``-`` on its own is a free token (conventionally standard input).

Bytes, not text
- Every token is handled as bytes. File names are not guaranteed to be valid
  text, so free tokens and values are returned exactly as given. str tokens are
  accepted and encoded with os.fsencode(), which round-trips undecodable names
  produced by the interpreter's surrogateescape handling.
- Long names are plain ASCII, so they are compared against the raw bytes
  without decoding anything.

Quick example:
    >>> from clopts import Arg, Args, TakesValue
    >>> LONG = Arg("long", short="l")
    >>> COUNT = Arg("count", short="c", takes_value=TakesValue.NECESSARY)
    >>> matches = Args(LONG, COUNT).parse(["-lc4", "file.txt"])
    >>> matches.flags.has(LONG), matches.flags.get(COUNT), matches.frees
    (True, b'4', (b'file.txt',))
"""
import os
import shlex
import sys
from collections.abc import Iterable

from .arguments import Arg, Long, Short, SpecType, TakesValue
from .faults import ForbiddenValue, NeedsValue, UnknownArgument, UnknownShortArgument
from .matches import MatchedFlags, Matches
from .utils import *


def split_on_equals(data, /):
    """
    Split on the first '=' and return the byte strings on either side.

    Returns None when there is no '=' or when either side would be empty:

        b"aaa=bbb"         → (b"aaa", b"bbb")
        b"this=that=other" → (b"this", b"that=other")
        b"=bbb", b"aaa="   → None
    """
    before, equals, after = data.partition(b"=")
    if equals and before and after:
        return before, after
    return None


def _tobytes(token):
    if isinstance(token, str):
        return os.fsencode(token)
    if isinstance(token, (bytes, bytearray)):
        return bytes(token)
    raise TypeError("parse() tokens must be bytes or strings")


class Args(metaclass=SpecType):
    """
    An ordered, immutable registry of Arg specs that owns the parsing algorithm.

    Long names are unique within a registry; short bytes are assumed unique and
    lookups simply take the first match in declaration order.
    """
    __introspectable__ = ("args",)

    def __init__(self, *args):
        longs = set()
        for arg in args:
            if not isinstance(arg, Arg):
                raise TypeError("args must be Arg instances")
            if arg.long in longs:
                raise ValueError("args cannot contain duplicated long names (%r)" % arg.long)
            longs.add(arg.long)
        self._args = args

    def lookup_short(self, short, /):
        """
        Find the arg whose short form is the given byte.

        Raises
        - UnknownShortArgument: when no arg has that short form.
        """
        for arg in self._args:
            if arg.short == short:
                return arg
        raise UnknownShortArgument(short)

    def lookup_long(self, long, /):
        """
        Find the arg whose long name equals the given raw bytes.

        Raises
        - UnknownArgument: carrying the raw bytes, when no arg has that name.
        """
        for arg in self._args:
            if arg.long.encode("ascii") == long:
                return arg
        raise UnknownArgument(bytes(long))

    def parse(self, inputs, /):
        """
        Iterate over the given command-line tokens and parse them into a list
        of matched flags and free tokens.

        Raises
        - TypeError: when inputs is a single string instead of an iterable of tokens.
        - ParseError: the first problem found. Nothing parsed so far is kept.
        """
        if isinstance(inputs, (str, bytes, bytearray)):
            raise TypeError("parse() inputs must be an iterable of tokens, not a single string")

        parsing = True

        # The results that get built up.
        flags = []
        frees = []

        # Advance the iterator manually whenever a flag that takes a value
        # doesn't have one in its own token and needs the next one.
        inputs = map(_tobytes, inputs)
        for token in inputs:

            if not parsing:
                frees.append(token)

            # "--" stops parsing, so a file named "--arg" can be given as "-- --arg".
            elif token == b"--":
                parsing = False

            # Two dashes: a long argument.
            elif token.startswith(b"--"):
                name = token[2:]

                # With an equals, the name is before it and the value after it.
                if split := split_on_equals(name):
                    before, after = split
                    arg = self.lookup_long(before)
                    flag = Long(arg.long)
                    if arg.takes_value is TakesValue.FORBIDDEN:
                        raise ForbiddenValue(flag)
                    flags.append((flag, after))

                # Without one, the whole remainder is the name.
                else:
                    arg = self.lookup_long(name)
                    flag = Long(arg.long)
                    if arg.takes_value is TakesValue.FORBIDDEN:
                        flags.append((flag, None))
                    elif (value := next(inputs, None)) is not None:
                        flags.append((flag, value))
                    else:
                        raise NeedsValue(flag)

            # One dash: one or more short arguments.
            elif token.startswith(b"-") and token != b"-":
                cluster = token[1:]

                # With an equals, only the character right before it takes the
                # value; the others must be value-less.
                #
                #   -x=abc      => 'x=abc'
                #   -abcdx=fgh  => 'a', 'b', 'c', 'd', 'x=fgh'
                #   -x=         => 'x' with the value '='
                if split := split_on_equals(cluster):
                    before, after = split

                    for byte in before[:-1]:
                        arg = self.lookup_short(byte)
                        flag = Short(byte)
                        if arg.takes_value is TakesValue.NECESSARY:
                            raise NeedsValue(flag)
                        flags.append((flag, None))

                    arg = self.lookup_short(before[-1])
                    flag = Short(before[-1])
                    if arg.takes_value is TakesValue.FORBIDDEN:
                        raise ForbiddenValue(flag)
                    flags.append((flag, after))

                # Without one, every character is its own short argument until
                # one takes a value: the rest of the token is that value, or the
                # next token when nothing is left.
                #
                #   -abc      => 'a', 'b', 'c'
                #   -abxdef   => 'a', 'b', 'x=def'
                #   -abx def  => 'a', 'b', 'x=def'
                #   -abx      =>  error
                else:
                    for index, byte in enumerate(cluster):
                        arg = self.lookup_short(byte)
                        flag = Short(byte)
                        if arg.takes_value is TakesValue.FORBIDDEN:
                            flags.append((flag, None))
                        elif remnants := cluster[index + 1:]:
                            flags.append((flag, remnants))
                            break
                        elif (value := next(inputs, None)) is not None:
                            flags.append((flag, value))
                        else:
                            raise NeedsValue(flag)

            # Otherwise it's a free token, usually a file name.
            else:
                frees.append(token)

        return Matches(frees, MatchedFlags(flags))


def parse(args, prompt=Unset, /):
    """
    Convenience runner: parse a prompt against a registry.

    Parameters
    - args: Args registry.
    - prompt:
      • Unset: parse sys.argv[1:].
      • str: shell-like string, split via shlex.split.
      • Iterable[str | bytes]: pre-tokenized sequence, used as-is (never trimmed).

    Raises
    - TypeError: when args is not an Args or the prompt has an unusable type.
    - ParseError: the first problem found in the tokens.
    """
    if not isinstance(args, Args):
        raise TypeError("parse() first argument must be an Args registry")

    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, bytes):
        raise TypeError("parse() argument must be a string or an iterable of tokens")
    elif isinstance(prompt, Iterable):
        tokens = prompt
    else:
        raise TypeError("parse() argument must be a string or an iterable of tokens")

    return args.parse(tokens)


__all__ = (
    "Args",
    "split_on_equals",
    "parse",
)
