"""
clopts parse errors and their rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for the four ways a token
  stream can fail to parse.
- ParseError and its variants: raised by Args.parse() at the first problem;
  each carries the offending flag identity or the raw attempted input and knows
  how to render itself in a friendly, lowercased, actionable way.
- trigger(): surface a fault either by raising it or, in shell mode, by printing
  it to stderr with rich and exiting.
- getdoc(): optional description lookup for a code from the host application.

Variants
- NeedsValue(flag): a NECESSARY flag reached the end of its token and of the input
  without a value.
- ForbiddenValue(flag): a FORBIDDEN flag was given a value through '='.
- UnknownShortArgument(attempt): a short character, alone or in a cluster, matches
  no registered arg. attempt is the offending byte (int).
- UnknownArgument(attempt): a long name matches no registered arg. attempt is the
  raw bytes the user typed, which may not be valid text.

Integration
- The parser only raises. Hosts that want a diagnostic and an exit status catch
  ParseError and hand it to trigger(error, shell=True).
- Styles, program name, code labels and descriptions can be customized by the
  host through __styles__, __prog__, __codes__ and __docs__ in __main__.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes for parse errors (stable identifiers).

    the numeric range groups everything the option parser can report; spacing
    leaves room for future additions without reshuffling existing codes.
    normalize() allows host remapping to custom labels.
    """
    NEEDS_VALUE            = 11211
    FORBIDDEN_VALUE        = 11212
    UNKNOWN_SHORT_ARGUMENT = 11213
    UNKNOWN_ARGUMENT       = 11214

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _showbytes(data, /):
    return data.decode("utf-8", errors="backslashreplace")


class ParseError(Exception):
    """
    A problem with the user's input that meant it couldn't be parsed into a
    coherent list of arguments.

    Subclasses set `code` and `title` and provide `message` and `hint`.
    Two errors are equal when they are the same variant with the same payload.
    """
    code: FaultCode
    title: str

    def __init__(self, payload, /):
        super().__init__(payload)
        self._payload = payload

    @property
    def message(self):
        raise NotImplementedError

    @property
    def hint(self):
        raise NotImplementedError

    def __str__(self):
        return self.message

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self._payload)

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return type(self) is type(other) and self._payload == other._payload

    def __hash__(self):
        return hash((type(self).__name__, self._payload))

    def render(self, *, colorful=True, fancy=False):
        """
        Build a rich renderable: a header, the message, and a hint line.
        """
        main = __import__("__main__")

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

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = getattr(main, "__prog__", None) or os.path.basename(sys.argv[0]) or "clopts"

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint"))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __rich__(self):
        return self.render()


class NeedsValue(ParseError):
    """
    A flag that has to take a value was not given one.
    """
    code = FaultCode.NEEDS_VALUE
    title = "missing value"

    @property
    def flag(self):
        return self._payload

    @property
    def message(self):
        return "flag '%s' needs a value" % str(self.flag)

    @property
    def hint(self):
        return "pass a value after it (for example: %s <value>)" % self.flag


class ForbiddenValue(ParseError):
    """
    A flag that can't take a value *was* given one.
    """
    code = FaultCode.FORBIDDEN_VALUE
    title = "flag cannot take a value"

    @property
    def flag(self):
        return self._payload

    @property
    def message(self):
        return "flag '%s' cannot take a value" % str(self.flag)

    @property
    def hint(self):
        return "remove everything from '=' (for example: %s)" % self.flag


class UnknownShortArgument(ParseError):
    """
    A short argument, either alone or in a cluster, was not recognised.
    """
    code = FaultCode.UNKNOWN_SHORT_ARGUMENT
    title = "unknown short argument"

    @property
    def attempt(self):
        return self._payload

    @property
    def message(self):
        return "unknown short argument '%s'" % ("-" + _showbytes(bytes((self.attempt,))))

    @property
    def hint(self):
        return "short arguments can be clustered, so every character after '-' must be a known flag"


class UnknownArgument(ParseError):
    """
    A long argument was not recognised.

    The attempt is kept as raw bytes because the user's input may not be valid text.
    """
    code = FaultCode.UNKNOWN_ARGUMENT
    title = "unknown argument"

    @property
    def attempt(self):
        return self._payload

    @property
    def message(self):
        return "unknown argument '%s'" % ("--" + _showbytes(self.attempt))

    @property
    def hint(self):
        return "to pass a file whose name starts with '-', put it after '--'"


def trigger(fault, /, *, shell=False, colorful=True, fancy=False):
    """
    surface a parse error.

    contract
    - outside shell mode the fault is raised as-is.
    - in shell mode it is rendered to the stderr rich console and the process
      exits with status 1.
    """
    if not isinstance(fault, ParseError):
        raise TypeError("trigger() argument must be a parse error")
    if not shell:
        raise fault
    console.print(fault.render(colorful=colorful, fancy=fancy))
    sys.exit(1)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "NeedsValue",
    "ForbiddenValue",
    "UnknownShortArgument",
    "UnknownArgument",
    "trigger",
    "getdoc",
)
