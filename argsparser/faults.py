"""
Argsparser faults (errors, warnings, error collections) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the library
  can surface, grouped by domain so logs and searches stay predictable.
- ErrorCollection: ordered key → messages store used for the two runtime
  collections (argument errors keyed by input position, expectation errors
  keyed by option name). Messages stack per key and are never overwritten.
- ParserException: base type that carries message + options and knows how to
  render itself (rich) in a friendly, lowercased, and actionable way.
- Misuse exceptions raised immediately at the call site:
  • declaration-time: DuplicateArgumentError, InvalidNameError,
    InvalidDefaultError, DuplicateValidatorError, ParsedError.
  • accessor-time: UnknownArgumentError, IncorrectTypeError.
- Runtime faults (never raised by parse itself): ArgumentFault and
  ExpectationFault, bundled into ParserExit by Parser.check().
- ParserWarning / RequiredFlagWarning: non-fatal notices through warnings.warn.

Propagation policy
- user-input problems are accumulated in ErrorCollections; the host decides
  whether to abort after looking at has_errors (or by calling check()).
- host misuse is raised immediately; the builtin base classes (ValueError,
  LookupError, TypeError, RuntimeError) keep plain except clauses working.
"""
import copy
from collections import defaultdict
from collections.abc import Mapping
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, ordinal


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - argument errors (111xx): input that cannot be attributed to a declared name
      • UNEXPECTED_VALUE, UNNAMED_FLAG, UNKNOWN_FLAG, UNNAMED_OPTION,
        UNKNOWN_OPTION, UNCASTABLE_VALUE
    - expectation errors (112xx): a declared option failed a requirement
      • MISSING_OPTION, REJECTED_VALUE
    - declaration errors (211xx): the host built an invalid schema
      • DUPLICATED_ARGUMENT, INVALID_NAME, INVALID_DEFAULT,
        DUPLICATED_VALIDATOR, ALREADY_PARSED
    - accessor errors (212xx): the host queried in disagreement with its schema
      • UNKNOWN_ARGUMENT, INCORRECT_TYPE
    - warnings (12xxx)
      • REQUIRED_FLAG

    normalize() lets the host remap codes to custom labels through a __codes__
    mapping in __main__ while the numbers stay stable.
    """
    # --- argument errors (111xx) ---
    UNEXPECTED_VALUE     = 11101
    UNNAMED_FLAG         = 11102
    UNKNOWN_FLAG         = 11103
    UNNAMED_OPTION       = 11104
    UNKNOWN_OPTION       = 11105
    UNCASTABLE_VALUE     = 11106

    # --- expectation errors (112xx) ---
    MISSING_OPTION       = 11201
    REJECTED_VALUE       = 11202

    # --- declaration errors (211xx) ---
    DUPLICATED_ARGUMENT  = 21101
    INVALID_NAME         = 21102
    INVALID_DEFAULT      = 21103
    DUPLICATED_VALIDATOR = 21104
    ALREADY_PARSED       = 21105

    # --- accessor errors (212xx) ---
    UNKNOWN_ARGUMENT     = 21201
    INCORRECT_TYPE       = 21202

    # --- warnings (12xxx) ---
    REQUIRED_FLAG        = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ErrorCollection(Mapping):
    """
    ordered mapping of key → stacked messages.

    - keys iterate in a stable order given by the 'order' key function
      (input position for argument errors, declaration sequence for
      expectation errors); ties keep insertion order.
    - values are tuples of messages in the order they were appended.
    - append() is the only mutator and is used by the binder; hosts get a
      read-only mapping interface.
    """

    def __init__(self, order=None, /):
        self._order = order
        self._entries = {}
        self._codes = {}

    def append(self, key, message, /, code=Unset):
        if not isinstance(message, str):
            raise TypeError("error messages must be strings")
        self._entries.setdefault(key, []).append(message)
        self._codes.setdefault(key, []).append(code)

    def _keys(self):
        if self._order is None:
            return list(self._entries)
        return sorted(self._entries, key=self._order)

    def __getitem__(self, key, /):
        return tuple(self._entries[key])

    def __iter__(self):
        return iter(self._keys())

    def __len__(self):
        return len(self._entries)

    def __eq__(self, other, /):
        if isinstance(other, ErrorCollection):
            return list(self.items()) == list(other.items())
        return super().__eq__(other)

    __hash__ = None

    @property
    def total(self):
        """
        number of messages across all keys.
        """
        return sum(map(len, self._entries.values()))

    def messages(self):
        """
        yield (key, message) pairs, flattened in key order.
        """
        for key in self._keys():
            for message in self._entries[key]:
                yield key, message

    def coded(self):
        """
        yield (key, message, code) triples, flattened in key order.
        """
        for key in self._keys():
            yield from ((key, message, code) for message, code in zip(self._entries[key], self._codes[key]))

    def __repr__(self):
        return f"{type(self).__name__}({dict(self.items())!r})"


def _prog(options):
    return str(options.get("prog", getattr(__import__("__main__"), "__prog__", "argsparser")))


def _palette(**overrides):
    return defaultdict(str, overrides | getattr(__import__("__main__"), "__styles__", {}))


def _message(fault, /):
    return fault.message if fault.message is not Unset else ""


class ParserException(Exception):
    """
    base exception carrying a message plus free-form rendering options.

    options
    - code: FaultCode (defaults to the class' 'code').
    - title: short headline (defaults to the class' 'title').
    - hint: one actionable sentence.
    - colorful: style the rendering (default True).
    - fancy: wrap the rendering in a panel (default False).
    - any extra context (index, name, declaration, ...).
    """
    code = Unset
    title = "parser error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)
        if "code" in options:
            self.code = options["code"]
        if "title" in options:
            self.title = options["title"]

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = _palette(**{
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), "prog-name"),
            " — ",
            text(self.code.normalize() if self.code else "", "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        renders = [text(_message(self), "error-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


# --- declaration-time ---
class DuplicateArgumentError(ParserException, ValueError):
    code = FaultCode.DUPLICATED_ARGUMENT
    title = "duplicated argument"


class InvalidNameError(ParserException, ValueError):
    code = FaultCode.INVALID_NAME
    title = "invalid argument name"


class InvalidDefaultError(ParserException, ValueError):
    code = FaultCode.INVALID_DEFAULT
    title = "invalid default value"


class DuplicateValidatorError(ParserException, ValueError):
    code = FaultCode.DUPLICATED_VALIDATOR
    title = "duplicated validator"


class ParsedError(ParserException, RuntimeError):
    code = FaultCode.ALREADY_PARSED
    title = "arguments already parsed"


# --- accessor-time ---
class UnknownArgumentError(ParserException, LookupError):
    code = FaultCode.UNKNOWN_ARGUMENT
    title = "unknown argument"


class IncorrectTypeError(ParserException, TypeError):
    code = FaultCode.INCORRECT_TYPE
    title = "incorrect type"


# --- runtime (reported, never raised by parse) ---
class ArgumentFault(ParserException):
    """
    one argument error, positioned by its 1-based input index.
    """
    title = "argument error"

    @property
    def index(self):
        return self.options.get("index")

    def __rich__(self):
        if self.index is None or "hint" in self.options:
            return super().__rich__()
        return copy.replace(self, hint="check the %s argument" % ordinal(self.index)).__rich__()


class ExpectationFault(ParserException):
    """
    one expectation error, attributed to a declared option name.
    """
    title = "expectation error"

    @property
    def name(self):
        return self.options.get("name")


class ParserExit(ExceptionGroup):
    """
    group of runtime faults raised by Parser.check() after a failed parse.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad arguments", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad arguments", tuple(exceptions))
        self.options = MappingProxyType(options)

    def derive(self, exceptions, /):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = _palette(**{
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title
        })

        def text(fragment, style=""):
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ", text(_prog(self.options), "prog-name"), " — ", text(self.message.title(), "title"), " ]"
        )
        renders = [copy.replace(exception, colorful=colorful) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


class ParserWarning(Warning):
    """
    base category for non-fatal notices about how the schema was declared.
    """
    code = Unset


class RequiredFlagWarning(ParserWarning):
    code = FaultCode.REQUIRED_FLAG


__all__ = (
    "FaultCode",
    "ErrorCollection",
    "ParserException",
    "DuplicateArgumentError",
    "InvalidNameError",
    "InvalidDefaultError",
    "DuplicateValidatorError",
    "ParsedError",
    "UnknownArgumentError",
    "IncorrectTypeError",
    "ArgumentFault",
    "ExpectationFault",
    "ParserExit",
    "ParserWarning",
    "RequiredFlagWarning",
)
