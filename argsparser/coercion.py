"""
Argsparser type coercion.

Scope
- ValueType: the closed set of value kinds an option can carry (text, integer,
  number, boolean, datetime) plus OTHER for anything outside that set.
- coerce(): convert raw command-line text into the declared type.
- adapt(): bring a host-supplied default in line with the declared type.
- typename(), zero(), quoted(): display and accessor helpers keyed by type.

Contract
- coerce() and adapt() never raise for bad input. They return a pair
  (ok, value); on failure value is Unset so callers cannot confuse it with a
  legitimate None.
- OTHER is never convertible from text: an option declared with an unsupported
  type reports every supplied value as a type mismatch.
- Numbers follow python's own literal grammar: int() and float()
  accept surrounding whitespace, digit separators ("1_000") and unicode
  digits, and float() also takes "nan" and "inf". Anything they refuse is
  reported as a mismatch.

Datetime parsing
- ISO text first (datetime.fromisoformat), then a fixed table of strptime
  formats with textual month names ("15 APR 1980", "April 15, 1980") and slash
  dates ("1980/04/15", "04/15/1980"), each with an optional time component.
- A trailing zone indicator ("GMT", "UTC", "Z", "+01:00", "-0500") is accepted
  and discarded; results are always naive datetimes.
"""
import builtins
import datetime as _datetime
import itertools
import re
from decimal import Decimal, InvalidOperation
from enum import IntEnum

from .utils import Unset


class ValueType(IntEnum):
    """
    Kind of value an argument carries.

    The numbers are stable identifiers; OTHER is 0 so any unsupported type
    reads as falsey in quick guards.
    """
    OTHER    = 0
    TEXT     = 1
    INTEGER  = 2
    NUMBER   = 3
    BOOLEAN  = 4
    DATETIME = 5

    @classmethod
    def of(cls, type, /):
        """
        return the kind for a python type (exact match, subclasses are OTHER).
        """
        try:
            return _KINDS[type]
        except (KeyError, TypeError):
            return cls.OTHER


_KINDS = {
    str: ValueType.TEXT,
    int: ValueType.INTEGER,
    float: ValueType.NUMBER,
    Decimal: ValueType.NUMBER,
    bool: ValueType.BOOLEAN,
    _datetime.datetime: ValueType.DATETIME,
}

# Canonical python type used when a bare ValueType is given to coerce().
_CANONICAL = {
    ValueType.TEXT: str,
    ValueType.INTEGER: int,
    ValueType.NUMBER: float,
    ValueType.BOOLEAN: bool,
    ValueType.DATETIME: _datetime.datetime,
}

_TYPENAMES = {
    ValueType.TEXT: "text",
    ValueType.INTEGER: "integer",
    ValueType.NUMBER: "number",
    ValueType.BOOLEAN: "true/false",
    ValueType.DATETIME: "datetime",
}

_TRUTHY = frozenset({"true", "yes", "on", "1"})
_FALSY = frozenset({"false", "no", "off", "0"})

_DATES = (
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d-%b-%Y",
    "%d-%B-%Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m-%d",
)

_TIMES = (
    "",
    " %H:%M",
    " %H:%M:%S",
    " %I:%M %p",
    " %I:%M:%S %p",
    " %I %p",
    "T%H:%M",
    "T%H:%M:%S",
)

_FORMATS = tuple(date + time for date, time in itertools.product(_DATES, _TIMES))

# Alphabetic zones need a separating space and must not swallow AM/PM.
_ZONE = re.compile(r"(?:\s+(?!(?:am|pm)$)[a-z]{1,5}|\s*[+-]\d{2}(?::?\d{2})?)$", re.IGNORECASE)


def _text(raw):
    return True, raw


def _integer(raw):
    try:
        return True, int(raw)
    except ValueError:
        return False, Unset


def _float(raw):
    try:
        return True, float(raw)
    except ValueError:
        return False, Unset


def _decimal(raw):
    try:
        return True, Decimal(raw.strip())
    except InvalidOperation:
        return False, Unset


def _boolean(raw):
    match raw.strip().lower():
        case literal if literal in _TRUTHY:
            return True, True
        case literal if literal in _FALSY:
            return True, False
        case _:
            return False, Unset


def _strptime(text):
    try:
        return _datetime.datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError:
        pass
    for format in _FORMATS:
        try:
            return _datetime.datetime.strptime(text, format)
        except ValueError:
            continue
    return Unset


def _datetimes(raw):
    if not (text := " ".join(raw.split())):
        return False, Unset
    if (value := _strptime(text)) is not Unset:
        return True, value
    # zone indicators are accepted but not applied
    if (stripped := _ZONE.sub("", text)) and stripped != text:
        if (value := _strptime(stripped)) is not Unset:
            return True, value
    return False, Unset


_CONVERTERS = {
    str: _text,
    int: _integer,
    float: _float,
    Decimal: _decimal,
    bool: _boolean,
    _datetime.datetime: _datetimes,
}


def coerce(type, raw, /):
    """
    convert raw text into a value of the given type.

    parameters
    - type: a python type (str, int, float, Decimal, bool, datetime) or a ValueType.
      a ValueType selects its canonical python type (NUMBER means float).
    - raw: the text taken from the command line.

    returns
    - (True, value) on success.
    - (False, Unset) when the text does not convert or the type is unsupported.
    """
    if isinstance(type, ValueType):
        type = _CANONICAL.get(type, Unset)
    if not isinstance(raw, str):
        return False, Unset
    try:
        converter = _CONVERTERS[type]
    except (KeyError, TypeError):
        return False, Unset
    return converter(raw)


def adapt(type, value, /):
    """
    bring a declared default in line with the declared type.

    rules
    - text is run through coerce(), so "01 JAN 1980" is a valid datetime default.
    - a value already of the declared type is kept as-is.
    - integers (and floats, for Decimal) are widened for number types.
    - for unsupported types any instance of the type is accepted.

    returns
    - (True, value) when the default is usable, (False, Unset) otherwise.
    """
    kind = ValueType.of(type)
    if isinstance(value, str) and kind is not ValueType.OTHER:
        return coerce(type, value)
    match kind:
        case ValueType.INTEGER if isinstance(value, int) and not isinstance(value, bool):
            return True, value
        case ValueType.NUMBER if isinstance(value, int | float | Decimal) and not isinstance(value, bool):
            return True, (float(value) if type is float else Decimal(str(value)))
        case ValueType.BOOLEAN if isinstance(value, bool):
            return True, value
        case ValueType.DATETIME if isinstance(value, _datetime.datetime):
            return True, value
        case ValueType.OTHER if builtins.isinstance(type, builtins.type) and isinstance(value, type):
            return True, value
        case _:
            return False, Unset


def typename(type, /):
    """
    return the display name of a type: text, integer, number, true/false,
    datetime, or the lowercased python name for anything else.
    """
    try:
        return _TYPENAMES[ValueType.of(type)]
    except KeyError:
        return getattr(type, "__name__", repr(type)).lower()


def quoted(type, /):
    """
    whether values of this type are free text (shown and serialized quoted).
    """
    return ValueType.of(type) in (ValueType.TEXT, ValueType.DATETIME, ValueType.OTHER)


def zero(type, /):
    """
    zero value returned by accessors when an option has neither value nor default.
    """
    match ValueType.of(type):
        case ValueType.TEXT:
            return ""
        case ValueType.INTEGER:
            return 0
        case ValueType.NUMBER:
            return type(0)
        case ValueType.BOOLEAN:
            return False
        case ValueType.DATETIME:
            return _datetime.datetime.min
        case _:
            return None


__all__ = (
    "ValueType",
    "coerce",
    "adapt",
    "typename",
    "quoted",
    "zero",
)
