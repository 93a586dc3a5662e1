"""
Argsparser argument declarations and the schema registry.

Overview
- ArgumentDeclaration: one declared option (value-bearing) or flag
  (presence-only), with its normalized name, declaration sequence, type,
  required marker, info text and optional default.
- Schema: the ordered registry of declarations plus at most one custom
  validator per option.

Metadata (sanitized on construction)
- name: normalized by utils.normalize(); must be non-empty, free of
  whitespace and must not start with a dash once the "-" / "--" prefix is gone.
- type: a python class. str, int, float, Decimal, bool and datetime are
  coerced from text; any other class is accepted but never coerced (OTHER).
- info: str | Text, short help (defaults to "").
- default: Unset or a value adapted to 'type' (see coercion.adapt); flags
  never carry a default.

Ordering
- 'sequence' is assigned by the Schema at registration time and drives every
  stable ordering (help, provided values, expectation errors). Alphabetical
  order is derivable through Schema.sorted_by_name().

Required flags
- a flag may be declared required; it is kept as declared but never produces
  an expectation error, since a missing flag just means "not provided". A
  RequiredFlagWarning is emitted so the host notices.
"""
import builtins
import functools
import operator
import re
import warnings
from types import MappingProxyType

from rich.text import Text

from .coercion import ValueType, adapt, typename, quoted
from .faults import *
from .utils import *


class DeclarationType(type):
    """
    Metaclass providing introspection for declaration classes.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      (backed by the "_<name>" attribute, see utils.mirror).
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in sanitization messages.
    - Provide stable __repr__/__rich_repr__ over __displayable__ (or
      __introspectable__ when unset).
    """
    __introspectable__ = ()
    __displayable__ = Unset

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

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, metadata, /):
    """
    Internal: normalize and validate the declared name in place.

    Raises
    - TypeError: name is not a string.
    - InvalidNameError: name is empty, contains whitespace or keeps a leading dash.
    """
    if not isinstance(metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    if not (name := normalize(metadata["name"])):
        raise InvalidNameError(f"{cls.__typename__} 'name' cannot be empty", name=metadata["name"])
    if re.search(r"\s", name):
        raise InvalidNameError(f"{cls.__typename__} 'name' cannot contain whitespace: {name!r}", name=name)
    if name.startswith("-"):
        raise InvalidNameError(
            f"{cls.__typename__} 'name' must use a '-' or '--' prefix at most: {metadata['name'].strip()!r}",
            name=name,
            hint="declare it as %r" % ("-" + name.lstrip("-")),
        )
    metadata["name"] = name


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate type, info, required and default in place.

    - type: must be a class; flags are always bool.
    - info: str or Text, stripped; Unset becomes "".
    - required: coerced to bool.
    - default: Unset, or a value adapt() accepts for the declared type. Flags
      cannot carry one.
    """
    if not isinstance(metadata["type"], builtins.type):
        raise TypeError(f"{cls.__typename__} 'type' must be a class")

    if not isinstance(info := metadata["info"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'info' must be a string")
    metadata["info"] = info.strip() if isinstance(info, str) else coalesce(info, "")

    metadata["required"] = bool(metadata["required"])

    if (default := metadata["default"]) is Unset:
        return
    if not metadata["expects_value"]:
        raise InvalidDefaultError(f"flag {metadata['name']!r} cannot have a default value", name=metadata["name"])

    ok, value = adapt(metadata["type"], default)
    if not ok:
        raise InvalidDefaultError(
            "default %r for %r is not a valid %s" % (default, metadata["name"], typename(metadata["type"])),
            name=metadata["name"],
            default=default,
        )
    metadata["default"] = value


class ArgumentDeclaration(metaclass=DeclarationType):
    """
    One declared option or flag (immutable once built).

    Properties
    - The names listed in __introspectable__ are exposed as read-only
      attributes mirroring the sanitized metadata.
    - kind, typename and quoted are derived from 'type'.
    """

    __introspectable__ = (
        "name",
        "sequence",
        "type",
        "kind",
        "typename",
        "required",
        "expects_value",
        "info",
        "default",
        "quoted",
    )

    __displayable__ = (
        "name",
        "sequence",
        "typename",
        "required",
        "expects_value",
        "info",
        "default",
    )

    def __new__(
            cls,
            name,
            sequence,
            /,
            type=str,
            info=Unset,
            *,
            required=False,
            expects_value=True,
            default=Unset
    ):
        """
        Construct a declaration.

        Parameters
        - name: str, normalized (see utils.normalize).
        - sequence: int, registration order (assigned by Schema).
        - type: class of the value; ignored for flags (always bool).
        - info: str | Text, short help.
        - required: bool; inert for flags.
        - expects_value: True for an option, False for a flag.
        - default: optional default, adapted to 'type'.
        """
        if not isinstance(sequence, int) or isinstance(sequence, bool) or sequence < 0:
            raise TypeError(f"{cls.__typename__} 'sequence' must be a non-negative integer")

        metadata = {
            "name": name,
            "sequence": sequence,
            "type": type if expects_value else bool,
            "info": info,
            "required": required,
            "expects_value": bool(expects_value),
            "default": default,
        }
        _sanitize_name(cls, metadata)
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._kind = ValueType.of(self.type)
        self._typename = typename(self.type)
        self._quoted = quoted(self.type)
        return self

    def __setattr__(self, name, value, /):
        if hasattr(self, "_quoted"):
            raise AttributeError(f"{type(self).__typename__} is read-only")
        super().__setattr__(name, value)

    @property
    def is_option(self):
        return self.expects_value

    @property
    def is_flag(self):
        return not self.expects_value

    @property
    def has_default(self):
        return self.default is not Unset


class Schema:
    """
    Ordered registry of argument declarations and custom validators.

    - declarations are stored in registration (sequence) order, keyed by
      normalized name; names are unique across options and flags.
    - at most one validator per declared option.
    - every query normalizes the name first, so "-Port", "--port" and "port"
      are the same entry.
    """

    def __init__(self):
        self._declarations = {}
        self._validators = {}

    def _declare(self, name, type, info, /, **options):
        declaration = ArgumentDeclaration(name, len(self._declarations), type, info, **options)
        if declaration.name in self._declarations:
            kind = "flag" if self._declarations[declaration.name].is_flag else "option"
            raise DuplicateArgumentError(
                "argument name %r is already in use by a %s" % (declaration.name, kind),
                name=declaration.name,
                hint="names are case-insensitive and ignore a leading '-' or '--'",
            )
        self._declarations[declaration.name] = declaration
        return declaration

    def declare_option(self, name, type=str, info=Unset, /, *, required=False, default=Unset):
        """
        register a value-bearing option and return its declaration.
        """
        return self._declare(name, type, info, required=required, expects_value=True, default=default)

    def declare_flag(self, name, info=Unset, /, *, required=False):
        """
        register a presence-only flag and return its declaration.
        """
        declaration = self._declare(name, bool, info, required=required, expects_value=False)
        if declaration.required:
            warnings.warn(RequiredFlagWarning(
                "flag %r is declared required but a missing flag is never an error" % declaration.name
            ), stacklevel=3)
        return declaration

    def register_validator(self, name, validator, /):
        """
        attach a custom validator to a declared option.

        the validator is called as validator(name, value) for options that end
        up with a value and returns an iterable of error messages.
        """
        key = normalize(name)
        if not self.is_known_option(key):
            raise UnknownArgumentError(
                "cannot add a validator for unknown option %r" % key,
                name=key,
                hint="declare the option before registering its validator",
            )
        if not callable(validator):
            raise TypeError("validator for %r must be callable" % key)
        if key in self._validators:
            raise DuplicateValidatorError("a validator for %r has already been added" % key, name=key)
        self._validators[key] = validator

    def get(self, name, default=None, /):
        return self._declarations.get(normalize(name), default)

    def lookup(self, name, /):
        """
        return the declaration for name, raising UnknownArgumentError when undeclared.
        """
        try:
            return self._declarations[key := normalize(name)]
        except KeyError:
            raise UnknownArgumentError("unknown argument: %s" % key, name=key) from None

    def is_known_option(self, name, /):
        return (declaration := self.get(name)) is not None and declaration.is_option

    def is_known_flag(self, name, /):
        return (declaration := self.get(name)) is not None and declaration.is_flag

    def validator(self, name, /):
        return self._validators.get(normalize(name))

    @property
    def validators(self):
        return MappingProxyType(self._validators)

    @property
    def declarations(self):
        return tuple(self._declarations.values())

    @property
    def options(self):
        return tuple(filter(operator.attrgetter("is_option"), self._declarations.values()))

    @property
    def flags(self):
        return tuple(filter(operator.attrgetter("is_flag"), self._declarations.values()))

    def sorted_by_name(self):
        return tuple(sorted(self._declarations.values(), key=operator.attrgetter("name")))

    def __contains__(self, name, /):
        return isinstance(name, str) and normalize(name) in self._declarations

    def __iter__(self):
        return iter(self.declarations)

    def __len__(self):
        return len(self._declarations)

    def __repr__(self):
        return f"schema({", ".join(map(repr, self._declarations))})"


__all__ = (
    "ArgumentDeclaration",
    "Schema",
)

# Not part of the public API.
del DeclarationType
