"""
Argsparser parser: fluent declarations, single-shot parsing and result access.

Lifecycle
1) declare: requires_option(), supports_option(), supports_flag() and
   add_custom_validator() build the schema; each returns the parser.
2) parse(): tokenize the raw arguments and bind them against the schema.
   Parsing happens once; later calls return the parser untouched, and any
   further declaration raises ParsedError.
3) query: has_errors, is_flag_provided(), is_option_provided(), get_option(),
   get_provided(), get_provided_as_command_args(), and the two error
   collections.
4) report: help(), show_provided(), show_errors() print through rich;
   check() raises ParserExit when anything went wrong.

Before parse() the parser answers as if nothing was provided: options
resolve to their default (or the zero value of their type).

Example
    >>> parser = (
    ...     Parser(["-port", "3000", "-serve"])
    ...     .supports_option("port", int, "port to listen on", 1337)
    ...     .supports_flag("serve", "start the server")
    ...     .parse()
    ... )
    >>> parser.get_option("port", int)
    3000
    >>> parser.is_flag_provided("serve")
    True
"""
import shlex
import sys
from collections.abc import Iterable

from rich.text import Text

from . import render
from .arguments import Schema
from .binder import Binding, bind
from .coercion import zero
from .faults import *
from .tokens import tokenize
from .utils import *


def _arguments(arguments):
    """
    Internal: normalize the constructor input into a list of raw strings.

    - Unset: the current process arguments (sys.argv[1:]).
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: taken as-is; blank items are kept so input positions
      stay faithful (the tokenizer ignores them).
    """
    if arguments is Unset:
        return sys.argv[1:]
    if isinstance(arguments, str):
        return shlex.split(arguments)
    if not isinstance(arguments, Iterable):
        raise TypeError("Parser() argument must be a string or an iterable of strings")
    arguments = list(arguments)
    if not all(isinstance(argument, str) for argument in arguments):
        raise TypeError("Parser() argument must be a string or an iterable of strings")
    return arguments


def _quote(value):
    return '"%s"' % str(value).replace("\\", "\\\\").replace('"', '\\"')


class Parser:
    """
    command-line parser for typed options and boolean flags.

    keyword options
    - colorful: style help, provided and error listings (default True).
    """

    def __init__(self, arguments=Unset, /, *, colorful=True):
        self._arguments = tuple(_arguments(arguments))
        self._schema = Schema()
        self._binding = Binding(self._schema)
        self._parsed = False
        self._legend = True
        self._extras = []
        self._colorful = bool(colorful)

    arguments = mirror("arguments")
    schema = mirror("schema")
    parsed = mirror("parsed")
    legend = mirror("legend")
    colorful = mirror("colorful")

    @property
    def extras(self):
        return tuple(self._extras)

    # --- declarations ---

    def _unparsed(self, action):
        if self._parsed:
            raise ParsedError(
                "cannot %s after the arguments were parsed" % action,
                hint="declare every option, flag and validator before calling parse()",
            )

    def requires_option(self, name, type=str, info=Unset, /, default=Unset):
        """
        declare an option that must end up with a value (from input or default).
        """
        self._unparsed("declare %r" % name)
        self._schema.declare_option(name, type, info, required=True, default=default)
        return self

    def supports_option(self, name, type=str, info=Unset, /, default=Unset):
        """
        declare an option that may be omitted.
        """
        self._unparsed("declare %r" % name)
        self._schema.declare_option(name, type, info, default=default)
        return self

    def supports_flag(self, name, info=Unset, /, *, required=False):
        """
        declare a presence-only flag. a required flag is kept as declared but
        is never enforced (RequiredFlagWarning).
        """
        self._unparsed("declare %r" % name)
        self._schema.declare_flag(name, info, required=required)
        return self

    def add_custom_validator(self, name, validator, /):
        """
        attach validator(name, value) -> Iterable[str] to a declared option;
        every returned message becomes an expectation error.
        """
        self._unparsed("add a validator for %r" % name)
        self._schema.register_validator(name, validator)
        return self

    # --- parsing ---

    def parse(self):
        """
        tokenize and bind the arguments once; later calls are no-ops.

        an exception raised by a custom validator propagates to the caller; the
        parser still counts as parsed and keeps answering as if nothing was
        provided.
        """
        if self._parsed:
            return self
        self._parsed = True
        self._binding = bind(tokenize(self._arguments), self._schema)
        return self

    @property
    def has_errors(self):
        return self._binding.has_errors

    @property
    def argument_errors(self):
        return self._binding.argument_errors

    @property
    def expectation_errors(self):
        return self._binding.expectation_errors

    def check(self):
        """
        raise ParserExit holding one fault per error message, expectation
        faults first; return the parser when there is nothing to report.
        """
        if not self.has_errors:
            return self
        faults = [
            ExpectationFault(message, code=code, name=name, colorful=self._colorful)
            for name, message, code in self.expectation_errors.coded()
        ] + [
            ArgumentFault(message, code=code, index=index, colorful=self._colorful)
            for index, message, code in self.argument_errors.coded()
        ]
        raise ParserExit(faults, colorful=self._colorful)

    # --- queries ---

    def _declared(self, name, kind):
        if (declaration := self._schema.get(name)) is None or declaration.is_flag != (kind == "flag"):
            raise UnknownArgumentError(
                "unknown %s: %s" % (kind, normalize(name)),
                name=normalize(name),
                hint="declare it with %s" % ("supports_flag()" if kind == "flag" else "supports_option()"),
            )
        return declaration

    def is_flag_provided(self, name, /):
        return self._declared(name, "flag").name in self._binding.flags

    def is_option_provided(self, name, /):
        return self._declared(name, "option").name in self._binding.options

    def get_option(self, name, type=Unset, /):
        """
        return the value of an option: provided value, else default, else the
        zero value of its type.

        raises
        - UnknownArgumentError: the option was never declared.
        - IncorrectTypeError: 'type' is given and is not the declared type.
        """
        declaration = self._declared(name, "option")
        if type is not Unset and type is not declaration.type:
            raise IncorrectTypeError(
                "option %r holds a %s, not a %s" % (
                    declaration.name, declaration.typename, getattr(type, "__name__", repr(type))
                ),
                name=declaration.name,
                hint="ask for %s instead" % declaration.type.__name__,
            )
        if declaration.name in (options := self._binding.options):
            return options[declaration.name]
        return coalesce(declaration.default, zero(declaration.type))

    def get_provided(self):
        """
        return {name: value} for every provided item in declaration order;
        flags map to None.
        """
        options = self._binding.options
        provided = {}
        for declaration in self._schema.declarations:
            if declaration.is_flag and declaration.name in self._binding.flags:
                provided[declaration.name] = None
            elif declaration.is_option and declaration.name in options:
                provided[declaration.name] = options[declaration.name]
        return provided

    def get_provided_as_command_args(self):
        """
        serialize the provided items back into "-name value" / "-name" form.
        free-text values are double-quoted so shlex.split() gives them back.

        negative numbers are written bare ("-offset -1"); since the tokenizer
        reads any dash-prefixed argument as a flag, such output does not parse
        back to the same value.
        """
        arguments = []
        for name, value in self.get_provided().items():
            arguments.append("-" + name)
            if value is None:
                continue
            arguments.append(_quote(value) if self._schema.lookup(name).quoted else str(value))
        return " ".join(arguments)

    # --- rendering ---

    def show_help_legend(self, enabled=True, /):
        self._legend = bool(enabled)
        return self

    def add_extra_help(self, title, /, *lines):
        """
        add a titled, bulleted section printed below the help listing.
        """
        if not isinstance(title, str | Text):
            raise TypeError("extra help 'title' must be a string")
        if not all(isinstance(line, str | Text) for line in lines):
            raise TypeError("extra help lines must be strings")
        self._extras.append((title, lines))
        return self

    def help(self, indent=0, title=Unset, /, **options):
        render.help(self, indent, title, **options)
        return self

    def show_provided(self, indent=0, title=Unset, /, **options):
        render.provided(self, indent, title, **options)
        return self

    def show_errors(self, indent=0, title=Unset, /, **options):
        render.errors(self, indent, title, **options)
        return self

    def __repr__(self):
        return f"parser({" ".join(map(shlex.quote, self._arguments))!r}, parsed={self._parsed})"


__all__ = (
    "Parser",
)
