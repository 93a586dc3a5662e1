"""
Argsparser binder: resolve classified tokens against a schema.

Phases
- A (token order): every token is resolved to a provided flag, a coerced
  option value, or an argument error keyed by the token's input position.
  • UNKNOWN                 → "unexpected value: <text>"
  • FLAG without a name     → "flag received with no name"
  • FLAG not declared       → "unknown flag: <name>"
  • OPTION without a name   → "option received with no name"
  • OPTION not declared     → "unknown option: <name>"
  • OPTION not convertible  → "expected a value of type <typename>: <name>"
  A flag given twice is recorded once; an option given twice keeps its first
  position and takes the last convertible value.
- B (declaration order): missing options take their default; a required
  option with neither value nor default gets "<name> is required", unless it
  was supplied with a value that did not convert (already reported); every
  option holding a value runs its custom validator and each returned message
  becomes an expectation error for that name. Flags never produce
  expectation errors, required or not.

Nothing aborts early: the point is to report every problem in one pass.
"""
from types import MappingProxyType

from .coercion import coerce
from .faults import ErrorCollection, FaultCode
from .tokens import Classification


class Binding:
    """
    bound state produced by bind().

    - flags: provided flag names, discovery order, each once.
    - options: option name → coerced value; iteration follows declaration order.
    - argument_errors: ErrorCollection keyed by 1-based input position.
    - expectation_errors: ErrorCollection keyed by option name, ordered by declaration.
    """

    def __init__(self, schema, /):
        self._schema = schema
        self._flags = []
        self._options = {}
        self._rejected = set()
        self.argument_errors = ErrorCollection()
        self.expectation_errors = ErrorCollection(lambda name: schema.lookup(name).sequence)

    @property
    def flags(self):
        return tuple(self._flags)

    @property
    def options(self):
        return MappingProxyType({
            declaration.name: self._options[declaration.name]
            for declaration in self._schema.options
            if declaration.name in self._options
        })

    @property
    def has_errors(self):
        return bool(self.argument_errors) or bool(self.expectation_errors)

    def _flag(self, name):
        if name not in self._flags:
            self._flags.append(name)

    def _option(self, token):
        declaration = self._schema.lookup(token.name)
        ok, value = coerce(declaration.type, token.value)
        if not ok:
            self.argument_errors.append(
                token.index, "expected a value of type %s: %s" % (declaration.typename, declaration.name),
                code=FaultCode.UNCASTABLE_VALUE,
            )
            self._rejected.add(declaration.name)
            return
        self._options[declaration.name] = value

    def resolve(self, tokens):
        """
        phase A: resolve every classified token in input order.
        """
        for token in tokens:
            match token.classification:
                case Classification.UNKNOWN:
                    self.argument_errors.append(
                        token.index, "unexpected value: %s" % token.original, FaultCode.UNEXPECTED_VALUE
                    )
                case Classification.FLAG if not token.name:
                    self.argument_errors.append(token.index, "flag received with no name", FaultCode.UNNAMED_FLAG)
                case Classification.FLAG if not self._schema.is_known_flag(token.name):
                    self.argument_errors.append(token.index, "unknown flag: %s" % token.name, FaultCode.UNKNOWN_FLAG)
                case Classification.FLAG:
                    self._flag(token.name)
                case Classification.OPTION if not token.name:
                    self.argument_errors.append(token.index, "option received with no name", FaultCode.UNNAMED_OPTION)
                case Classification.OPTION if not self._schema.is_known_option(token.name):
                    self.argument_errors.append(token.index, "unknown option: %s" % token.name, FaultCode.UNKNOWN_OPTION)
                case Classification.OPTION:
                    self._option(token)
                case _:
                    pass

    def complete(self):
        """
        phase B: apply defaults, enforce required options, run custom validators.
        """
        for declaration in self._schema.options:
            if declaration.name in self._options:
                continue
            if declaration.has_default:
                self._options[declaration.name] = declaration.default
            elif declaration.required and declaration.name not in self._rejected:
                self.expectation_errors.append(
                    declaration.name, "%s is required" % declaration.name, FaultCode.MISSING_OPTION
                )

        for declaration in self._schema.options:
            if declaration.name not in self._options:
                continue
            if (validator := self._schema.validator(declaration.name)) is None:
                continue
            messages = validator(declaration.name, self._options[declaration.name]) or ()
            if isinstance(messages, str):
                messages = (messages,)
            for message in messages:
                self.expectation_errors.append(declaration.name, str(message), FaultCode.REJECTED_VALUE)


def bind(tokens, schema, /):
    """
    run both phases and return the resulting Binding.
    """
    binding = Binding(schema)
    binding.resolve(tokens)
    binding.complete()
    return binding


__all__ = (
    "Binding",
    "bind",
)
