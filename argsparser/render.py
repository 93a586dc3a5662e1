"""
Argsparser renderers: help, provided values and errors on a rich console.

These renderers only read what a parser exposes (schema, get_provided(),
argument_errors, expectation_errors, legend, extras, colorful); they never
touch parsing state.

Layout
- help: one line per declaration, in declaration order.
    -name   typename  * info  [default]      (options)
    -name             * info                 (flags, aligned past the type column)
  '*' marks required entries. Below it an optional legend
  ("* is required, values in square brackets are defaults", only the parts
  that apply) and any extra help sections.
- provided: "-name value" per option and "-name" per flag, declaration order.
- errors: expectation errors (declaration order) first, then argument errors
  (input order), each argument error followed by its ordinal position.

Palette keys
- title, option-name, flag-name, typename, required, info, default, legend
- extra-title, extra-dot, extra
- provided-name, provided-value
- expectation-error, argument-error, position

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the parser is not colorful, styling is suppressed.
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset, ordinal


def _styler(parser):
    styles = defaultdict(str, {
        # === Headings ===
        "title": "bold #FFFFFF",  # Pure white headers

        # === Declarations ===
        "option-name": "bold #00E6FF",  # CYAN for options
        "flag-name": "bold #22C55E",  # GREEN for flags
        "typename": "bold #FFD600",  # AMBER for value types
        "required": "bold #FF4D94",  # MAGENTA-PINK marker
        "info": "#9CA3AF",  # Muted gray
        "default": "italic #36C5F0",  # SKY-BLUE defaults
        "legend": "#737373",  # Dim footer gray

        # === Extra help ===
        "extra-title": "bold #00E6FF",
        "extra-dot": "#00E6FF dim",
        "extra": "#D1D5DB",

        # === Provided ===
        "provided-name": "bold #00E6FF",
        "provided-value": "#E5E7EB",

        # === Errors ===
        "expectation-error": "bold #FFD600",  # Amber, a known option failed
        "argument-error": "bold #EF4444",  # Red, input made no sense
        "position": "#9CA3AF dim",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not parser.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    return text


def _padding(indent):
    if not isinstance(indent, int) or isinstance(indent, bool):
        raise TypeError("indent must be an integer")
    if indent < 0:
        raise ValueError(f"a negative indent ({indent}) is not allowed")
    return " " * indent


def _console(console, *, stderr=False):
    return Console(stderr=stderr, highlight=False) if console is Unset else console


def _titled(renders, title, pad, text):
    if title is not Unset:
        renders.insert(0, Text.assemble(pad, text(title, "title")))
    return renders


def help(parser, indent=0, title=Unset, /, *, console=Unset):
    """
    print every declared option and flag with its type, marker, info and default.
    """
    pad = _padding(indent)
    text = _styler(parser)
    schema = parser.schema
    if not len(schema):
        return

    width = max(len(declaration.name) for declaration in schema)
    types = max((len(declaration.typename) for declaration in schema.options), default=0)
    flags = width + (types + 2 if schema.options else 0)

    renders = []
    for declaration in schema.declarations:
        marker = text("*" if declaration.required else " ", "required")
        if declaration.is_option:
            default = f"[{declaration.default}]" if declaration.has_default else ""
            line = Text.assemble(
                pad,
                text("-" + declaration.name.ljust(width), "option-name"),
                "  ",
                text(declaration.typename.ljust(types), "typename"),
                "  ",
                marker,
                " ",
                text(declaration.info, "info"),
                "  " if default else "",
                text(default, "default"),
            )
        else:
            line = Text.assemble(
                pad,
                text("-" + declaration.name.ljust(flags), "flag-name"),
                "  ",
                marker,
                " ",
                text(declaration.info, "info"),
            )
        line.rstrip()
        renders.append(line)

    if parser.legend:
        legend = []
        if any(declaration.required for declaration in schema):
            legend.append("* is required")
        if any(declaration.has_default for declaration in schema.options):
            legend.append("values in square brackets are defaults")
        if legend:
            renders.append(Text())
            renders.append(Text.assemble(pad, text(", ".join(legend), "legend")))

    for heading, lines in parser.extras:
        renders.append(Text())
        renders.append(Text.assemble(pad, text(heading, "extra-title")))
        for line in lines:
            renders.append(Text.assemble(pad, text(" • ", "extra-dot"), text(line, "extra")))

    _console(console).print(Group(*_titled(renders, title, pad, text)))


def provided(parser, indent=0, title=Unset, /, *, console=Unset):
    """
    print the provided options (with values) and flags in declaration order.
    """
    pad = _padding(indent)
    text = _styler(parser)
    items = parser.get_provided()
    if not items:
        return

    width = max(map(len, items))
    renders = []
    for name, value in items.items():
        if value is None:
            renders.append(Text.assemble(pad, text("-" + name, "provided-name")))
        else:
            renders.append(Text.assemble(
                pad, text("-" + name.ljust(width), "provided-name"), " ", text(value, "provided-value")
            ))

    _console(console).print(Group(*_titled(renders, title, pad, text)))


def errors(parser, indent=0, title=Unset, /, *, console=Unset):
    """
    print expectation errors then argument errors, one message per line.
    """
    pad = _padding(indent)
    if not parser.has_errors:
        return
    text = _styler(parser)

    renders = []
    for _, message in parser.expectation_errors.messages():
        renders.append(Text.assemble(pad, text(message, "expectation-error")))
    for index, message in parser.argument_errors.messages():
        renders.append(Text.assemble(
            pad, text(message, "argument-error"), "  ", text("(%s argument)" % ordinal(index), "position")
        ))

    _console(console, stderr=True).print(Group(*_titled(renders, title, pad, text)))


__all__ = (
    "help",
    "provided",
    "errors",
)
