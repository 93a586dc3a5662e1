import os
import sys
from datetime import datetime

from rich import print

from argsparser import *

__prog__ = "site-builder"

EXAMPLE = ["-serve", "-from", "15 APR 1980 GMT", "-verbose", "9999", "-write", "../output"]


def is_csv(name, value):
    if os.path.splitext(str(value))[1].lower() != ".csv":
        yield "-%s does not hold a CSV filename" % name


if __name__ == '__main__':
    indent = 2
    print("\n[bold]EXAMPLE APPLICATION[/bold]")

    parser = (
        Parser(sys.argv[1:] or EXAMPLE)
        .supports_option("port", int, "Port to start the dev server on", 1337)
        .requires_option("read", str, "Folder to read the site from", "site")
        .requires_option("write", str, "CSV file to write the result to")
        .requires_option("from", datetime, "Earliest date/time", "01 JAN 1980")
        .supports_flag("serve", "Start the site going in a dev server")
        .supports_flag("force", "Overwrite any destination content")
        .add_custom_validator("write", is_csv)
        .show_help_legend(True)
        .add_extra_help(
            "Notes:",
            "Specifying a port does nothing without adding the -serve flag.",
            "Choosing -force is potentially destructive!",
        )
        .help(indent, "Usage:")
        .parse()
        .show_provided(indent, "Provided:")
    )

    try:
        parser.check()
    except ParserExit as group:
        print()
        parser.show_errors(indent, "Issues:")
        print()
        print(group)
        sys.exit(1)

    if parser.is_flag_provided("serve"):
        print("serving %s on port %d" % (parser.get_option("read", str), parser.get_option("port", int)))
    print("writing to %s" % parser.get_option("write", str))
