"""
interactive argument grouping: ``python -m printsh NAME [ARGS...]``.

asks on stderr, for every flag followed by a value, whether the two form a
group; then prints Python source that rebuilds the command to stdout and the
rendered command to stderr.
"""
import sys

from rich.console import Console
from rich.prompt import Confirm
from rich.text import Text

from .commands import Command
from .faults import CommandException, report
from .grouping import describe_pair, group_arguments, to_source


def main(argv=None, /, console=None):
    console = Console(stderr=True) if console is None else console
    arguments = sys.argv[1:] if argv is None else list(argv)
    if not arguments:
        console.print("usage: python -m printsh NAME [ARGS...]", markup=False)
        return 2
    name, *tokens = arguments

    def confirm(pair):
        question = Text.assemble("Is this an arg pair? ", (describe_pair(pair), "bold blue"))
        return Confirm.ask(question, default=True, console=console)

    try:
        command = Command(name, group_arguments(tokens, confirm))
    except CommandException as fault:
        report(fault, console)
        return 1
    print(to_source(command))
    command.print(stream=console.file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
