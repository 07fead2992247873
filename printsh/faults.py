"""
printsh faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the
  package can surface. Codes are grouped by domain so logs and searches stay
  predictable:
  • construction (101xx): the command name or its argument entries are malformed.
  • configuration (102xx): an enumerated option received an unknown value.
  • execution (103xx): the spawned process failed, could not start, or its
    output did not follow the expected framing.
- CommandException: base type that carries a message plus context and knows
  how to render itself through rich (``console.print(fault)``).
- report(): print any fault to the stderr console.

Conventions
- Construction faults also derive from TypeError and configuration faults
  from ValueError, so generic ``except TypeError`` handlers keep working.
- Faults are raised where they are detected and never swallowed; callers
  branch on the concrete class (or ``fault.code``).
- Host applications may relabel codes with a ``__codes__`` mapping and restyle
  the rendering with a ``__styles__`` mapping, both read from ``__main__``.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - construction (101xx)
      • INVALID_COMMAND_NAME, INVALID_ARGUMENT_LIST, INVALID_ARGUMENT_ENTRY
    - configuration (102xx)
      • INVALID_CONFIGURATION
    - execution (103xx)
      • COMMAND_FAILED, LAUNCH_FAILED, TRUNCATED_STREAM,
        MISSING_TRAILING_NEWLINE, OUTPUT_CONSUMED
    """
    # --- construction errors (101xx) ---
    INVALID_COMMAND_NAME        = 10101
    INVALID_ARGUMENT_LIST       = 10102
    INVALID_ARGUMENT_ENTRY      = 10103

    # --- configuration errors (102xx) ---
    INVALID_CONFIGURATION       = 10201

    # --- execution errors (103xx) ---
    COMMAND_FAILED              = 10301
    LAUNCH_FAILED               = 10302
    TRUNCATED_STREAM            = 10303
    MISSING_TRAILING_NEWLINE    = 10304
    OUTPUT_CONSUMED             = 10305

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base class of every printsh fault.

    class attributes
    - code: FaultCode identifying the failure.
    - title: short, lowercase title used in the rendered header.
    - hint: one actionable sentence shown under the message.

    instances keep the message and a read-only mapping of context values
    (e.g. the entry index or the exit status) under ``context``.
    """
    code = None
    title = "command fault"
    hint = ""

    def __init__(self, message, /, **context):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.context = MappingProxyType(context)

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        header = Text.assemble(
            "[ ",
            (getattr(main, "__prog__", "printsh"), styles["prog-name"]),
            " — ",
            (self.code.normalize() if self.code is not None else "-----", styles["code"]),
            " | ",
            (self.title.title(), styles["error-title"]),
            " ]",
        )
        message = Text(self.message, styles["error-message"])
        if not self.hint:
            return Group(header, message)
        hint = Text.assemble((" → ", styles["hint-arrow"]), (self.hint, styles["hint"]))
        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(overrides.pop("message", self.message), **{**self.context, **overrides})


class InvalidCommandNameError(CommandException, TypeError):
    code = FaultCode.INVALID_COMMAND_NAME
    title = "invalid command name"
    hint = "pass the command as a non-empty string or path."


class InvalidArgumentListError(CommandException, TypeError):
    code = FaultCode.INVALID_ARGUMENT_LIST
    title = "invalid argument list"
    hint = "pass the arguments as a list (or tuple) of entries."


class InvalidArgumentEntryError(CommandException, TypeError):
    code = FaultCode.INVALID_ARGUMENT_ENTRY
    title = "invalid argument entry"
    hint = "each entry must be a string, a path, or a group of at least two of them."

    @property
    def index(self):
        return self.context.get("index")


class InvalidConfigurationError(CommandException, ValueError):
    code = FaultCode.INVALID_CONFIGURATION
    title = "invalid configuration"
    hint = "use one of the documented values for this option."


class CommandFailedError(CommandException):
    code = FaultCode.COMMAND_FAILED
    title = "command failed"
    hint = "inspect the command output above for the cause."

    @property
    def returncode(self):
        return self.context.get("returncode")


class LaunchError(CommandException):
    code = FaultCode.LAUNCH_FAILED
    title = "launch failed"
    hint = "check that the command exists and is executable."


class TruncatedStreamError(CommandException, ValueError):
    code = FaultCode.TRUNCATED_STREAM
    title = "truncated stream"
    hint = "the producer must terminate every record with a NUL character."


class MissingTrailingNewlineError(CommandException, ValueError):
    code = FaultCode.MISSING_TRAILING_NEWLINE
    title = "missing trailing newline"
    hint = "use trim=\"single-if-present\" when the newline is optional."


class OutputConsumedError(CommandException):
    code = FaultCode.OUTPUT_CONSUMED
    title = "output already consumed"
    hint = "spawn the command again to read its output a second time."


def report(fault, /, console=console):
    """
    print a fault through a rich console (stderr by default).

    contract
    - fault must be a CommandException; anything else is a programming error
      and raises TypeError instead of being rendered.
    """
    if not isinstance(fault, CommandException):
        raise TypeError("report() argument must be a command exception")
    console.print(fault)


__all__ = (
    "FaultCode",
    "CommandException",
    "InvalidCommandNameError",
    "InvalidArgumentListError",
    "InvalidArgumentEntryError",
    "InvalidConfigurationError",
    "CommandFailedError",
    "LaunchError",
    "TruncatedStreamError",
    "MissingTrailingNewlineError",
    "OutputConsumedError",
    "report",
)
