"""
printsh command layer: one immutable object for printing and running a command.

What this module provides
- Command: a command name plus validated argument entries, with
  • render()/print(): the safely quoted, laid-out text of the command.
  • flatten_arguments()/command_and_flat_args()/flat_command(): the exact argv.
  • spawn() and friends: run the very same argv through printsh.spawning.

Core ideas
- One source of truth: printing and execution both start from the flattened
  entries, so what is shown is what runs.
- Fail fast: a bad name or a bad entry raises at construction, never later.
- Immutable: stdin() returns a new Command; render options are per call.

Quick start
    from printsh import Command

    rsync = Command("rsync", [
        "-avz",
        ["--exclude", ".DS_Store"],
        ["--exclude", ".git"],
        "./dist/",
        "host:~/deploy/",
    ])
    rsync.print()          # to stderr, bold gray when stderr is a terminal
    rsync.shell_out()      # run with inherited stdio, raise on failure

See also
- printsh.printing for the escaping and layout rules.
- printsh.faults for fault codes and rendering.
"""
import sys
from enum import StrEnum

from rich.console import Console

from .arguments import Arguments
from .faults import InvalidCommandNameError, InvalidConfigurationError
from .printing import LineWrapping, PrintOptions, render, resolve
from .spawning import Output, spawn, stdin_source
from .utils import Unset, fspath, mirror

TTY_AUTO_STYLE = "bold bright_black"


class AutoStyle(StrEnum):
    """
    when print() styles its output on its own.

    - TTY: only when the stream is a terminal and no style was requested.
    - NEVER: never.
    """
    TTY = "tty"
    NEVER = "never"


def _auto_style():
    return getattr(__import__("__main__"), "__styles__", {}).get("command", TTY_AUTO_STYLE)


def _reject(options, *fields):
    for field in fields:
        if field in options:
            raise InvalidConfigurationError(f"unexpected `{field}` field", field=field)


class Command:
    """
    A printable, runnable shell command.

    Lifecycle
    - Constructed once from a name (str or os.PathLike) and an optional
      sequence of entries (str, os.PathLike, or groups of ≥ 2 of them).
    - Reused for any number of render/flatten/spawn calls; nothing on the
      object changes after construction.

    Raises (at construction)
    - InvalidCommandNameError: the name is not a non-empty str/path.
    - InvalidArgumentListError: entries is not a sequence.
    - InvalidArgumentEntryError: an entry is malformed (carries its index).
    """
    __slots__ = ("_name", "_arguments", "_stdin")

    name = mirror("name")
    arguments = mirror("arguments")

    def __init__(self, name, entries=(), /):
        if (command := fspath(name)) is None:
            raise InvalidCommandNameError(
                f"command name must be a string or a path, not {type(name).__name__!r}"
            )
        if not command:
            raise InvalidCommandNameError("command name must not be empty")
        object.__setattr__(self, "_name", command)
        object.__setattr__(self, "_arguments", Arguments(entries))
        object.__setattr__(self, "_stdin", None)

    def __setattr__(self, name, value, /):
        raise AttributeError("'Command' object is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("'Command' object is immutable")

    @property
    def entries(self):
        """the validated entries (Scalar/Group), in order."""
        return tuple(self._arguments)

    def __repr__(self):
        return f"Command({self._name!r}, {list(self._arguments)!r})"

    def __rich_repr__(self):
        yield self._name
        yield list(self._arguments)

    def __eq__(self, other, /):
        if not isinstance(other, Command):
            return NotImplemented
        return (self._name, self._arguments, self._stdin) == (other._name, other._arguments, other._stdin)

    def __hash__(self):
        return hash((self._name, self._arguments))

    def flatten_arguments(self):
        """the argv tail (without the name), exactly as it is executed."""
        return self._arguments.flatten()

    def command_and_flat_args(self):
        """``(name, argv tail)``: the canonical argv pair for any execution backend."""
        return self._name, self._arguments.flatten()

    def flat_command(self):
        """``(name, *argv tail)`` as a single tuple."""
        return (self._name, *self._arguments.flatten())

    def render(self, options=None, /, **overrides):
        """
        return the printable, escaped, laid-out command text (no trailing newline).

        `options` is a PrintOptions (or None); keyword overrides replace single
        fields, e.g. ``render(argument_line_wrapping="inline")``.
        """
        return render(self._name, self._arguments, resolve(options, **overrides))

    def print(self, options=None, /, *, stream=None, auto_style=AutoStyle.TTY, **overrides):
        """
        write the rendered command and a newline to `stream` (stderr by default).

        When no style is requested and auto_style is "tty", the text is styled
        bold gray if the stream is an interactive terminal. The host can change
        that style with ``__styles__["command"]`` on __main__.

        Returns the command, for chaining.
        """
        stream = sys.stderr if stream is None else stream
        options = resolve(options, **overrides)
        try:
            auto_style = AutoStyle(auto_style)
        except ValueError:
            raise InvalidConfigurationError(
                f"invalid value for auto_style: {auto_style!r}", field="auto_style", value=auto_style
            ) from None
        if options.style is None and auto_style is AutoStyle.TTY and Console(file=stream).is_terminal:
            options = options._replace(style=_auto_style())
        stream.write(self.render(options))
        stream.write("\n")
        return self

    def stdin(self, *, text=Unset, json=Unset, path=Unset, stream=Unset):
        """
        return a copy of this command that feeds one source to the child's stdin.

        Exactly one of text (str), json (any JSON-serializable value), path
        (str/os.PathLike) or stream (readable file object) must be given.
        """
        source = stdin_source(text=text, json=json, path=path, stream=stream)
        command = type(self).__new__(type(self))
        object.__setattr__(command, "_name", self._name)
        object.__setattr__(command, "_arguments", self._arguments)
        object.__setattr__(command, "_stdin", source)
        return command

    def spawn(self, **options):
        """
        start the command and return a Spawned record.

        options: stdio ("pipe" by default), cwd, env, detached. A stdin
        source set with stdin() overrides the stdin slot of stdio.
        """
        return spawn(*self.command_and_flat_args(), stdin=self._stdin, **options)

    def spawn_transparently(self, **options):
        """
        spawn with inherited stdio, so the child talks to the user directly.

        the `stdio` option is rejected.
        """
        _reject(options, "stdio")
        stdio = ("pipe" if self._stdin is not None else "inherit", "inherit", "inherit")
        return self.spawn(stdio=stdio, **options)

    def spawn_detached(self, **options):
        """
        start the command in a new session with stdio ignored, without waiting.

        similar to starting a command in the background and disowning it.
        the `stdio` and `detached` options are rejected.
        """
        _reject(options, "stdio", "detached")
        return self.spawn(stdio="ignore", detached=True, **options)

    def _capture(self, channel, options):
        _reject(options, "stdio")
        stdin = "pipe" if self._stdin is not None else "ignore"
        stdio = (stdin, "pipe", "inherit") if channel == "stdout" else (stdin, "inherit", "pipe")
        return Output(self.spawn(stdio=stdio, **options), channel)

    def stdout(self, **options):
        """spawn with stdout captured and return its Output."""
        return self._capture("stdout", options)

    def stderr(self, **options):
        """spawn with stderr captured and return its Output."""
        return self._capture("stderr", options)

    def text(self, *, trim="never", **options):
        """shorthand for ``stdout(**options).text(trim)``."""
        return self.stdout(**options).text(trim)

    def json(self, **options):
        """shorthand for ``stdout(**options).json()``."""
        return self.stdout(**options).json()

    def text0(self, **options):
        """NUL-delimited records of stdout; a trailing NUL is required and removed."""
        return self.stdout(**options).text0()

    def json0(self, **options):
        """NUL-delimited JSON values of stdout."""
        return self.stdout(**options).json0()

    def shell_out(self, *, print=False, **options):
        """
        optionally print the command, then run it transparently and wait.

        print
        - False: do not print.
        - True: print with default options.
        - PrintOptions: print with these options.
        - LineWrapping (or its string value): print with that wrapping.

        Raises CommandFailedError on a non-zero exit and LaunchError when the
        command cannot be started.
        """
        match print:
            case False:
                pass
            case True:
                self.print()
            case PrintOptions():
                self.print(print)
            case str():
                try:
                    wrapping = LineWrapping(print)
                except ValueError:
                    raise InvalidConfigurationError(
                        f"invalid value for print: {print!r}", field="print", value=print
                    ) from None
                self.print(argument_line_wrapping=wrapping)
            case _:
                raise InvalidConfigurationError(
                    f"print must be a bool, a PrintOptions or a line wrapping, not {type(print).__name__!r}",
                    field="print",
                )
        self.spawn_transparently(**options).success()


__all__ = (
    "Command",
    "AutoStyle",
)
