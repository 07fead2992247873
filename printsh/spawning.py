"""
printsh process collaborator: spawn a command from its exact argv.

Scope
- spawn(): start one subprocess from ``(name, argv)`` and return a Spawned
  record. Launch failures (missing binary, missing permission, ...) raise
  LaunchError chained from the underlying OSError.
- Spawned: the native Popen handle plus one completion outcome, computed once
  and cached. success() drains captured streams, waits, and raises
  CommandFailedError on a non-zero exit status.
- Output: a captured stdout/stderr body that can be consumed exactly once, as
  bytes, text, JSON, or NUL-delimited records.
- StdinSource: text, JSON, file path or stream to feed to the child's stdin.

stdio
- each of stdin/stdout/stderr is one of "pipe", "inherit" or "ignore"; a
  single string applies to all three.

Concurrency
- a text or JSON stdin payload is written from a helper thread as soon as the
  process starts, whether or not its output is ever read. The thread owns the
  stdin pipe and closes it once the payload is written.
- captured stdout and stderr are drained together through Popen.communicate.
"""
import codecs
import functools
import io
import json
import subprocess
import threading
from collections import namedtuple

from .faults import (
    CommandFailedError,
    InvalidConfigurationError,
    LaunchError,
    OutputConsumedError,
)
from .streams import TrimMode, split0, trim_trailing_newline
from .utils import Unset, fspath

_STDIO = {
    "pipe": subprocess.PIPE,
    "inherit": None,
    "ignore": subprocess.DEVNULL,
}

CHUNK_SIZE = 64 * 1024


def _stdio(stdio):
    if isinstance(stdio, str):
        stdio = (stdio,) * 3
    if not isinstance(stdio, (tuple, list)) or len(stdio) != 3:
        raise InvalidConfigurationError(
            "stdio must be a string or a 3-item sequence of strings", field="stdio", value=stdio
        )
    try:
        return tuple(_STDIO[value] for value in stdio)
    except (KeyError, TypeError):
        raise InvalidConfigurationError(
            f"invalid value for stdio: {stdio!r} (expected 'pipe', 'inherit' or 'ignore')",
            field="stdio",
            value=stdio,
        ) from None


class StdinSource(namedtuple("StdinSource", ("kind", "value"))):
    """
    one stdin payload: kind is "text", "json", "path" or "stream".

    use stdin_source(text=...) (or json/path/stream) to build a validated one.
    """
    __slots__ = ()

    def prepare(self):
        """
        return ``(stdin, payload, handle)`` for Popen.

        - stdin: what Popen receives as its stdin argument.
        - payload: bytes to write to a stdin pipe, or None.
        - handle: an opened file the caller must close after the launch, or None.
        """
        match self.kind:
            case "text":
                return subprocess.PIPE, self.value.encode(), None
            case "json":
                return subprocess.PIPE, json.dumps(self.value, separators=(",", ":")).encode(), None
            case "path":
                handle = open(fspath(self.value), "rb")
                return handle, None, handle
            case "stream":
                try:
                    self.value.fileno()
                except (AttributeError, OSError, io.UnsupportedOperation):
                    data = self.value.read()
                    return subprocess.PIPE, data.encode() if isinstance(data, str) else bytes(data), None
                return self.value, None, None
        raise InvalidConfigurationError(f"invalid stdin source kind: {self.kind!r}", field="stdin")


def stdin_source(*, text=Unset, json=Unset, path=Unset, stream=Unset):
    """
    build a StdinSource from exactly one keyword.

    raises
    - InvalidConfigurationError when zero or several sources are given, or when
      the value does not fit its kind.
    """
    given = {
        kind: value for kind, value in (("text", text), ("json", json), ("path", path), ("stream", stream))
        if value is not Unset
    }
    if len(given) != 1:
        raise InvalidConfigurationError(
            "stdin() takes exactly one of text, json, path or stream", field="stdin"
        )
    (kind, value), = given.items()
    if kind == "text" and not isinstance(value, str):
        raise InvalidConfigurationError("stdin text must be a string", field="stdin", value=value)
    if kind == "path" and fspath(value) is None:
        raise InvalidConfigurationError("stdin path must be a string or a path", field="stdin", value=value)
    if kind == "stream" and not (hasattr(value, "read") or hasattr(value, "fileno")):
        raise InvalidConfigurationError("stdin stream must be a readable file object", field="stdin", value=value)
    return StdinSource(kind, value)


def _feed(pipe, payload):
    try:
        pipe.write(payload)
    except BrokenPipeError:
        # the child exited without reading its input; its exit status reports the outcome
        pass
    finally:
        try:
            pipe.close()
        except BrokenPipeError:
            pass


class Spawned:
    """
    a running (or finished) child process and its single completion outcome.

    attributes
    - name: the command name the process was spawned from.
    - process: the underlying subprocess.Popen.
    - pid / returncode: shortcuts to the Popen fields.
    """
    __slots__ = ("_name", "_process", "_feeder", "_lock", "_streams", "_outcome")

    def __init__(self, name, process, /, input=None):
        self._name = name
        self._process = process
        self._feeder = None
        self._lock = threading.Lock()
        self._streams = None
        self._outcome = Unset
        if input is not None:
            pipe, process.stdin = process.stdin, None
            self._feeder = threading.Thread(
                target=_feed, args=(pipe, input), name=f"printsh-stdin-{process.pid}"
            )
            self._feeder.start()

    @property
    def name(self):
        return self._name

    @property
    def process(self):
        return self._process

    @property
    def pid(self):
        return self._process.pid

    @property
    def returncode(self):
        return self._process.returncode

    def __repr__(self):
        return f"<Spawned {self._name!r} pid={self.pid} returncode={self.returncode}>"

    def communicate(self):
        """
        drain the captured streams and wait, after the stdin payload is written.

        returns ``(stdout, stderr)`` as bytes (None for streams that are not
        piped). The first call does the work; later calls return the same pair.
        """
        with self._lock:
            if self._streams is None:
                self._streams = self._process.communicate()
            streams = self._streams
        if self._feeder is not None:
            self._feeder.join()
        return streams

    def iter_stream(self, channel="stdout", /, size=CHUNK_SIZE):
        """
        yield raw chunks of a piped stdout/stderr as they arrive, then settle.

        the stream can be iterated once, and not after communicate().
        """
        stream = getattr(self._process, channel)
        with self._lock:
            if self._streams is not None or stream is None:
                raise OutputConsumedError(f"{channel} of {self._name!r} is not available for streaming")
            self._streams = (None, None)
        if self._process.stdin is not None:
            self._process.stdin.close()
        try:
            yield from iter(functools.partial(stream.read1, size), b"")
        finally:
            stream.close()
        self.success()

    def success(self):
        """
        wait for the process and raise CommandFailedError on a non-zero exit.

        the outcome is decided once; every call returns or raises the same.
        """
        self.communicate()
        returncode = self._process.wait()
        with self._lock:
            if self._outcome is Unset:
                self._outcome = None if returncode == 0 else CommandFailedError(
                    f"command {self._name!r} failed with non-zero exit code: {returncode}",
                    command=self._name,
                    returncode=returncode,
                )
            outcome = self._outcome
        if outcome is not None:
            raise outcome


def spawn(name, argv, /, *, stdio="pipe", cwd=None, env=None, stdin=None, detached=False):
    """
    start ``name`` with the exact argument vector ``argv``.

    parameters
    - stdio: "pipe" | "inherit" | "ignore", or a (stdin, stdout, stderr) triple.
    - cwd: working directory (str or os.PathLike).
    - env: environment mapping (None inherits the current one).
    - stdin: StdinSource overriding the stdin slot of `stdio`.
    - detached: start the child in a new session.

    raises
    - InvalidConfigurationError for unknown stdio values or a bad cwd.
    - LaunchError when the process cannot be started.
    """
    stdin_, stdout, stderr = _stdio(stdio)
    if cwd is not None and (cwd := fspath(cwd)) is None:
        raise InvalidConfigurationError("cwd must be a string or a path", field="cwd")
    payload, handle = None, None
    if stdin is not None:
        stdin_, payload, handle = stdin.prepare()
    try:
        process = subprocess.Popen(
            [name, *argv],
            stdin=stdin_,
            stdout=stdout,
            stderr=stderr,
            cwd=cwd,
            env=env,
            start_new_session=detached,
        )
    except OSError as error:
        raise LaunchError(
            f"failed to launch {name!r}: {error.strerror or error}",
            command=name,
            errno=error.errno,
        ) from error
    finally:
        if handle is not None:
            handle.close()
    return Spawned(name, process, input=payload)


def _decode(chunks, encoding):
    decoder = codecs.getincrementaldecoder(encoding)()
    for chunk in chunks:
        yield decoder.decode(chunk)
    yield decoder.decode(b"", final=True)


class Output:
    """
    the captured stdout or stderr body of one spawned command.

    the body can be consumed once (bytes, text, json, text0 or json0); a second
    attempt raises OutputConsumedError. Consuming waits for the process and
    raises CommandFailedError on a non-zero exit status.
    """
    __slots__ = ("_spawned", "_channel", "_consumed", "_lock")

    def __init__(self, spawned, /, channel="stdout"):
        if channel not in ("stdout", "stderr"):
            raise InvalidConfigurationError(f"invalid output channel: {channel!r}", field="channel")
        self._spawned = spawned
        self._channel = channel
        self._consumed = False
        self._lock = threading.Lock()

    @property
    def spawned(self):
        return self._spawned

    def _consume(self):
        with self._lock:
            if self._consumed:
                raise OutputConsumedError(f"{self._channel} of {self._spawned.name!r} was already consumed")
            self._consumed = True

    def bytes(self):
        self._consume()
        stdout, stderr = self._spawned.communicate()
        self._spawned.success()
        return (stdout if self._channel == "stdout" else stderr) or b""

    def text(self, /, trim=TrimMode.NEVER, encoding="utf-8"):
        return trim_trailing_newline(self.bytes().decode(encoding), trim)

    def json(self):
        return json.loads(self.bytes())

    def text0(self, /, encoding="utf-8"):
        """yield NUL-terminated records; a missing trailing NUL raises TruncatedStreamError."""
        self._consume()
        yield from split0(_decode(self._spawned.iter_stream(self._channel), encoding))

    def json0(self, /, encoding="utf-8"):
        for record in self.text0(encoding):
            yield json.loads(record)


__all__ = (
    "StdinSource",
    "stdin_source",
    "Spawned",
    "Output",
    "spawn",
)
