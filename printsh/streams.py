"""
printsh stream helpers: NUL-delimited record splitting and newline trimming.

NulSplitter is an explicit incremental parser. Feed it text chunks as they
arrive; it returns every complete record and keeps the partial tail. At end of
stream, close() reports a pending tail (a producer that forgot the trailing
NUL) as TruncatedStreamError instead of dropping it.

    >>> splitter = NulSplitter()
    >>> splitter.feed("a.txt\\0b.t")
    ['a.txt']
    >>> splitter.feed("xt\\0")
    ['b.txt']
    >>> splitter.close()
"""
from enum import StrEnum

from .faults import InvalidConfigurationError, MissingTrailingNewlineError, TruncatedStreamError

NUL = "\x00"


class NulSplitter:
    """incremental splitter for NUL-terminated text records."""
    __slots__ = ("_pending", "_closed")

    def __init__(self):
        self._pending = ""
        self._closed = False

    @property
    def pending(self):
        """the buffered partial record (text after the last NUL)."""
        return self._pending

    def feed(self, chunk, /):
        if self._closed:
            raise ValueError("feed() called on a closed splitter")
        if not isinstance(chunk, str):
            raise TypeError("feed() argument must be a string")
        *records, self._pending = (self._pending + chunk).split(NUL)
        return records

    def close(self):
        self._closed = True
        if self._pending:
            pending, self._pending = self._pending, ""
            raise TruncatedStreamError(
                "missing a trailing NUL character at the end of a NUL-delimited stream",
                pending=pending,
            )


def split0(chunks, /):
    """yield NUL-terminated records from an iterable of text chunks."""
    splitter = NulSplitter()
    for chunk in chunks:
        yield from splitter.feed(chunk)
    splitter.close()


class TrimMode(StrEnum):
    """
    trailing-newline policy for captured text.

    - NEVER: return the text unchanged.
    - SINGLE_IF_PRESENT: drop one trailing "\\n" when there is one.
    - SINGLE_REQUIRED: drop one trailing "\\n"; its absence is an error.
    """
    NEVER = "never"
    SINGLE_IF_PRESENT = "single-if-present"
    SINGLE_REQUIRED = "single-required"


def trim_trailing_newline(text, /, mode=TrimMode.NEVER):
    try:
        mode = TrimMode(mode)
    except ValueError:
        raise InvalidConfigurationError(
            f"invalid value for trim: {mode!r}", field="trim", value=mode
        ) from None
    match mode:
        case TrimMode.SINGLE_REQUIRED:
            if not text.endswith("\n"):
                raise MissingTrailingNewlineError("trailing newline required, but not present")
            return text[:-1]
        case TrimMode.SINGLE_IF_PRESENT:
            return text[:-1] if text.endswith("\n") else text
        case TrimMode.NEVER:
            return text


__all__ = (
    "NulSplitter",
    "split0",
    "TrimMode",
    "trim_trailing_newline",
)
