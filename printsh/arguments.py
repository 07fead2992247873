r"""
printsh argument model: entries, validation and flattening.

Overview
- Entries (a closed, two-member variant)
  • Scalar: one token, e.g. "-avz" or a path.
  • Group: two or more tokens that belong together, e.g. ("--exclude", ".git").
    Groups only influence layout; once flattened they are indistinguishable
    from consecutive scalars.

- Arguments
  • Immutable, validated sequence of entries built from loosely-typed input:
    str / os.PathLike become Scalar, non-string sequences become Group, and
    existing Scalar/Group instances are kept as-is.
  • flatten() yields the exact argv tail handed to the process collaborator.
    It is the single source of truth for both execution and printing.

Validation (raised once, at construction)
- InvalidArgumentListError: the input is not a sequence (str/bytes included).
- InvalidArgumentEntryError: an element is neither a scalar nor a sequence of
  scalars, or is a group with fewer than two members. The fault carries the
  offending index.

Quick example:
    >>> from printsh.arguments import Arguments
    >>> arguments = Arguments(["-avz", ["--exclude", ".git"], "./dist/"])
    >>> arguments.flatten()
    ('-avz', '--exclude', '.git', './dist/')
"""
from abc import ABC
from collections.abc import Sequence
from typing import final

from .faults import InvalidArgumentEntryError, InvalidArgumentListError
from .utils import fspath


class Entry(ABC):
    """
    Base of the entry variant. Only Scalar and Group derive from it.

    Instances are immutable value objects: equal when their class and values
    are equal, hashable, and iterable over their tokens.
    """
    __slots__ = ("_values",)

    def __init_subclass__(cls, **options):
        if cls.__name__ not in ("Scalar", "Group") or cls.__module__ != __name__:
            raise TypeError("type 'Entry' is not an acceptable base type")
        super().__init_subclass__(**options)

    @property
    def values(self):
        """The tokens of this entry, in order."""
        return self._values

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __eq__(self, other, /):
        if not isinstance(other, Entry):
            return NotImplemented
        return type(self) is type(other) and self._values == other._values

    def __hash__(self):
        return hash((type(self).__name__, self._values))

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(map(repr, self._values))})"

    def __rich_repr__(self):
        yield from self._values


@final
class Scalar(Entry):
    """One positional or flag-like token."""
    __slots__ = ()

    def __init__(self, value, /):
        if (token := fspath(value)) is None:
            raise TypeError("Scalar() argument must be a string or a path")
        object.__setattr__(self, "_values", (token,))

    @property
    def value(self):
        return self._values[0]


@final
class Group(Entry):
    """Two or more tokens rendered adjacently and wrapped as one unit."""
    __slots__ = ()

    def __init__(self, *values):
        if len(values) < 2:
            raise ValueError("Group() requires at least two values")
        tokens = tuple(map(fspath, values))
        if None in tokens:
            raise TypeError("Group() values must be strings or paths")
        object.__setattr__(self, "_values", tokens)


def _is_sequence(object):
    return isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray))


def entry(object, /, index=0):
    """
    Normalize one loosely-typed element into an Entry.

    Accepted shapes
    - Scalar / Group instance → returned unchanged
    - str / os.PathLike[str]  → Scalar
    - sequence of ≥ 2 str / os.PathLike[str] → Group

    Raises
    - InvalidArgumentEntryError (with `index`) for anything else.
    """
    match object:
        case Entry():
            return object
        case _ if fspath(object) is not None:
            return Scalar(object)
        case _ if _is_sequence(object):
            if len(object) < 2:
                raise InvalidArgumentEntryError(
                    f"group at index {index} has {len(object)} member(s), at least 2 are required",
                    index=index,
                )
            if any(fspath(member) is None for member in object):
                raise InvalidArgumentEntryError(
                    f"group at index {index} contains a value that is not a string or a path",
                    index=index,
                )
            return Group(*object)
        case _:
            raise InvalidArgumentEntryError(
                f"invalid argument entry at index {index}: {type(object).__name__!r} is not a string, "
                f"a path, or a group",
                index=index,
            )


@final
class Arguments(Sequence):
    """
    Immutable, validated sequence of entries.

    Lifecycle
    - Built once from user input; every element is normalized with entry().
    - The flattened argv tail is computed eagerly so that repeated flatten()
      calls are trivially identical.
    """
    __slots__ = ("_entries", "_flat")

    def __init__(self, entries=(), /):
        if not _is_sequence(entries):
            raise InvalidArgumentListError(
                f"command arguments must be a sequence of entries, not {type(entries).__name__!r}"
            )
        normalized = tuple(entry(object, index) for index, object in enumerate(entries))
        object.__setattr__(self, "_entries", normalized)
        object.__setattr__(self, "_flat", tuple(token for item in normalized for token in item))

    def __setattr__(self, name, value, /):
        raise AttributeError("'Arguments' object is immutable")

    def __getitem__(self, index, /):
        if isinstance(index, slice):
            return Arguments(self._entries[index])
        return self._entries[index]

    def __len__(self):
        return len(self._entries)

    def __eq__(self, other, /):
        if not isinstance(other, Arguments):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self):
        return hash(self._entries)

    def __repr__(self):
        return f"Arguments({list(self._entries)!r})"

    def flatten(self):
        """
        Return the argv tail: every entry's tokens, concatenated in order.

        The command name is not included. Order is the construction order,
        never sorted and never deduplicated.
        """
        return self._flat


__all__ = (
    # Classes
    "Entry",
    "Scalar",
    "Group",
    "Arguments",

    # Functions
    "entry",
)
