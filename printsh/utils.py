"""
printsh utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, kept distinct from None so that
    None can stay a legitimate value (e.g. ``stdin(json=None)`` feeds a JSON null).
- mirror("attr")
  • Read-only property exposing the private backing field ``self._attr``.
- fspath(object)
  • Strict ``str | os.PathLike[str]`` to ``str`` conversion used for command names,
    arguments and working directories.

Names not in __all__ are internal and may change without notice.
"""
import functools
import os
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a per-process singleton.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def mirror(name, /):
    """
    Define a read-only property that mirrors the backing attribute "_{name}".

    Backing values are expected to be immutable already (str, tuple, frozen
    records), so the value is returned as-is.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return getattr(self, "_" + name)

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


def fspath(object, /):
    """
    Convert a str or a str-based path-like object to str.

    Returns None when the object is neither (bytes paths included) so callers
    can raise the fault that matches their context.
    """
    if isinstance(object, str):
        return object
    if isinstance(object, os.PathLike):
        path = os.fspath(object)
        if isinstance(path, str):
            return path
    return None


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a meaningful user value, e.g. ``stdin(json=None)``.
"""


__all__ = (
    # Functions
    "mirror",
    "fspath",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
