"""
printsh argument-grouping helper.

Turns a flat token list (as typed on a shell) into grouped entries by asking,
for every flag-like token followed by another token, whether the two belong
together. The answer comes from a `confirm` callable, so the same walk serves
the interactive front-end (``python -m printsh``) and scripted use.

    >>> group_arguments(["-avz", "--exclude", ".git", "src/"], lambda pair: pair[0] == "--exclude")
    ['-avz', ('--exclude', '.git'), 'src/']
"""
from .printing import escape


def describe_pair(pair, /, options=None):
    """escaped preview of a candidate pair, as it would be rendered."""
    return " ".join(escape(token, False, options) for token in pair)


def group_arguments(tokens, /, confirm):
    """
    group flag/value pairs among `tokens`.

    a pair is proposed when the previous entry is a single token starting with
    "-"; `confirm(pair)` decides whether it becomes a group. Tokens are never
    reordered or dropped.
    """
    grouped = []
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("group_arguments() tokens must be strings")
        last = grouped[-1] if grouped else None
        if isinstance(last, str) and last.startswith("-") and confirm(pair := (last, token)):
            grouped[-1] = pair
        else:
            grouped.append(token)
    return grouped


def to_source(command, /):
    """Python source text that rebuilds `command`."""
    entries = [entry.value if len(entry) == 1 else list(entry) for entry in command.entries]
    if not entries:
        return f"Command({command.name!r})"
    lines = [f"Command({command.name!r}, ["]
    lines.extend(f"    {entry!r}," for entry in entries)
    lines.append("])")
    return "\n".join(lines)


__all__ = (
    "describe_pair",
    "group_arguments",
    "to_source",
)
