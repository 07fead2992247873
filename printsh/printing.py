"""
printsh escaping and pretty-printing engine.

Scope
- escape(): decide, per token, whether shell quoting is required and apply it.
- render(): lay out a command name and its entries into a single printable
  string using configurable indentation and line wrapping.
- PrintOptions: immutable configuration value resolved against fixed defaults.

Escaping rules
- A token is quoted when quoting is "extra-safe" or when it contains one of
  SPECIAL_SHELL_CHARACTERS. The command name additionally treats "=" as special,
  so that it can never be read as a ``NAME=value`` assignment.
- Quoting wraps the token in single quotes after doubling every backslash and
  then prefixing every single quote with a backslash.

Layout
- main indentation prefixes the command name; argument indentation is the main
  indentation followed by ``arg_indentation``.
- the line-wrap token is `` \\`` + newline + argument indentation.
- separators within a group and between entries depend on LineWrapping:

    mode              within a group              between entries
    by-entry          " "                         line-wrap token
    nested-by-entry   line-wrap token + indent    line-wrap token
    by-argument       line-wrap token             line-wrap token
    inline            " "                         " "

Styling
- A rich style (e.g. "green underline") is applied to the finished text as a
  final pass. It never takes part in quoting or layout decisions.
"""
from collections import namedtuple
from enum import StrEnum

from rich.errors import StyleSyntaxError
from rich.style import Style

from .arguments import Group, entry
from .faults import InvalidConfigurationError

DEFAULT_MAIN_INDENTATION = ""
DEFAULT_ARG_INDENTATION = "  "

INLINE_SEPARATOR = " "
LINE_WRAP_LINE_END = " \\\n"

# https://mywiki.wooledge.org/BashGuide/SpecialCharacters
SPECIAL_SHELL_CHARACTERS = frozenset(" \"'`|$*?><()[]{}&\\;#")
SPECIAL_SHELL_CHARACTERS_FOR_COMMAND_NAME = SPECIAL_SHELL_CHARACTERS | {"="}


class Quoting(StrEnum):
    """
    quoting policy.

    - AUTO: quote only tokens that contain special shell characters.
    - EXTRA_SAFE: quote every token, including the command name.
    """
    AUTO = "auto"
    EXTRA_SAFE = "extra-safe"


class LineWrapping(StrEnum):
    """where backslash-newline continuations are inserted."""
    BY_ENTRY = "by-entry"
    NESTED_BY_ENTRY = "nested-by-entry"
    BY_ARGUMENT = "by-argument"
    INLINE = "inline"


def _enumerate(type, value, field):
    try:
        return type(value)
    except ValueError:
        choices = ", ".join(repr(member.value) for member in type)
        raise InvalidConfigurationError(
            f"invalid value for {field}: {value!r} (expected one of {choices})",
            field=field,
            value=value,
        ) from None


def _stylize(text, style):
    if isinstance(style, str):
        try:
            style = Style.parse(style)
        except StyleSyntaxError as error:
            raise InvalidConfigurationError(
                f"invalid value for style: {str(error)!r}", field="style", value=style
            ) from None
    if not isinstance(style, Style):
        raise InvalidConfigurationError(
            f"style must be a rich style definition, not {type(style).__name__!r}",
            field="style",
            value=style,
        )
    return style.render(text)


_PrintOptionsBase = namedtuple("PrintOptions", (
    "main_indentation",
    "arg_indentation",
    "quoting",
    "argument_line_wrapping",
    "skip_line_wrap_before_first_arg",
    "style",
), defaults=(
    DEFAULT_MAIN_INDENTATION,
    DEFAULT_ARG_INDENTATION,
    Quoting.AUTO,
    LineWrapping.BY_ENTRY,
    False,
    None,
))


class PrintOptions(_PrintOptionsBase):
    """
    rendering configuration (a value, never state).

    fields
    - main_indentation: prefix of the command line (default "").
    - arg_indentation: extra prefix of argument lines (default two spaces).
    - quoting: Quoting or its string value (default "auto").
    - argument_line_wrapping: LineWrapping or its string value (default "by-entry").
    - skip_line_wrap_before_first_arg: keep the first entry on the command's line.
    - style: rich style (string or Style) applied to the finished text, or None.

    enumerated fields are coerced on construction; unknown values raise
    InvalidConfigurationError.
    """
    __slots__ = ()

    def __new__(
            cls,
            main_indentation=DEFAULT_MAIN_INDENTATION,
            arg_indentation=DEFAULT_ARG_INDENTATION,
            quoting=Quoting.AUTO,
            argument_line_wrapping=LineWrapping.BY_ENTRY,
            skip_line_wrap_before_first_arg=False,
            style=None,
    ):
        for field, value in (("main_indentation", main_indentation), ("arg_indentation", arg_indentation)):
            if not isinstance(value, str):
                raise InvalidConfigurationError(
                    f"{field} must be a string, not {type(value).__name__!r}", field=field, value=value
                )
        return super().__new__(
            cls,
            main_indentation,
            arg_indentation,
            _enumerate(Quoting, quoting, "quoting"),
            _enumerate(LineWrapping, argument_line_wrapping, "argument_line_wrapping"),
            bool(skip_line_wrap_before_first_arg),
            style,
        )

    def _replace(self, /, **overrides):
        return type(self)(**(self._asdict() | overrides))

    __replace__ = _replace

    @property
    def arg_indent(self):
        """full prefix of an argument line."""
        return self.main_indentation + self.arg_indentation

    @property
    def line_wrap(self):
        """separator that continues the logical shell line on a new, indented line."""
        return LINE_WRAP_LINE_END + self.arg_indent

    @property
    def group_separator(self):
        """separator between the members of a group."""
        match self.argument_line_wrapping:
            case LineWrapping.BY_ENTRY | LineWrapping.INLINE:
                return INLINE_SEPARATOR
            case LineWrapping.NESTED_BY_ENTRY:
                return self.line_wrap + self.arg_indent
            case LineWrapping.BY_ARGUMENT:
                return self.line_wrap
        raise InvalidConfigurationError(
            f"invalid value for argument_line_wrapping: {self.argument_line_wrapping!r}",
            field="argument_line_wrapping",
            value=self.argument_line_wrapping,
        )

    @property
    def entry_separator(self):
        """separator between top-level entries."""
        match self.argument_line_wrapping:
            case LineWrapping.BY_ENTRY | LineWrapping.NESTED_BY_ENTRY | LineWrapping.BY_ARGUMENT:
                return self.line_wrap
            case LineWrapping.INLINE:
                return INLINE_SEPARATOR
        raise InvalidConfigurationError(
            f"invalid value for argument_line_wrapping: {self.argument_line_wrapping!r}",
            field="argument_line_wrapping",
            value=self.argument_line_wrapping,
        )


def resolve(options=None, /, **overrides):
    """
    materialize print options from None, a PrintOptions, or a mapping, plus overrides.

    raises
    - InvalidConfigurationError for any other options object or unknown field.
    """
    match options:
        case None:
            options = {}
        case PrintOptions():
            options = options._asdict()
        case dict():
            options = dict(options)
        case _:
            raise InvalidConfigurationError(
                f"print options must be a PrintOptions, not {type(options).__name__!r}"
            )
    if unknown := (options.keys() | overrides.keys()) - set(PrintOptions._fields):
        raise InvalidConfigurationError(
            f"unknown print option(s): {', '.join(sorted(unknown))}", fields=tuple(sorted(unknown))
        )
    return PrintOptions(**(options | overrides))


def escape(token, /, is_command_name=False, options=None):
    """
    return `token` as it must appear on a POSIX-like shell line.

    parameters
    - token: str
    - is_command_name: also treat "=" as special (command names only).
    - options: PrintOptions (only `quoting` is consulted); None means defaults.

    notes
    - single quotes are used because they leave the fewest characters that
      need escaping inside them.
    - backslashes are escaped before quotes so the inserted escapes are not
      escaped a second time.
    """
    if not isinstance(token, str):
        raise TypeError("escape() argument must be a string")
    options = resolve(options)
    special = SPECIAL_SHELL_CHARACTERS_FOR_COMMAND_NAME if is_command_name else SPECIAL_SHELL_CHARACTERS
    if options.quoting is Quoting.EXTRA_SAFE or not special.isdisjoint(token):
        return "'" + token.replace("\\", "\\\\").replace("'", "\\'") + "'"
    return token


def render(name, entries, /, options=None):
    """
    lay out a command name and its entries as one printable string.

    parameters
    - name: the command name (str).
    - entries: iterable of entries in any shape accepted by printsh.arguments.entry()
      (str, path, sequence of at least two scalars, Scalar or Group).
    - options: PrintOptions or None.

    returns
    - the rendered command without a trailing newline, styled when
      `options.style` is set.

    raises
    - InvalidArgumentEntryError (with the index) for a malformed entry.
    """
    options = resolve(options)
    entries = tuple(entry(item, index) for index, item in enumerate(entries))
    group_separator = options.group_separator
    entry_separator = options.entry_separator

    rendered = []
    for item in entries:
        if isinstance(item, Group):
            rendered.append(group_separator.join(escape(token, False, options) for token in item))
        else:
            rendered.append(escape(item.value, False, options))

    text = options.main_indentation + escape(name, True, options)
    if rendered:
        text += INLINE_SEPARATOR if options.skip_line_wrap_before_first_arg else entry_separator
        text += entry_separator.join(rendered)
    if options.style is not None:
        text = _stylize(text, options.style)
    return text


__all__ = (
    # Enumerations
    "Quoting",
    "LineWrapping",

    # Classes
    "PrintOptions",

    # Functions
    "escape",
    "render",
    "resolve",

    # Constants
    "SPECIAL_SHELL_CHARACTERS",
    "SPECIAL_SHELL_CHARACTERS_FOR_COMMAND_NAME",
)
