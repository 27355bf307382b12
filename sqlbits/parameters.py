"""Parameter styles and named-to-positional placeholder conversion.

Statements are always assembled with ``:name`` placeholders. Drivers that
cannot bind by name receive a converted copy of the statement along with an
ordered argument list.
"""

import re
from collections.abc import Iterable, Mapping
from enum import Enum
from functools import lru_cache
from typing import Any, Final, Optional

__all__ = (
    "NAMED_PLACEHOLDER_PATTERN",
    "ParameterStyle",
    "convert_to_positional",
    "iter_named_placeholders",
)

# Literals, comments and casts are matched first so a ``:name`` inside them is never taken for a placeholder.
_SKIPPED_TOKENS: Final = r"""
    (?P<dquote>"(?:[^"\\]|\\.)*") |
    (?P<squote>'(?:[^'\\]|\\.)*') |
    (?P<backtick>`[^`]*`) |
    (?P<dollar_quoted_string>\$(?P<dollar_quote_tag_inner>\w*)\$[\s\S]*?\$(?P=dollar_quote_tag_inner)\$) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    (?P<pg_cast>::\w+)
"""

NAMED_PLACEHOLDER_PATTERN: Final = re.compile(
    rf"{_SKIPPED_TOKENS} | (?P<named_colon>(?<![:\w]):(?P<colon_name>[A-Za-z_]\w*))",
    re.VERBOSE,
)


class ParameterStyle(str, Enum):
    """Parameter style enumeration with string values."""

    NAMED_COLON = "named_colon"
    NUMERIC = "numeric"
    QMARK = "qmark"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


@lru_cache(maxsize=256)
def _bound_placeholder_pattern(names: "tuple[str, ...]") -> "re.Pattern[str]":
    # longest first so ``:ids_10`` is never read as ``:ids_1``
    alternatives = "|".join(re.escape(name) for name in sorted(names, key=len, reverse=True))
    return re.compile(
        rf"{_SKIPPED_TOKENS} | (?P<named_colon>(?<![:\w]):(?P<colon_name>{alternatives})(?![\w.-]))",
        re.VERBOSE,
    )


def iter_named_placeholders(sql: str, names: "Optional[Iterable[str]]" = None) -> "list[tuple[str, int, int]]":
    """List every ``:name`` placeholder in textual order.

    Quoted strings, comments and ``::type`` casts are skipped.

    Args:
        sql: Statement to scan.
        names: Only look for these keys, which may hold any characters
            (``user.name``, ``first-name``). Identifier-shaped names are found
            when omitted.

    Returns:
        ``(name, start, end)`` tuples, ``start``/``end`` spanning the colon and name.
    """
    if names is None:
        pattern = NAMED_PLACEHOLDER_PATTERN
    else:
        unique_names = tuple(sorted({name for name in names if name}))
        if not unique_names:
            return []
        pattern = _bound_placeholder_pattern(unique_names)
    return [
        (match.group("colon_name"), match.start(), match.end())
        for match in pattern.finditer(sql)
        if match.group("named_colon")
    ]


def convert_to_positional(
    sql: str, parameters: "Mapping[str, Any]", style: ParameterStyle = ParameterStyle.NUMERIC
) -> "tuple[str, list[Any]]":
    """Convert ``:name`` placeholders to positional ones.

    Placeholders are numbered in the order they occur in ``sql``. Only names
    bound in ``parameters`` to a non-``None`` value are converted; anything
    else is left exactly as written. With ``NUMERIC`` a name seen twice reuses
    its first number, with ``QMARK`` its value is appended once per occurrence.

    Args:
        sql: Statement holding named placeholders.
        parameters: Bound parameter values keyed by name.
        style: Positional style to produce.

    Returns:
        The converted statement and its ordered argument list.
    """
    if style is ParameterStyle.NAMED_COLON:
        return sql, []

    bound_names = [name for name, value in parameters.items() if value is not None]
    args: list[Any] = []
    numbers: dict[str, int] = {}
    parts: list[str] = []
    current_pos = 0

    for name, start, end in iter_named_placeholders(sql, bound_names):
        value = parameters[name]
        parts.append(sql[current_pos:start])
        if style is ParameterStyle.QMARK:
            args.append(value)
            parts.append("?")
        else:
            if name not in numbers:
                args.append(value)
                numbers[name] = len(args)
            parts.append(f"${numbers[name]}")
        current_pos = end

    parts.append(sql[current_pos:])
    return "".join(parts), args
