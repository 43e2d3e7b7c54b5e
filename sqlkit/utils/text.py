"""SQL text helpers for positional placeholders."""

import re
from functools import lru_cache
from typing import Final

__all__ = ("count_qmark_placeholders", "qmark_to_pyformat")

# Literals and comments are matched first so placeholders inside them are skipped.
_PLACEHOLDER_REGEX: Final = re.compile(
    r"""
    (?P<dquote>"(?:[^"\\]|\\.|"")*") |
    (?P<squote>'(?:[^'\\]|\\.|'')*') |
    (?P<backtick>`(?:[^`]|``)*`) |
    (?P<line_comment>(?:--[ \t]|\#)[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    (?P<qmark>\?) |
    (?P<percent>%)
    """,
    re.VERBOSE | re.DOTALL,
)


@lru_cache(maxsize=512)
def count_qmark_placeholders(sql: str) -> int:
    """Count the ``?`` placeholders outside literals, quoted identifiers and comments.

    Args:
        sql: SQL text using ``?`` placeholders.

    Returns:
        Number of positional placeholders.
    """
    return sum(1 for match in _PLACEHOLDER_REGEX.finditer(sql) if match.group("qmark"))


@lru_cache(maxsize=512)
def qmark_to_pyformat(sql: str) -> str:
    """Rewrite ``?`` placeholders as ``%s`` for PyMySQL.

    PyMySQL interpolates arguments with the ``%`` operator over the whole query,
    so every literal ``%`` (including those inside string literals) is doubled.

    Args:
        sql: SQL text using ``?`` placeholders.

    Returns:
        SQL text using ``%s`` placeholders.
    """

    def _replace(match: "re.Match[str]") -> str:
        if match.group("qmark"):
            return "%s"
        if match.group("percent"):
            return "%%"
        return match.group(0).replace("%", "%%")

    return _PLACEHOLDER_REGEX.sub(_replace, sql)
