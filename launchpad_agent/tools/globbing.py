"""Glob patterns as used by the file tools.

Semantics: `*` and `?` match any character including `/`, `**/` matches zero
or more directories, `[abc]` / `[!abc]` / `[a-z]` are character classes.
Malformed patterns compile to None so callers can drop the filter instead of
failing on a sloppy model-generated pattern.
"""

from __future__ import annotations

import re

__all__ = ["compile_glob"]


def _translate_class(pattern: str, start: int) -> tuple[str, int] | None:
    """Translate a [...] class starting at pattern[start] == '['.

    Returns (regex, index after the closing bracket) or None if unclosed.
    """
    i = start + 1
    negate = False
    if i < len(pattern) and pattern[i] in "!^":
        negate = True
        i += 1
    body: list[str] = []
    # A leading ']' is a literal member of the class
    if i < len(pattern) and pattern[i] == "]":
        body.append("\\]")
        i += 1
    while i < len(pattern) and pattern[i] != "]":
        char = pattern[i]
        if char == "-" and body and i + 1 < len(pattern) and pattern[i + 1] != "]":
            body.append("-")
        else:
            body.append(re.escape(char))
        i += 1
    if i >= len(pattern) or not body:
        return None
    return ("[^" if negate else "[") + "".join(body) + "]", i + 1


def compile_glob(pattern: str) -> re.Pattern[str] | None:
    """Compile a glob pattern to an anchored regex, or None if it is invalid."""
    parts: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if pattern.startswith("**", i):
            # Recursive wildcards must be a whole path component
            if i > 0 and pattern[i - 1] != "/":
                return None
            after = i + 2
            if after < n and pattern[after] != "/":
                return None
            if after < n:
                parts.append("(?:.*/)?")
                i = after + 1
            else:
                parts.append(".*")
                i = after
        elif char == "*":
            parts.append(".*")
            i += 1
        elif char == "?":
            parts.append(".")
            i += 1
        elif char == "[":
            translated = _translate_class(pattern, i)
            if translated is None:
                return None
            regex, i = translated
            parts.append(regex)
        else:
            parts.append(re.escape(char))
            i += 1
    try:
        return re.compile("".join(parts) + r"\Z", re.DOTALL)
    except re.error:
        return None
