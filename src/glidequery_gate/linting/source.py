"""Pre-scanned script views shared by all lint rules.

The linter does not parse JavaScript. Instead the script is scanned once to
produce views of the same length as the original text:

- text: the script as written
- without_comments: comments replaced by spaces (string literals kept)
- code: comments and string literal contents replaced by spaces

Newlines are never replaced, so an offset in any view maps to the same
source line. Regex literals and template-string interpolation are not
recognized.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

_QUOTES = "'\"`"


@dataclass(frozen=True)
class ScriptSource:
    """A script with masked views and a line index."""

    text: str
    without_comments: str
    code: str
    line_starts: tuple[int, ...]

    @classmethod
    def from_text(cls, text: str) -> ScriptSource:
        without_comments, code = _mask(text)
        line_starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                line_starts.append(index + 1)
        return cls(
            text=text,
            without_comments=without_comments,
            code=code,
            line_starts=tuple(line_starts),
        )

    def line_of(self, offset: int) -> int:
        """Return the 1-based line containing a character offset."""
        return bisect_right(self.line_starts, offset)


def _mask(text: str) -> tuple[str, str]:
    """Blank comments (both views) and string contents (code view only)."""
    without_comments = list(text)
    code = list(text)
    length = len(text)
    i = 0

    def blank(view: list[str], start: int, end: int) -> None:
        for k in range(start, min(end, length)):
            if text[k] != "\n":
                view[k] = " "

    while i < length:
        char = text[i]
        if char in _QUOTES:
            j = i + 1
            while j < length and text[j] != char:
                if text[j] == "\\":
                    j += 1
                elif text[j] == "\n" and char != "`":
                    break
                j += 1
            blank(code, i + 1, j)
            i = j + 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            end = length if end == -1 else end
            blank(without_comments, i, end)
            blank(code, i, end)
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = length if end == -1 else end + 2
            blank(without_comments, i, end)
            blank(code, i, end)
            i = end
        else:
            i += 1

    return "".join(without_comments), "".join(code)
