r"""Protect fenced code regions from the text heuristics that run before parsing.

Every balanced triple-backtick fence is swapped for an opaque placeholder and
recorded as a :class:`FenceToken`. Later stages only ever see prose, so a
``Key: value`` line or a box-drawing character inside a code sample can never be
rewritten. :func:`restore_fences` puts the fences back in a single pass.

Example
-------
>>> from zendocs.fences import extract_fences, restore_fences
>>> protected = extract_fences("Intro\n```sql\nSELECT 1;\n```\n")
>>> protected.tokens[0].language
'sql'
>>> restore_fences(protected)
'Intro\n```sql\nSELECT 1;\n```\n'
"""

from __future__ import annotations

import dataclasses as dc
import re

FENCE_PATTERN = re.compile(
    r"^(?P<opener>(?P<indent>[ ]*)(?P<fence>`{3,}))"
    r"(?P<language>[A-Za-z0-9_+#.-]*)(?P<info>[^`\n]*)\n"
    r"(?P<body>.*?)"
    r"(?P<closing>^(?P=indent)[ ]{0,3}(?P=fence)[ \t]*)$",
    re.MULTILINE | re.DOTALL,
)
DOUBLED_FENCE_PATTERN = re.compile(
    r"^(?P<indent>[ ]{0,3})(?P<fence>`{3,})(?P<outer>[A-Za-z0-9_+#.-]*)[ \t]*\n"
    r"[ ]{0,3}(?P=fence)(?P<inner>[A-Za-z0-9_+#.-]*)[ \t]*\n"
    r"(?P<body>[^\n]*\S.*?)"
    r"^[ ]{0,3}(?P=fence)[ \t]*\n(?:[ \t]*\n)*[ ]{0,3}(?P=fence)[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
PLACEHOLDER_PATTERN = re.compile("\x02zdfence:(\\d+)\x03")
MARKER_START = "\x02"
ESCAPED_MARKER_START = "\x02esc\x03"


@dc.dataclass(frozen=True, slots=True)
class FenceToken:
    """A fenced region lifted out of the text.

    Attributes
    ----------
    index : int
        Position used in the placeholder marker; unique within one document.
    language : str or None
        Language label following the opening fence.
    body : str
        Literal fence content including its trailing newline.
    opener : str
        Indentation and backticks of the opening line.
    info : str
        Remainder of the opening line after the language label.
    closing : str
        The closing fence line without its newline.
    """

    index: int
    language: str | None
    body: str
    opener: str = "```"
    info: str = ""
    closing: str = "```"

    @property
    def placeholder(self) -> str:
        """Return the marker substituted for this fence in protected text."""
        return f"\x02zdfence:{self.index}\x03"

    @property
    def literal(self) -> str:
        """Return the markdown fence syntax for this token."""
        return f"{self.opener}{self.language or ''}{self.info}\n{self.body}{self.closing}"

    def relabel(self, language: str | None) -> FenceToken:
        """Return a copy of the token carrying a different language label."""
        return dc.replace(self, language=language or None)


@dc.dataclass(frozen=True, slots=True)
class ProtectedText:
    """Fence-free text together with the tokens needed to restore it."""

    text: str
    tokens: tuple[FenceToken, ...] = ()

    def extract_again(self) -> ProtectedText:
        """Protect fences introduced after the first extraction."""
        fresh = _lift_fences(self.text, self._next_index())
        return ProtectedText(fresh.text, self.tokens + fresh.tokens)

    def protect(self, language: str | None, body: str) -> tuple[ProtectedText, str]:
        """Mint a new fence for ``body`` and return the updated text holder.

        The caller is responsible for inserting the returned placeholder into
        the text; the holder returned here only carries the extra token.
        """
        if not body.endswith("\n"):
            body = f"{body}\n"
        token = FenceToken(index=self._next_index(), language=language, body=body)
        return ProtectedText(self.text, (*self.tokens, token)), token.placeholder

    def _next_index(self) -> int:
        return max((token.index for token in self.tokens), default=-1) + 1


def collapse_doubled_fences(text: str) -> str:
    """Merge a doubled fence opener (and its doubled closer) into one fence.

    Some exported documents wrap a labelled fence inside another labelled fence,
    leaving two opener lines and two closer lines. The inner label wins; the
    outer one is used when the inner fence has no label. Text without the
    artifact is returned unchanged.
    """

    def _collapse(match: re.Match[str]) -> str:
        outer = match.group("outer")
        inner = match.group("inner")
        if not (outer or inner):
            return match.group(0)
        indent = match.group("indent")
        fence = match.group("fence")
        return f"{indent}{fence}{inner or outer}\n{match.group('body')}{indent}{fence}"

    return DOUBLED_FENCE_PATTERN.sub(_collapse, text)


def extract_fences(text: str, *, start: int = 0) -> ProtectedText:
    """Replace every balanced fence in ``text`` with a placeholder.

    Marker characters already present in ``text`` are escaped first, so input
    that happens to look like a placeholder survives :func:`restore_fences`
    unchanged.

    Parameters
    ----------
    text : str
        Markdown that may contain fenced code regions.
    start : int, optional
        First token index to use, so repeated extractions stay unique.

    Returns
    -------
    ProtectedText
        Text containing placeholders plus one token per fence, in order.
    """
    return _lift_fences(text.replace(MARKER_START, ESCAPED_MARKER_START), start)


def _lift_fences(text: str, start: int) -> ProtectedText:
    tokens: list[FenceToken] = []

    def _lift(match: re.Match[str]) -> str:
        token = FenceToken(
            index=start + len(tokens),
            language=match.group("language") or None,
            body=match.group("body"),
            opener=match.group("opener"),
            info=match.group("info"),
            closing=match.group("closing"),
        )
        tokens.append(token)
        return token.placeholder

    protected = FENCE_PATTERN.sub(_lift, text)
    return ProtectedText(protected, tuple(tokens))


def restore_fences(protected: ProtectedText) -> str:
    """Substitute each placeholder with its (possibly relabelled) fence syntax."""
    by_index = {token.index: token for token in protected.tokens}

    def _restore(match: re.Match[str]) -> str:
        token = by_index.get(int(match.group(1)))
        return token.literal if token else match.group(0)

    restored = PLACEHOLDER_PATTERN.sub(_restore, protected.text)
    return restored.replace(ESCAPED_MARKER_START, MARKER_START)


__all__ = [
    "FENCE_PATTERN",
    "FenceToken",
    "ProtectedText",
    "collapse_doubled_fences",
    "extract_fences",
    "restore_fences",
]
