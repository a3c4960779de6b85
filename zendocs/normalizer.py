r"""Rewrite loosely written documentation into canonical markdown.

Authors of the product docs mix fence dialects, paste raw JSON and SQL without
fences, draw box diagrams in prose, and use ``Label:`` lines instead of
headings. :class:`HeuristicNormalizer` applies an ordered set of rewrites that
only ever see fence-free text (see :mod:`zendocs.fences`):

1. drop ``[object Object]`` serialization artifacts;
2. relabel fence languages through the alias map;
3. fence runs of box-drawing lines as ``ascii`` diagrams;
4. protect the fences introduced by step 3;
5. fence bare ``CREATE TABLE`` statements and JSON objects;
6. promote section labels (``Purpose:``) to level-two headings;
7. turn ``Key: value`` lines into bold-keyed list items.

Restoring the fences is left to :func:`zendocs.fences.restore_fences`.

Example
-------
>>> from zendocs.normalizer import HeuristicNormalizer
>>> HeuristicNormalizer().normalize_markdown("Purpose: explain things")
'## Purpose\n\nexplain things'
"""

from __future__ import annotations

import json
import logging
import re
import typing as typ

from ._constants import BOX_DRAWING_CHARS, CREATE_TABLE_KEYWORDS
from .config import RendererConfig
from .errors import MalformedContent
from .fences import ProtectedText, collapse_doubled_fences, extract_fences, restore_fences

logger = logging.getLogger(__name__)

OBJECT_ARTIFACT = "[object Object]"
BOX_DRAWING_PATTERN = re.compile(BOX_DRAWING_CHARS)
CREATE_TABLE_PATTERN = re.compile(
    rf"^[ \t]*{CREATE_TABLE_KEYWORDS}(?:(?!\n[ \t]*\n)[^;\x02])*;[ \t]*$",
    re.MULTILINE | re.IGNORECASE,
)
JSON_START_PATTERN = re.compile(r"^[ \t]{0,3}\{", re.MULTILINE)
TRAILING_COMMA_PATTERN = re.compile(r",(\s*[}\]])")
KEY_VALUE_PATTERN = re.compile(
    r"^(?P<key>[A-Z][A-Za-z0-9 ()/_-]{0,38}?):[ \t]+(?P<value>\S.*?)[ \t]*$"
)
LIST_ITEM_PATTERN = re.compile(r"^[ \t]*(?:[-*+]|\d+[.)])[ \t]+")
MAX_KEY_WORDS = 4


class HeuristicNormalizer:
    """Apply the ordered dialect rewrites to protected markdown."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config = config or RendererConfig()
        labels = sorted(self.config.section_labels, key=len, reverse=True)
        alternation = "|".join(re.escape(label) for label in labels)
        self._section_label_pattern = (
            re.compile(
                rf"^[ \t]*(?:\*\*)?(?P<label>{alternation})(?:\*\*)?:(?:\*\*)?"
                r"[ \t]*(?P<rest>.*?)[ \t]*$",
                re.MULTILINE | re.IGNORECASE,
            )
            if labels
            else None
        )

    def normalize_markdown(self, text: str) -> str:
        """Normalize raw markdown and return it with every fence restored."""
        protected = extract_fences(collapse_doubled_fences(text))
        return restore_fences(self.normalize(protected))

    def normalize(self, protected: ProtectedText) -> ProtectedText:
        """Run the rewrite rules in order over ``protected`` prose.

        Parameters
        ----------
        protected : ProtectedText
            Output of :func:`~zendocs.fences.extract_fences`.

        Returns
        -------
        ProtectedText
            Canonical prose plus the original and newly minted fence tokens.
            Rules that find nothing to rewrite leave the text unchanged.
        """
        protected = self.strip_artifacts(protected)
        protected = self.relabel_fences(protected)
        protected = self.wrap_diagrams(protected)
        protected = protected.extract_again()
        protected = self.wrap_sql(protected)
        protected = self.wrap_json(protected)
        protected = self.promote_section_labels(protected)
        return self.list_key_values(protected)

    @staticmethod
    def strip_artifacts(protected: ProtectedText) -> ProtectedText:
        """Remove literal ``[object Object]`` tokens left by upstream exports."""
        if OBJECT_ARTIFACT not in protected.text:
            return protected
        return ProtectedText(
            protected.text.replace(OBJECT_ARTIFACT, ""), protected.tokens
        )

    def relabel_fences(self, protected: ProtectedText) -> ProtectedText:
        """Map non-standard fence labels (``pgsql``, ``js``) to canonical ones."""
        tokens = tuple(
            token.relabel(self.config.canonical_language(token.language))
            if token.language
            else token
            for token in protected.tokens
        )
        return ProtectedText(protected.text, tokens)

    def wrap_diagrams(self, protected: ProtectedText) -> ProtectedText:
        """Fence runs of box-drawing lines as ``ascii`` blocks."""
        lines = protected.text.splitlines(keepends=True)
        output: list[str] = []
        run: list[str] = []

        def _flush() -> None:
            if len(run) >= self.config.diagram_min_lines:
                body = "".join(run)
                if not body.endswith("\n"):
                    body = f"{body}\n"
                output.append(f"```ascii\n{body}```\n")
            else:
                output.extend(run)
            run.clear()

        for line in lines:
            if BOX_DRAWING_PATTERN.search(line):
                run.append(line)
                continue
            _flush()
            output.append(line)
        _flush()
        return ProtectedText("".join(output), protected.tokens)

    @staticmethod
    def wrap_sql(protected: ProtectedText) -> ProtectedText:
        """Fence bare ``CREATE TABLE ...;`` statements as ``sql`` blocks."""
        matches = list(CREATE_TABLE_PATTERN.finditer(protected.text))
        if not matches:
            return protected
        pieces: list[str] = []
        cursor = 0
        for match in matches:
            protected, placeholder = protected.protect("sql", match.group(0).strip())
            pieces.extend((protected.text[cursor : match.start()], placeholder))
            cursor = match.end()
        pieces.append(protected.text[cursor:])
        return ProtectedText("".join(pieces), protected.tokens)

    @staticmethod
    def wrap_json(protected: ProtectedText) -> ProtectedText:
        """Fence bare JSON objects that parse after trailing-comma cleanup."""
        text = protected.text
        pieces: list[str] = []
        cursor = 0
        for match in JSON_START_PATTERN.finditer(text):
            if match.start() < cursor:
                continue
            brace = match.end() - 1
            end = _balanced_end(text, brace)
            if end is None:
                continue
            line_end = text.find("\n", end)
            line_end = len(text) if line_end == -1 else line_end
            if text[end:line_end].strip():
                continue
            candidate = text[brace:end]
            try:
                _parse_json_object(candidate)
            except MalformedContent as exc:
                logger.debug("leaving brace block as prose: %s", exc)
                continue
            protected, placeholder = protected.protect("json", candidate)
            pieces.extend((text[cursor : match.start()], placeholder))
            cursor = line_end
        if not pieces:
            return protected
        pieces.append(text[cursor:])
        return ProtectedText("".join(pieces), protected.tokens)

    def promote_section_labels(self, protected: ProtectedText) -> ProtectedText:
        """Turn ``Purpose:``-style labels into ``## Purpose`` headings."""
        if self._section_label_pattern is None:
            return protected

        def _promote(match: re.Match[str]) -> str:
            heading = f"## {match.group('label')}"
            rest = match.group("rest")
            return f"{heading}\n\n{rest}" if rest else heading

        text = self._section_label_pattern.sub(_promote, protected.text)
        return ProtectedText(text, protected.tokens)

    @staticmethod
    def list_key_values(protected: ProtectedText) -> ProtectedText:
        """Render standalone ``Key: value`` lines as ``- **Key:** value`` items.

        Blank lines are inserted around each run of converted lines so the
        items start a list instead of continuing the surrounding paragraph.
        """
        lines = protected.text.split("\n")
        output: list[str] = []
        in_run = False
        for line in lines:
            converted = _key_value_item(line)
            if converted is None:
                if in_run and line.strip():
                    output.append("")
                output.append(line)
                in_run = False
                continue
            if not in_run and output and output[-1].strip() and not (
                LIST_ITEM_PATTERN.match(output[-1])
            ):
                output.append("")
            output.append(converted)
            in_run = True
        return ProtectedText("\n".join(output), protected.tokens)


def _key_value_item(line: str) -> str | None:
    """Return the list-item form of a ``Key: value`` line, or None."""
    match = KEY_VALUE_PATTERN.match(line)
    if not match:
        return None
    key = match.group("key").strip()
    value = match.group("value")
    if len(key.split()) > MAX_KEY_WORDS or value.startswith("//"):
        return None
    return f"- **{key}:** {value}"


def _balanced_end(text: str, start: int) -> int | None:
    """Return the index just past the bracket closing ``text[start]``."""
    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        char = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return pos + 1
        elif char == "\x02":
            return None
    return None


def _parse_json_object(candidate: str) -> dict[str, typ.Any]:
    """Parse ``candidate`` as a JSON object after trailing-comma cleanup.

    Raises
    ------
    MalformedContent
        If the cleaned text is not valid JSON or is not an object.
    """
    cleaned = TRAILING_COMMA_PATTERN.sub(r"\1", candidate)
    try:
        parsed = json.loads(cleaned)
    except (ValueError, RecursionError) as exc:
        msg = f"not valid JSON ({exc})"
        raise MalformedContent(msg) from exc
    if not isinstance(parsed, dict):
        msg = f"expected a JSON object, got {type(parsed).__name__}"
        raise MalformedContent(msg)
    return parsed


__all__ = ["HeuristicNormalizer"]
