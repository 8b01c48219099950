"""Pathname expansion against the shell's filesystem."""

from __future__ import annotations

import fnmatch
import logging
import posixpath
from typing import TYPE_CHECKING

from .splitting import ExpandedSegment

if TYPE_CHECKING:
    from .types import InterpreterContext

logger = logging.getLogger(__name__)

GLOB_CHARS = "*?["


def _escape_glob_chars(s: str) -> str:
    """Escape glob metacharacters for fnmatch (literal matching).

    Uses [x] notation which fnmatch always treats as literal character class.
    """
    return s.replace("[", "[[]").replace("*", "[*]").replace("?", "[?]")


def segments_have_unquoted_glob(segments: list[ExpandedSegment]) -> bool:
    """Check if segments contain unquoted glob characters."""
    return any(
        not seg.quoted and any(c in seg.text for c in GLOB_CHARS)
        for seg in segments
    )


def segments_to_glob_pattern(segments: list[ExpandedSegment]) -> str:
    """Build an fnmatch pattern with quoted text made literal."""
    return "".join(
        _escape_glob_chars(seg.text) if seg.quoted else seg.text
        for seg in segments
    )


def _has_glob(part: str) -> bool:
    return any(c in part for c in GLOB_CHARS)


def _unescape(part: str) -> str:
    return part.replace("[[]", "[").replace("[*]", "*").replace("[?]", "?")


async def glob_expand(ctx: "InterpreterContext", pattern: str) -> list[str]:
    """Expand a glob pattern against the filesystem.

    Returns the sorted matching paths, spelled relative to the current
    directory when the pattern is relative. Returns [] when nothing
    matches; the caller keeps the word literally in that case.
    """
    fs = ctx.fs
    cwd = ctx.state.cwd

    if pattern.startswith("/"):
        base_dir = "/"
        display_base = "/"
        parts = [p for p in pattern[1:].split("/")]
    else:
        base_dir = cwd
        display_base = ""
        parts = pattern.split("/")

    def _should_include(entry: str, pattern_part: str) -> bool:
        # Hidden entries only match a pattern that starts with '.'
        return not entry.startswith(".") or pattern_part.startswith(".")

    def _join(display: str, name: str) -> str:
        if not display:
            return name
        return display + name if display.endswith("/") else display + "/" + name

    async def expand_parts(current_dir: str, display: str, remaining: list[str]) -> list[str]:
        if not remaining:
            return [display]

        part = remaining[0]
        rest = remaining[1:]

        if part == "":
            # Doubled or trailing slash
            return await expand_parts(current_dir, display + "/", rest)

        if not _has_glob(part):
            literal = _unescape(part)
            new_path = posixpath.join(current_dir, literal)
            if await fs.exists(new_path):
                return await expand_parts(new_path, _join(display, literal), rest)
            return []

        try:
            entries = await fs.readdir(current_dir)
        except (FileNotFoundError, NotADirectoryError):
            return []

        matches = []
        for entry in sorted(entries):
            if not _should_include(entry, part):
                continue
            if not fnmatch.fnmatchcase(entry, part):
                continue
            new_path = posixpath.join(current_dir, entry)
            if rest:
                # More parts to match - entry must be a directory
                if await fs.is_directory(new_path):
                    matches.extend(await expand_parts(new_path, _join(display, entry), rest))
            else:
                matches.append(_join(display, entry))
        return matches

    results = sorted(await expand_parts(base_dir, display_base, parts))
    logger.debug("glob %r matched %d paths", pattern, len(results))
    return results
