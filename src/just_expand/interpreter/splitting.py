"""IFS field splitting.

Only unquoted text that came from an expansion is split. Literal word
text and quoted text pass through and stay attached to the field they
sit in.

IFS splitting rules:
- IFS unset: the default " \\t\\n"; IFS empty: no splitting at all
- IFS whitespace (space/tab/newline): runs collapse into one delimiter
  and are trimmed at the ends of the word
- IFS non-whitespace: each occurrence delimits a field, so two adjacent
  ones produce an empty field between them
- Whitespace adjacent to a non-whitespace IFS character is part of that
  delimiter
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_IFS = " \t\n"
IFS_WHITESPACE = " \t\n"


@dataclass
class ExpandedSegment:
    """A segment of expanded text with quoting context."""

    text: str
    quoted: bool  # True = protected from IFS splitting and globbing
    expanded: bool = False  # True = produced by an expansion, so splittable
    field_break: bool = False  # True = forced field boundary (from $@)


def _append(field: list[ExpandedSegment], char: str, quoted: bool) -> None:
    if field and field[-1].quoted == quoted:
        field[-1].text += char
    else:
        field.append(ExpandedSegment(char, quoted))


def split_segments(
    segments: list[ExpandedSegment], ifs: Optional[str]
) -> list[list[ExpandedSegment]]:
    """Split a word's segments into fields.

    Each field is returned as a list of segments so pathname expansion
    can still tell quoted characters from unquoted ones.
    """
    if ifs is None:
        ifs = DEFAULT_IFS
    ifs_whitespace = set(c for c in ifs if c in IFS_WHITESPACE)
    ifs_nonws = set(c for c in ifs if c not in IFS_WHITESPACE)

    # Flatten to atoms: (char, splittable, quoted), or a marker for a
    # field break (None, ...) or an empty quoted segment ("", ...)
    atoms: list[tuple[Optional[str], bool, bool]] = []
    for seg in segments:
        if seg.field_break:
            atoms.append((None, False, False))
        elif seg.text == "":
            if seg.quoted:
                atoms.append(("", False, True))
        else:
            splittable = bool(ifs) and seg.expanded and not seg.quoted
            for c in seg.text:
                atoms.append((c, splittable, seg.quoted))

    fields: list[list[ExpandedSegment]] = []
    current: list[ExpandedSegment] = []
    started = False  # current field has content or a quoted empty string

    def is_delim(k: int) -> bool:
        c, splittable, _ = atoms[k]
        return splittable and c is not None and (c in ifs_whitespace or c in ifs_nonws)

    i = 0
    n = len(atoms)
    while i < n:
        c, splittable, quoted = atoms[i]
        if c is None:
            if started:
                fields.append(current)
            current, started = [], False
            i += 1
        elif c == "":
            started = True
            i += 1
        elif is_delim(i):
            # One delimiter is: ws* (nonws ws*)?
            saw_nonws = False
            while i < n and is_delim(i) and atoms[i][0] in ifs_whitespace:
                i += 1
            if i < n and is_delim(i) and atoms[i][0] in ifs_nonws:
                saw_nonws = True
                i += 1
                while i < n and is_delim(i) and atoms[i][0] in ifs_whitespace:
                    i += 1
            if saw_nonws or started:
                fields.append(current)
                current, started = [], False
        else:
            _append(current, c, quoted)
            started = True
            i += 1

    if started:
        fields.append(current)
    return fields


def split_fields(value: str, ifs: Optional[str]) -> list[str]:
    """Split an unquoted expansion result on IFS."""
    segments = [ExpandedSegment(value, quoted=False, expanded=True)]
    return ["".join(seg.text for seg in field) for field in split_segments(segments, ifs)]
