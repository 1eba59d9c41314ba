"""Run state embedded at the top of the versioning PR body.

Between runs the only durable storage is the PR body itself. It starts with
a small block:

    ---
    draft_id: 123456
    checksum: 0cc175b9c0f1b6a831c399e269772661
    ---

followed by the human readable description. Decoding is tolerant: most PR
bodies have no block, and hand edited blocks may be partial.
"""

from __future__ import annotations

import re

from relpr.services.release.model import Frontmatter

# Both delimiters sit on lines of their own.
_BLOCK_RE = re.compile(
    r"^[ \t]*---[ \t\r]*\n(.*?)\n[ \t]*---[ \t\r]*(?:\n|\Z)",
    re.DOTALL | re.MULTILINE,
)
_INT_RE = re.compile(r"-?[0-9]+")
_DRAFT_ID_RE = re.compile(r"^draft_id:(.+)")
_CHECKSUM_RE = re.compile(r"^checksum:(.+)")


def _parse_int(raw: str) -> int | None:
    value = raw.strip()
    if _INT_RE.fullmatch(value) is None:
        return None
    return int(value)


def encode(frontmatter: Frontmatter) -> str:
    return f"---\ndraft_id: {frontmatter.draft_id}\nchecksum: {frontmatter.checksum}\n---"


def decode(body: str) -> Frontmatter | None:
    """Read the first ``---`` block of ``body``; None when there is none.

    Unknown keys are ignored and a repeated key keeps its last value. A
    draft_id that is not an integer decodes as None.
    """
    block = _BLOCK_RE.search(body)
    if block is None:
        return None

    draft_id: int | None = None
    checksum: str | None = None
    for line in block.group(1).split("\n"):
        if m := _DRAFT_ID_RE.match(line):
            draft_id = _parse_int(m.group(1))
            continue
        if m := _CHECKSUM_RE.match(line):
            checksum = m.group(1).strip() or None

    return Frontmatter(draft_id=draft_id, checksum=checksum)


def with_frontmatter(frontmatter: Frontmatter, body: str) -> str:
    """Prefix ``body`` with an encoded block and a blank line."""
    return f"{encode(frontmatter)}\n\n{body}"
