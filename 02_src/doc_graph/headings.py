"""Heading outline extraction for anchors and navigation metadata."""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.+?)[ \t]*$")
_FENCE_RE = re.compile(r"^[ \t]*(```|~~~)")


@dataclass
class Heading:
    depth: int
    text: str
    anchor: str
    children: List["Heading"] = field(default_factory=list)


def slugify_anchor(text: str) -> str:
    """Turn heading text into an anchor id: `Getting Started` -> `getting-started`."""
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def iter_body_lines(body: str) -> Iterator[Tuple[str, bool]]:
    """Yield `(line, in_code)` for each body line; fence lines count as code."""
    in_code = False
    fence = ""
    for line in body.splitlines():
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if not in_code:
                in_code, fence = True, marker
            elif marker == fence:
                in_code, fence = False, ""
            yield line, True
            continue
        yield line, in_code


def parse_heading(line: str) -> Tuple[int, str] | None:
    match = _HEADING_RE.match(line)
    if not match:
        return None
    return len(match.group(1)), match.group(2).strip()


def extract_headings(body: str) -> Tuple[List[Heading], List[str]]:
    """Return the nested outline tree and the flat anchor list, in document order."""
    flat: List[Heading] = []
    for line, in_code in iter_body_lines(body):
        if in_code:
            continue
        parsed = parse_heading(line)
        if parsed is None:
            continue
        depth, text = parsed
        flat.append(Heading(depth=depth, text=text, anchor=slugify_anchor(text)))

    anchors = [heading.anchor for heading in flat]

    tree: List[Heading] = []
    stack: List[Heading] = []
    for heading in flat:
        while stack and stack[-1].depth >= heading.depth:
            stack.pop()
        if stack:
            stack[-1].children.append(heading)
        else:
            tree.append(heading)
        stack.append(heading)

    return tree, anchors
