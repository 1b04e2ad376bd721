"""Workflow section parsing: preconditions, steps, failure modes, recovery, guardrails."""

import re
from dataclasses import dataclass, field
from typing import Dict, List

from .graph_model import WorkflowStep
from .headings import iter_body_lines, parse_heading

_LIST_ITEM_RE = re.compile(r"^(?:[-*]|\d+\.)\s+(.+)$")
_API_REF_RE = re.compile(r"`([a-z_][a-z0-9_]*)`", re.IGNORECASE)

SECTION_NAMES = ("preconditions", "steps", "failure modes", "recovery", "guardrails")


@dataclass(frozen=True)
class WorkflowSections:
    preconditions: List[str] = field(default_factory=list)
    steps: List[WorkflowStep] = field(default_factory=list)
    failure_modes: List[str] = field(default_factory=list)
    recovery: List[str] = field(default_factory=list)
    guardrails: List[str] = field(default_factory=list)


def split_sections(body: str) -> Dict[str, List[str]]:
    """Group body lines under their level-2 heading (lower-cased).

    A section runs until the next heading of the same or a higher level;
    deeper headings stay inside it. Lines outside any level-2 section are
    dropped. A repeated heading name keeps the last occurrence.
    """
    sections: Dict[str, List[str]] = {}
    current: List[str] | None = None
    for line, in_code in iter_body_lines(body):
        if not in_code:
            parsed = parse_heading(line)
            if parsed is not None and parsed[0] <= 2:
                current = None
                if parsed[0] == 2:
                    current = []
                    sections[parsed[1].lower()] = current
                continue
        if current is not None:
            current.append(line)
    return sections


def extract_list_items(lines: List[str]) -> List[str]:
    items: List[str] = []
    for line in lines:
        match = _LIST_ITEM_RE.match(line.strip())
        if match:
            items.append(match.group(1).strip())
    return items


def detect_api_reference(text: str) -> str | None:
    match = _API_REF_RE.search(text)
    return match.group(1) if match else None


def parse_workflow_sections(body: str) -> WorkflowSections:
    sections = split_sections(body)
    items = {name: extract_list_items(sections.get(name, [])) for name in SECTION_NAMES}

    steps = [
        WorkflowStep(step_number=index, action=action, uses_api=detect_api_reference(action))
        for index, action in enumerate(items["steps"], start=1)
    ]
    return WorkflowSections(
        preconditions=items["preconditions"],
        steps=steps,
        failure_modes=items["failure modes"],
        recovery=items["recovery"],
        guardrails=items["guardrails"],
    )
