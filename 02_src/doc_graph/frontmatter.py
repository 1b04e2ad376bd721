"""Frontmatter parsing and classification into the four document schemas."""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import FrontmatterError

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)
_LEGACY_API_RE = re.compile(r"^(GET|POST|PUT|PATCH|DELETE|HEAD|OPTIONS)\s+(.+)$", re.IGNORECASE)


class _FrontmatterModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str | None = None
    description: str | None = None
    tags: List[str] = Field(default_factory=list)
    version: str | None = None
    locale: str | None = None

    @field_validator("version", "locale", mode="before")
    @classmethod
    def _scalar_to_str(cls, value: Any) -> Any:
        # YAML turns `version: 1.0` into a float.
        if value is None or isinstance(value, (dict, list)):
            return value
        return str(value)


class StandardFrontmatter(_FrontmatterModel):
    type: Literal["doc"] = "doc"
    keywords: List[str] | None = None
    author: str | None = None
    publish_date: str | None = Field(default=None, alias="publishDate")
    section: str | None = None

    @field_validator("publish_date", mode="before")
    @classmethod
    def _date_to_str(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class ConceptFrontmatter(_FrontmatterModel):
    type: Literal["concept"]
    entity_type: str = "resource"
    canonical_name: str
    aliases: List[str] = Field(default_factory=list)
    related_entities: List[str] = Field(default_factory=list)


class ApiFrontmatter(_FrontmatterModel):
    type: Literal["api"]
    api_type: str = "http"
    operation_id: str
    method: str | None = None
    path: str | None = None
    resource: str | None = None
    capabilities: List[str] = Field(default_factory=list)
    side_effects: List[str] = Field(default_factory=list)
    preconditions: List[str] = Field(default_factory=list)
    permissions: List[str] = Field(default_factory=list)
    rate_limit: str | None = None


class WorkflowFrontmatter(_FrontmatterModel):
    type: Literal["workflow"]
    workflow_id: str
    goal: str
    primary_entity: str | None = None
    risk_level: str | None = None
    requires_human_approval: bool = False


Frontmatter = Union[StandardFrontmatter, ConceptFrontmatter, ApiFrontmatter, WorkflowFrontmatter]

_SCHEMAS = {
    "concept": ConceptFrontmatter,
    "api": ApiFrontmatter,
    "workflow": WorkflowFrontmatter,
}


@dataclass(frozen=True)
class ParsedDoc:
    frontmatter: Frontmatter
    body: str
    raw_data: Dict[str, Any]


def split_frontmatter(content: str, source: str | None = None) -> tuple[Dict[str, Any], str]:
    """Split raw file content into (metadata mapping, body)."""
    if content.startswith("\ufeff"):
        content = content[1:]
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as error:
        raise FrontmatterError(f"invalid YAML frontmatter: {error}", file=source) from error
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("frontmatter must be a mapping", file=source)
    return data, content[match.end():]


def derive_operation_id(method: str, path: str) -> str:
    """Build an operation id from a method and path, e.g. `post_v1_workspaces`."""
    trimmed = path[1:] if path.startswith("/") else path
    return f"{method.lower()}_{re.sub(r'[/{}]', '_', trimmed)}"


def migrate_legacy_api(data: Dict[str, Any]) -> Dict[str, Any]:
    """Rewrite the legacy `api: "GET /users"` shape into the api schema shape."""
    legacy = data.get("api")
    if data.get("type") or not isinstance(legacy, str):
        return data
    match = _LEGACY_API_RE.match(legacy.strip())
    if not match:
        return data

    method, path = match.group(1), match.group(2).strip()
    migrated = {key: value for key, value in data.items() if key != "api"}
    migrated["type"] = "api"
    migrated["method"] = method.upper()
    migrated["path"] = path
    if not migrated.get("operation_id"):
        migrated["operation_id"] = derive_operation_id(method, path)
    if not migrated.get("api_type"):
        migrated["api_type"] = "http"
    return migrated


def classify(data: Dict[str, Any], source: str | None = None) -> Frontmatter:
    schema = _SCHEMAS.get(str(data.get("type") or "doc"))
    try:
        if schema is None:
            return StandardFrontmatter.model_validate({**data, "type": "doc"})
        return schema.model_validate(data)
    except ValidationError as error:
        raise FrontmatterError(_format_validation_error(error), file=source) from error


def parse_and_classify(content: str, source: str | None = None) -> ParsedDoc:
    data, body = split_frontmatter(content, source=source)
    data = migrate_legacy_api(data)
    frontmatter = classify(data, source=source)
    return ParsedDoc(frontmatter=frontmatter, body=body, raw_data=data)


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "frontmatter"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)
