"""Build settings sourced from the environment and `.env`."""

import os
from dataclasses import dataclass, field
from typing import Any, FrozenSet

from dotenv import load_dotenv

EXCLUDED_DIRS: FrozenSet[str] = frozenset(
    {
        "_assets",
        "_css",
        "_images",
        "_static",
        "_landing",
        "_navbar",
        "_footer",
        "public",
        "node_modules",
    }
)

EXCLUDED_FILES: FrozenSet[str] = frozenset(
    {
        "docs-config.json",
        "vercel.json",
        "netlify.toml",
        "README.md",
    }
)

DEFAULT_OUTPUT_PATH = "graph.json"


@dataclass
class BuildSettings:
    docs_path: str = ""
    output_path: str = DEFAULT_OUTPUT_PATH
    base_url: str | None = None
    log_level: str = "INFO"
    excluded_dirs: FrozenSet[str] = field(default_factory=lambda: EXCLUDED_DIRS)
    excluded_files: FrozenSet[str] = field(default_factory=lambda: EXCLUDED_FILES)


def normalize_base_url(value: str | None) -> str | None:
    if not value:
        return None
    stripped = value.rstrip("/")
    return stripped or None


def load_settings(**overrides: Any) -> BuildSettings:
    """Read settings from the environment; non-None overrides take precedence."""
    load_dotenv()
    values = {
        "docs_path": os.getenv("DOC_GRAPH_DOCS_PATH", ""),
        "output_path": os.getenv("DOC_GRAPH_OUTPUT_PATH", DEFAULT_OUTPUT_PATH),
        "base_url": os.getenv("DOC_GRAPH_BASE_URL"),
        "log_level": os.getenv("DOC_GRAPH_LOG_LEVEL", "INFO"),
    }
    for key, value in overrides.items():
        if value is not None:
            values[key] = value
    settings = BuildSettings(**values)
    settings.base_url = normalize_base_url(settings.base_url)
    settings.log_level = str(settings.log_level).upper()
    return settings
