"""Markdown document discovery and slug derivation."""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List

from .config import EXCLUDED_DIRS, EXCLUDED_FILES
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".mdx")


@dataclass(frozen=True)
class DocFile:
    absolute_path: Path
    relative_path: str


def collect_markdown_files(
    docs_path: str | Path,
    excluded_dirs: Iterable[str] = EXCLUDED_DIRS,
    excluded_files: Iterable[str] = EXCLUDED_FILES,
) -> List[DocFile]:
    """Recursively collect `.md`/`.mdx` files under `docs_path`.

    Asset and config directories are skipped wherever they appear in the
    tree; entries are visited in sorted order so the result is reproducible.
    """
    if not str(docs_path):
        raise ConfigurationError("No docs path specified.")
    root = Path(docs_path).resolve()
    if not root.exists():
        raise ConfigurationError(f"Input path does not exist: {root}")
    if not root.is_dir():
        raise ConfigurationError(f"Input path is not a directory: {root}")

    skip_dirs = set(excluded_dirs)
    skip_files = set(excluded_files)
    results: List[DocFile] = []

    def walk(directory: Path) -> None:
        for entry in sorted(directory.iterdir(), key=lambda item: item.name):
            if entry.is_dir():
                if entry.name in skip_dirs:
                    continue
                walk(entry)
            elif entry.is_file():
                if entry.name in skip_files:
                    continue
                if entry.suffix.lower() not in MARKDOWN_SUFFIXES:
                    continue
                relative = entry.relative_to(root).as_posix()
                results.append(DocFile(absolute_path=entry, relative_path=relative))

    walk(root)
    logger.info("Discovered %d markdown files under %s", len(results), root)
    return results


def derive_slug(relative_path: str) -> str:
    """Map a relative document path to its public slug.

    "getting-started/installation.md" -> "/getting-started/installation"
    "introduction/index.mdx"          -> "/introduction"
    "index.md"                        -> "/"
    """
    slug = relative_path.replace("\\", "/")
    for suffix in MARKDOWN_SUFFIXES:
        if slug.endswith(suffix):
            slug = slug[: -len(suffix)]
            break
    if slug.endswith("/index"):
        slug = slug[: -len("/index")]
    if slug == "index":
        slug = ""
    return "/" + slug


def is_index_document(source_path: str) -> bool:
    path = PurePosixPath(source_path.replace("\\", "/"))
    return path.stem == "index" and path.suffix.lower() in MARKDOWN_SUFFIXES


def source_directory(source_path: str) -> str:
    parent = PurePosixPath(source_path.replace("\\", "/")).parent.as_posix()
    return parent
