"""Error types raised by the graph build."""

from typing import Optional


class DocGraphError(Exception):
    """Base error for the documentation graph build.

    Attributes:
        message: Human-readable error description.
        file: Relative path of the document that caused the error, if any.
        error_type: Machine-readable error category.
    """

    error_type = "doc_graph_error"

    def __init__(self, message: str, file: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.file = file


class FrontmatterError(DocGraphError):
    """A single document's metadata block could not be classified."""

    error_type = "frontmatter_invalid"


class ConfigurationError(DocGraphError):
    """Fatal: the build cannot start with the given inputs."""

    error_type = "configuration_invalid"


class DocumentReadError(DocGraphError):
    """A single document could not be read as UTF-8 text."""

    error_type = "document_unreadable"
