"""Document discovery phase: enumerates the markdown files to compile."""

from typing import Any, Dict

from ..config import EXCLUDED_DIRS, EXCLUDED_FILES
from ..discovery import collect_markdown_files
from ..pipeline import PipelinePhase


class DocumentDiscoveryPhase(PipelinePhase):
    phase_name = "discovery"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        docs_path = context.get("docs_path") or ""
        doc_files = collect_markdown_files(
            docs_path,
            excluded_dirs=context.get("excluded_dirs", EXCLUDED_DIRS),
            excluded_files=context.get("excluded_files", EXCLUDED_FILES),
        )
        return {"doc_files": doc_files}
