"""Pipeline phases for documentation graph compilation."""

from .extraction import NodeExtractionPhase
from .ingestion import DocumentDiscoveryPhase
from .reference_resolver import ReferenceResolverPhase
from .validation import ValidationAndQAPhase

__all__ = [
    "DocumentDiscoveryPhase",
    "NodeExtractionPhase",
    "ReferenceResolverPhase",
    "ValidationAndQAPhase",
]
