"""Pipeline phases for the issue dependency graph."""

from .extraction import DependencyExtractionPhase
from .ingestion import IssueIngestionPhase
from .reference_resolver import ReferenceResolverPhase
from .rendering import DiagramRenderPhase
from .validation import ValidationAndQAPhase, find_invariant_violations

__all__ = [
    "IssueIngestionPhase",
    "DependencyExtractionPhase",
    "ReferenceResolverPhase",
    "ValidationAndQAPhase",
    "DiagramRenderPhase",
    "find_invariant_violations",
]
