"""Exception hierarchy for the issue dependency graph."""

from typing import List


class IssueGraphError(Exception):
    """Base exception for graph construction and loading."""


class IdCounterOverflowError(IssueGraphError):
    """Raised when the node id counter runs out of range. Fatal."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Overflowed number of items (limit {limit})")


class DuplicateNodeUrlError(IssueGraphError):
    """Raised when two nodes are inserted under the same URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Duplicate node URL: {url}")


class GraphAlreadyBuiltError(IssueGraphError):
    """Raised when a builder is used after build()."""


class InputDataError(IssueGraphError):
    """Raised when exported issue or project data fails validation."""


class ConfigError(IssueGraphError):
    """Raised for invalid environment configuration."""


class PipelineError(IssueGraphError):
    """Raised when a phase runs without the context keys it needs."""

    def __init__(self, phase_name: str, missing: List[str]) -> None:
        self.phase_name = phase_name
        self.missing = list(missing)
        super().__init__(f"Phase '{phase_name}' is missing context keys: {', '.join(self.missing)}")
