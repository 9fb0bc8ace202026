"""Visibility filter applied to graph nodes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .graph_model import Node


def as_utc(moment: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass(frozen=True)
class GraphFilter:
    """Node visibility criteria; a node must satisfy all of them.

    include_project: when set, only nodes listed in that project pass.
    updated_after: closed nodes updated before this moment are hidden.
        Open nodes ignore it.
    """

    include_project: str | None = None
    updated_after: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_after is not None:
            object.__setattr__(self, "updated_after", as_utc(self.updated_after))

    def matches_project(self, node: Node) -> bool:
        if self.include_project is None:
            return True
        return self.include_project in node.project_titles

    def is_recent(self, node: Node) -> bool:
        if node.is_open or self.updated_after is None:
            return True
        return as_utc(node.updated_at) >= self.updated_after

    @staticmethod
    def is_connected(node: Node) -> bool:
        # Isolated nodes have nothing to show in a dependency diagram.
        return bool(node.depends_on_urls) or node.blocks_count > 0

    def passes(self, node: Node) -> bool:
        return self.matches_project(node) and self.is_recent(node) and self.is_connected(node)
