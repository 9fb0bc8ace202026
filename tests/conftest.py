"""Shared fixtures for the issue graph test suite."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from issue_graph.graph_builder import GraphBuilder
from issue_graph.filters import GraphFilter
from issue_graph.graph_model import ItemState, Node, NodeId

REPOSITORY = "https://github.com/foo/bar"
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def issue_url(number: int) -> str:
    return f"{REPOSITORY}/issues/{number}"


@pytest.fixture
def make_node() -> Callable[..., Node]:
    """Build nodes with sequential ids."""
    counter = {"next": 1}

    def factory(
        text: str,
        url: str = "",
        depends_on: List[str] | None = None,
        state: ItemState = ItemState.OPEN,
        updated_at: datetime = NOW,
        project_titles: List[str] | None = None,
    ) -> Node:
        builder_id = counter["next"]
        counter["next"] += 1
        return Node(
            id=NodeId(builder_id),
            text=text,
            url=url,
            state=state,
            depends_on_urls=list(depends_on or []),
            project_titles=set(project_titles or []),
            updated_at=updated_at,
        )

    return factory


@pytest.fixture
def chain_graph(make_node):
    """A blocks B blocks C; B is closed long before the cutoff."""

    def build(show_all: bool = False):
        builder = GraphBuilder(
            show_all=show_all,
            graph_filter=GraphFilter(updated_after=NOW - timedelta(days=7)),
        )
        builder.insert(make_node("A", issue_url(1)))
        builder.insert(
            make_node("B", issue_url(2), [issue_url(1)], state=ItemState.CLOSED, updated_at=NOW - timedelta(days=30))
        )
        builder.insert(make_node("C", issue_url(3), [issue_url(2)]))
        return builder.build()

    return build


def issue_payload(
    number: int,
    title: str,
    body: str = "",
    state: str = "OPEN",
    updated_at: str = "2024-06-01T10:00:00Z",
    projects: List[str] | None = None,
    url: str | None = None,
) -> Dict[str, Any]:
    return {
        "title": title,
        "body": body,
        "url": url if url is not None else issue_url(number),
        "state": state,
        "labels": [{"name": "roadmap"}],
        "projectItems": [{"title": project, "status": {"name": "Todo"}} for project in projects or []],
        "updatedAt": updated_at,
    }


@pytest.fixture
def write_issues(tmp_path) -> Callable[[List[Dict[str, Any]], str], Path]:
    def writer(issues: List[Dict[str, Any]], name: str = "issues.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(issues), encoding="utf-8")
        return path

    return writer


@pytest.fixture(autouse=True)
def isolated_package_logging(monkeypatch):
    """Undo handler and level changes made by the CLI entrypoint."""
    import logging

    from issue_graph import logging_utils

    package_logger = logging.getLogger(logging_utils.PACKAGE_LOGGER)
    handlers = list(package_logger.handlers)
    level = package_logger.level
    monkeypatch.setattr(logging_utils, "_handler", None)
    yield
    package_logger.handlers = handlers
    package_logger.setLevel(level)
