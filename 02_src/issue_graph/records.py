"""Exported issue records and their JSON loaders."""

import json
import re
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Set

from .errors import InputDataError
from .graph_model import ItemState

_REPOSITORY_URL = re.compile(r"\A(https?://[^/\s]+/[^/\s]+/[^/\s]+)/(?:issues|pull)/[0-9]+(?:[/?#].*)?\Z")
_CLOSED_STATES = {"CLOSED", "MERGED"}


@dataclass
class IssueRecord:
    title: str
    body: str
    url: str
    state: ItemState
    updated_at: datetime
    labels: List[str] = field(default_factory=list)
    project_titles: List[str] = field(default_factory=list)

    def repository(self) -> str | None:
        """Base URL of the owning repository, e.g. https://github.com/owner/repo."""
        match = _REPOSITORY_URL.match(self.url)
        return match.group(1) if match else None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "IssueRecord":
        if not isinstance(payload, dict):
            raise InputDataError(f"Issue record must be an object, got {type(payload).__name__}")

        title = payload.get("title")
        if not isinstance(title, str):
            raise InputDataError("Issue record is missing a string 'title'")
        url = payload.get("url", "")
        body = payload.get("body") or ""
        if not isinstance(url, str) or not isinstance(body, str):
            raise InputDataError(f"Issue {title!r} has a non-string 'url' or 'body'")

        raw_state = str(payload.get("state", "OPEN")).upper()
        if raw_state == "OPEN":
            state = ItemState.OPEN
        elif raw_state in _CLOSED_STATES:
            state = ItemState.CLOSED
        else:
            raise InputDataError(f"Issue {title!r} has unknown state {raw_state!r}")

        return cls(
            title=title,
            body=body,
            url=url,
            state=state,
            updated_at=parse_timestamp(payload.get("updatedAt"), context=title),
            labels=[_label_name(label, title) for label in payload.get("labels") or []],
            project_titles=[_project_title(item, title) for item in payload.get("projectItems") or []],
        )


def parse_timestamp(value: Any, context: str = "") -> datetime:
    if not isinstance(value, str) or not value:
        raise InputDataError(f"Issue {context!r} is missing 'updatedAt'")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as error:
        raise InputDataError(f"Issue {context!r} has invalid 'updatedAt' {value!r}") from error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _label_name(label: Any, context: str) -> str:
    if isinstance(label, str):
        return label
    if isinstance(label, dict) and isinstance(label.get("name"), str):
        return label["name"]
    raise InputDataError(f"Issue {context!r} has a malformed label {label!r}")


def _project_title(item: Any, context: str) -> str:
    if isinstance(item, dict) and isinstance(item.get("title"), str):
        return item["title"]
    raise InputDataError(f"Issue {context!r} has a malformed project item {item!r}")


def _read_json(path: Path) -> Any:
    if str(path) == "-":
        raw_text = sys.stdin.read()
    else:
        try:
            raw_text = path.read_text(encoding="utf-8")
        except OSError as error:
            raise InputDataError(f"Cannot read {path}: {error}") from error
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as error:
        raise InputDataError(f"Invalid JSON in {path}: {error.msg}") from error


def load_issue_records(paths: Iterable[Path]) -> List[IssueRecord]:
    """Load every file (``-`` reads stdin) as a JSON array of issues."""
    records: List[IssueRecord] = []
    for path in paths:
        payload = _read_json(Path(path))
        if not isinstance(payload, list):
            raise InputDataError(f"Expected a JSON array of issues in {path}")
        records.extend(IssueRecord.from_dict(item) for item in payload)
    return records


def load_project_item_urls(path: Path) -> Set[str]:
    """URLs of the items in a `gh project item-list --format json` export."""
    payload = _read_json(Path(path))
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise InputDataError(f"Expected an object with an 'items' array in {path}")
    urls: Set[str] = set()
    for item in items:
        content = item.get("content") if isinstance(item, dict) else None
        if not isinstance(content, dict):
            raise InputDataError(f"Project item without 'content' in {path}")
        url = content.get("url") or ""
        if url:
            urls.add(str(url))
    return urls
