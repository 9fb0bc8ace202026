"""Dependency relations extracted from issue body text.

Recognized lines (leading whitespace ignored):

    - [ ] #12                       task list item, incomplete
    - [x] owner/repo#3              task list item, complete
    Depends on: https://github.com/owner/repo/issues/7

References are resolved to issue URLs in this order, first match wins:
``#N`` in the current repository, ``owner/repo#N``, then the first
``http(s)://github.com/`` link in the text.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterator

from linkify_it import LinkifyIt

from .logging_utils import get_logger

logger = get_logger(__name__)

_TASK_INCOMPLETE = "- [ ]"
_TASK_COMPLETE = "- [x]"


class RelationKind(str, Enum):
    DEPENDS_ON = "depends_on"
    TASK_COMPLETE = "task_complete"
    TASK_INCOMPLETE = "task_incomplete"


@dataclass(frozen=True)
class Relation:
    kind: RelationKind
    target: str


class RelationPatterns:
    """Compiled matchers shared by every extraction call. Read-only."""

    def __init__(self) -> None:
        # ASCII-only matching; issue references never need unicode classes.
        self.depends_on_prefix = re.compile(r"\A\s*depends\s+on\s*:?\s*", re.IGNORECASE | re.ASCII)
        # "#123" not glued to repository-name characters on either side.
        self.hash_number = re.compile(r"(?:\A|[^0-9A-Za-z_-])#([0-9]+)(?:\Z|[^0-9A-Za-z_-])", re.ASCII)
        self.owner_repo_number = re.compile(r"\b([0-9A-Za-z_-]+)/([0-9A-Za-z_-]+)#([0-9]+)\b", re.ASCII)
        self.is_github = re.compile(r"\Ahttps?://github\.com/", re.ASCII)
        self.link_finder = LinkifyIt()


@lru_cache(maxsize=1)
def default_patterns() -> RelationPatterns:
    return RelationPatterns()


class RelationExtractor:
    def __init__(self, patterns: RelationPatterns | None = None) -> None:
        self._patterns = patterns or default_patterns()

    def relations(self, text: str, repository: str, context: str) -> Iterator[Relation]:
        """Yield relations found in ``text``, one line at a time.

        ``repository`` is the base URL used for ``#N`` references and
        ``context`` names the source item in warnings.
        """
        # Lines end at "\n" or "\r\n" only; other separators stay inside a line.
        for raw_line in text.split("\n"):
            line = raw_line.removesuffix("\r").lstrip()
            if line.startswith(_TASK_INCOMPLETE) or line.startswith(_TASK_COMPLETE):
                kind = RelationKind.TASK_INCOMPLETE if line.startswith(_TASK_INCOMPLETE) else RelationKind.TASK_COMPLETE
                task_text = line[len(_TASK_INCOMPLETE):].strip()
                url = self.extract_url(task_text, repository)
                if url is not None:
                    yield Relation(kind=kind, target=url)
                continue

            prefix = self._patterns.depends_on_prefix.match(line)
            if prefix is None:
                continue
            url = self.resolve_url(line[prefix.end():], repository, context)
            if url is not None:
                yield Relation(kind=RelationKind.DEPENDS_ON, target=url)

    def resolve_url(self, text: str, repository: str, context: str) -> str | None:
        """Like extract_url, but warn when non-empty text has no reference."""
        url = self.extract_url(text, repository)
        if url is None and text:
            logger.warning("Malformed issue or PR URL %r in project item %r", text, context)
        return url

    def extract_url(self, text: str, repository: str) -> str | None:
        if not text:
            return None

        match = self._patterns.hash_number.search(text)
        if match:
            return f"{repository}/issues/{match.group(1)}"

        match = self._patterns.owner_repo_number.search(text)
        if match:
            owner, repo, number = match.groups()
            return f"https://github.com/{owner}/{repo}/issues/{number}"

        # Only the first GitHub link counts; email addresses are not links here.
        for link in self._patterns.link_finder.match(text) or []:
            if link.schema == "mailto:":
                continue
            if self._patterns.is_github.match(link.raw):
                return link.raw

        return None


def relations(text: str, repository: str, context: str) -> Iterator[Relation]:
    return RelationExtractor().relations(text, repository, context)
