import logging

import pytest

from issue_graph.relations import Relation, RelationExtractor, RelationKind, default_patterns

REPOSITORY = "https://github.com/foo/bar"


@pytest.fixture
def extractor():
    return RelationExtractor()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("#123", "https://github.com/foo/bar/issues/123"),
        (" #123", "https://github.com/foo/bar/issues/123"),
        ("#123 ", "https://github.com/foo/bar/issues/123"),
        ("#123.", "https://github.com/foo/bar/issues/123"),
        ("aaa/bbb#123", "https://github.com/aaa/bbb/issues/123"),
        (" aaa/bbb#123.", "https://github.com/aaa/bbb/issues/123"),
        ("https://github.com/aaa/bbb/issues/123", "https://github.com/aaa/bbb/issues/123"),
        ("https://github.com/aaa/bbb/issues/123.", "https://github.com/aaa/bbb/issues/123"),
        ("[text](https://github.com/aaa/bbb/issues/123)", "https://github.com/aaa/bbb/issues/123"),
    ],
)
def test_extract_url_forms(extractor, text, expected):
    assert extractor.extract_url(text, REPOSITORY) == expected


def test_short_form_wins_over_url(extractor):
    text = "https://github.com/aaa/bbb/issues/9 and #12"
    assert extractor.extract_url(text, REPOSITORY) == "https://github.com/foo/bar/issues/12"


def test_cross_repository_wins_over_url(extractor):
    text = "https://github.com/aaa/bbb/issues/9 or ccc/ddd#4"
    assert extractor.extract_url(text, REPOSITORY) == "https://github.com/ccc/ddd/issues/4"


def test_only_first_github_url_is_used(extractor):
    text = "see https://gitlab.com/x/y/issues/1 then https://github.com/a/b/pull/2 and https://github.com/c/d/issues/3"
    assert extractor.extract_url(text, REPOSITORY) == "https://github.com/a/b/pull/2"


def test_email_and_foreign_links_are_ignored(extractor):
    assert extractor.extract_url("mail someone@example.com", REPOSITORY) is None
    assert extractor.extract_url("https://example.com/issues/1", REPOSITORY) is None


def test_hash_glued_to_word_is_rejected(extractor):
    assert extractor.extract_url("x#123y", REPOSITORY) is None
    assert extractor.extract_url("#123y", REPOSITORY) is None


def test_empty_text_has_no_url(extractor):
    assert extractor.extract_url("", REPOSITORY) is None


def test_depends_on_short_form(extractor):
    assert list(extractor.relations("depends on #12", REPOSITORY, "item")) == [
        Relation(RelationKind.DEPENDS_ON, "https://github.com/foo/bar/issues/12")
    ]


def test_depends_on_cross_repository(extractor):
    relations = list(extractor.relations("depends on aaa/bbb#5", "https://github.com/other/repo", "item"))
    assert relations == [Relation(RelationKind.DEPENDS_ON, "https://github.com/aaa/bbb/issues/5")]


@pytest.mark.parametrize("line", ["Depends on: #7", "  DEPENDS   ON #7", "depends on : #7", "\tdepends on:#7"])
def test_depends_on_prefix_variants(extractor, line):
    relations = list(extractor.relations(line, REPOSITORY, "item"))
    assert [relation.target for relation in relations] == ["https://github.com/foo/bar/issues/7"]


def test_malformed_reference_warns(extractor, caplog):
    with caplog.at_level(logging.WARNING):
        relations = list(extractor.relations("depends on x#123y", REPOSITORY, "Parent item"))
    assert relations == []
    assert "Malformed issue or PR URL 'x#123y'" in caplog.text
    assert "Parent item" in caplog.text


def test_empty_depends_on_is_silent(extractor, caplog):
    with caplog.at_level(logging.WARNING):
        assert list(extractor.relations("Depends on:", REPOSITORY, "item")) == []
    assert caplog.records == []


def test_task_list_items(extractor, caplog):
    body = "\n".join(
        [
            "Tasks:",
            "- [ ] #1",
            "  - [x] aaa/bbb#2",
            "- [ ] write the docs",
            "- [X] #3",
        ]
    )
    with caplog.at_level(logging.WARNING):
        relations = list(extractor.relations(body, REPOSITORY, "item"))
    assert relations == [
        Relation(RelationKind.TASK_INCOMPLETE, "https://github.com/foo/bar/issues/1"),
        Relation(RelationKind.TASK_COMPLETE, "https://github.com/aaa/bbb/issues/2"),
    ]
    assert caplog.records == []


def test_unrelated_lines_yield_nothing(extractor):
    body = "This issue depends on #4 in the middle of a sentence.\nSee #5."
    assert list(extractor.relations(body, REPOSITORY, "item")) == []


def test_extraction_is_repeatable(extractor):
    body = "Depends on #1\n- [ ] #2\ndepends on https://github.com/a/b/issues/3"
    first = list(extractor.relations(body, REPOSITORY, "item"))
    second = list(RelationExtractor().relations(body, REPOSITORY, "item"))
    assert first == second
    assert len(first) == 3


def test_patterns_are_built_once():
    assert default_patterns() is default_patterns()
    assert RelationExtractor()._patterns is RelationExtractor()._patterns


@pytest.mark.parametrize("separator", ["\x0c", "\x0b", "\x85", "\u2028", "\u2029", "\x1e"])
def test_only_newlines_split_lines(extractor, separator):
    body = f"depends on #1{separator}depends on #2"
    relations = list(extractor.relations(body, REPOSITORY, "item"))
    assert relations == [Relation(RelationKind.DEPENDS_ON, "https://github.com/foo/bar/issues/1")]


def test_crlf_line_endings(extractor):
    body = "Depends on: #1\r\n- [x] #2\r\n"
    assert [relation.target for relation in extractor.relations(body, REPOSITORY, "item")] == [
        "https://github.com/foo/bar/issues/1",
        "https://github.com/foo/bar/issues/2",
    ]
