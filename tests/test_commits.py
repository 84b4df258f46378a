import pytest

from nextversion.commits import BREAKING_CHANGE, NotConventionalCommit, parse_conventional_commit


def test_simple_header():
    c = parse_conventional_commit("feat: add new user authentication")
    assert c.type == "feat"
    assert c.scope is None
    assert c.description == "add new user authentication"
    assert c.breaking is False
    assert c.notes == []


def test_scope_and_body():
    c = parse_conventional_commit("fix(api): implement endpoints\n\nLonger explanation\nover two lines\n")
    assert c.type == "fix" and c.scope == "api"
    assert c.body == "Longer explanation\nover two lines"
    assert c.notes == []


def test_bang_is_normalized_to_breaking_note():
    c = parse_conventional_commit("feat!: remove deprecated API endpoints")
    assert c.breaking
    assert [(n.title, n.text) for n in c.notes] == [(BREAKING_CHANGE, "remove deprecated API endpoints")]


def test_bang_with_scope_and_footer_keeps_single_note():
    msg = "other(some-scope)!: remove endpoints\n\nBREAKING CHANGE: Old endpoints are no longer supported"
    c = parse_conventional_commit(msg)
    assert c.type == "other" and c.scope == "some-scope"
    assert [(n.title, n.text) for n in c.notes] == [(BREAKING_CHANGE, "Old endpoints are no longer supported")]


def test_hyphenated_breaking_footer_and_continuation():
    msg = "refactor: rename config\n\nBody text.\n\nBREAKING-CHANGE: keys renamed\nsee docs\nRefs: #12"
    c = parse_conventional_commit(msg)
    assert c.body == "Body text."
    assert [(n.title, n.text) for n in c.notes] == [
        (BREAKING_CHANGE, "keys renamed\nsee docs"),
        ("Refs", "#12"),
    ]
    assert c.breaking


def test_breaking_change_in_free_text_is_not_a_note():
    c = parse_conventional_commit("fix: tweak\n\nThis is not a BREAKING CHANGE: really")
    assert c.notes == []
    assert c.breaking is False


def test_footer_needs_blank_line_after_header():
    c = parse_conventional_commit("fix: tweak\nBREAKING CHANGE: glued to header")
    assert c.notes == []


@pytest.mark.parametrize(
    "message",
    [
        "",
        "   \n\t  ",
        "Add some new features",
        "Bug fixes and improvements",
        "feat add missing colon",
        "feat: ",
        "feat(): empty scope",
        " feat: leading space",
    ],
)
def test_not_conventional(message):
    with pytest.raises(NotConventionalCommit):
        parse_conventional_commit(message)


def test_any_token_is_a_type():
    assert parse_conventional_commit("WIP: work in progress").type == "WIP"
