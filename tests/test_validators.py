from datetime import datetime
from pathlib import Path

from postcheck.content import DefaultPostBuilder, Post
from postcheck.protocols import CollectionRule, PostRule
from postcheck.validators import (
    CompositeValidator,
    DatePrefixRule,
    DateRule,
    DuplicateRule,
    FieldTypeRule,
    FrontmatterPresenceRule,
    Issue,
    LayoutRule,
    RequiredFieldsRule,
    TagsRule,
)


def make_post(frontmatter, name="post.md", present=True):
    return DefaultPostBuilder().from_frontmatter(
        Path("posts") / name, frontmatter, present=present
    )


def messages(issues):
    return [issue.message for issue in issues]


def test_rules_satisfy_protocols():
    for rule in (
        FrontmatterPresenceRule(),
        RequiredFieldsRule(),
        FieldTypeRule(),
        TagsRule(),
        DateRule(),
        LayoutRule(),
        DatePrefixRule(),
    ):
        assert isinstance(rule, PostRule)
    assert isinstance(DuplicateRule(), CollectionRule)


def test_presence_rule():
    assert FrontmatterPresenceRule().check(make_post({})) == []
    issues = FrontmatterPresenceRule().check(make_post({}, present=False))
    assert issues == [
        Issue(Path("posts/post.md"), "frontmatter", "missing front-matter block", line=1)
    ]


def test_required_fields_missing_and_empty():
    post = make_post({"title": "   ", "description": "x"})
    assert messages(RequiredFieldsRule().check(post)) == [
        "required field 'title' is empty",
        "missing required field 'layout'",
    ]
    ok = make_post({"title": "T", "layout": "post"})
    assert RequiredFieldsRule().check(ok) == []
    custom = RequiredFieldsRule(["author"]).check(ok)
    assert messages(custom) == ["missing required field 'author'"]
    # Without a block only the presence rule reports
    assert RequiredFieldsRule().check(make_post({}, present=False)) == []


def test_field_types():
    post = make_post({"title": 42, "layout": "post", "toc": "yes", "draft": 1})
    assert messages(FieldTypeRule().check(post)) == [
        "field 'title' must be a string, got int",
        "field 'toc' must be true or false, got 'yes'",
        "field 'draft' must be true or false, got 1",
    ]
    assert FieldTypeRule().check(make_post({"title": "T", "toc": False})) == []


def test_tags_rule():
    assert TagsRule().check(make_post({"tags": ["a", "b"]})) == []
    assert TagsRule().check(make_post({"tags": "a b"})) == []
    assert TagsRule().check(make_post({})) == []
    assert messages(TagsRule().check(make_post({"tags": ["a", 3, " "]}))) == [
        "tag #2 must be a string, got 3",
        "tag #3 is empty",
    ]
    assert messages(TagsRule().check(make_post({"tags": {"a": 1}}))) == [
        "tags must be a list of strings, got dict"
    ]


def test_date_rule():
    assert DateRule().check(make_post({"date": "2024-01-15"})) == []
    assert DateRule().check(make_post({"date": "2024-01-15 10:30:00 +0000"})) == []
    assert messages(DateRule().check(make_post({"date": "2024-02-30"}))) == [
        "invalid date: '2024-02-30'"
    ]
    assert messages(DateRule().check(make_post({"date": 20240115}))) == [
        "invalid date: 20240115"
    ]
    assert DateRule().check(make_post({})) == []
    assert messages(DateRule(required=True).check(make_post({}))) == [
        "missing required field 'date'"
    ]


def test_layout_rule():
    post = make_post({"layout": "page"})
    assert LayoutRule().check(post) == []
    assert LayoutRule(["page", "post"]).check(post) == []
    issues = LayoutRule(["post"]).check(post)
    assert messages(issues) == ["unknown layout 'page' (expected one of: post)"]


def test_date_prefix_rule():
    matching = make_post({"date": "2024-01-15 08:00"}, name="2024-01-15-a.md")
    assert DatePrefixRule().check(matching) == []
    mismatch = make_post({"date": "2024-01-16"}, name="2024-01-15-a.md")
    issues = DatePrefixRule().check(mismatch)
    assert len(issues) == 1
    assert issues[0].severity == "warning"
    assert not issues[0].is_error
    # Filename date alone is not compared with itself
    assert DatePrefixRule().check(make_post({}, name="2024-01-15-a.md")) == []


def test_duplicate_rule_reports_each_side():
    first = make_post({"title": "Testing Async DB Code"}, name="testing-async.md")
    second = make_post(
        {"title": "testing async db code", "date": "2024-01-15"},
        name="2024-01-15-testing-async.md",
    )
    third = make_post({"title": "Other"}, name="other.md")
    issues = DuplicateRule().check([first, second, third])
    assert len(issues) == 2
    assert {issue.path for issue in issues} == {first.path, second.path}
    assert all("same slug and title" in issue.message for issue in issues)
    assert all(issue.severity == "warning" for issue in issues)


def test_composite_validator_orders_and_extends():
    posts = [
        make_post({"title": "B", "layout": "post"}, name="b.md"),
        make_post({"layout": "post", "tags": [1]}, name="a.md"),
    ]
    validator = CompositeValidator()
    issues = validator.validate(posts)
    assert [(i.path.name, i.rule) for i in issues] == [
        ("a.md", "required"),
        ("a.md", "tags"),
    ]

    class NoFoo:
        rule_id = "no-foo"

        def check(self, post):
            return [Issue(post.path, self.rule_id, "foo")]

    validator.add_rule(NoFoo())
    assert len([i for i in validator.validate(posts) if i.rule == "no-foo"]) == 2


def test_composite_from_config():
    validator = CompositeValidator.from_config(
        {"required_fields": ["title"], "layouts": ["post"], "date_required": True}
    )
    post = make_post({"title": "T", "layout": "page"})
    assert sorted(i.rule for i in validator.validate([post])) == ["date", "layout"]


def test_issue_to_dict():
    issue = Issue(Path("p.md"), "date", "bad", line=None)
    assert issue.to_dict() == {
        "path": "p.md",
        "rule": "date",
        "message": "bad",
        "severity": "error",
        "line": None,
    }


def test_post_defaults():
    post = Post(path=Path("x.md"))
    assert post.tags == [] and post.date is None and post.toc is False
    assert make_post({"date": "2024-03-01"}).date == datetime(2024, 3, 1)


def test_duplicate_rule_ignores_distinct_non_ascii_slugs():
    first = make_post({"title": "Привет"}, name="привет.md")
    second = make_post({"title": "Мир"}, name="мир.md")
    assert DuplicateRule().check([first, second]) == []


def test_duplicate_rule_names_other_file_relative_to_root(tmp_path):
    root = tmp_path
    first = DefaultPostBuilder().from_frontmatter(
        root / "posts" / "a" / "same.md", {"title": "A"}, present=True
    )
    second = DefaultPostBuilder().from_frontmatter(
        root / "posts" / "b" / "same.md", {"title": "B"}, present=True
    )
    issues = DuplicateRule(root).check([first, second])
    assert sorted(messages(issues)) == [
        "duplicates posts/a/same.md (same slug)",
        "duplicates posts/b/same.md (same slug)",
    ]
    assert all(str(tmp_path) not in message for message in messages(issues))


def test_from_config_allows_no_required_fields():
    post = make_post({"description": "only a summary"})
    assert CompositeValidator.from_config({"required_fields": []}).validate([post]) == []
    missing = CompositeValidator.from_config({"required_fields": None}).validate([post])
    assert sorted(i.rule for i in missing) == ["required", "required"]


def test_tags_rule_accepts_yaml_sets(tmp_path):
    path = tmp_path / "set.md"
    path.write_text(
        "---\ntitle: T\ntags: !!set {python: null, testing: null}\n---\n",
        encoding="utf-8",
    )
    post = DefaultPostBuilder().build(path)
    assert TagsRule().check(post) == []
    assert sorted(post.tags) == ["python", "testing"]
    bad = make_post({"tags": {"python", 3}})
    issues = TagsRule().check(bad)
    assert len(issues) == 1
    assert issues[0].message.endswith("must be a string, got 3")
