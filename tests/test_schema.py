from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from quire.frontmatter import FrontmatterError, dump_frontmatter, extract_frontmatter
from quire.schema import (
    Category,
    ImageRef,
    Invalid,
    Reference,
    Valid,
    ValidationError,
    coerce_date,
    validate_category,
    validate_post,
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def valid_frontmatter(**overrides):
    data = {
        "title": "Hello",
        "description": "First post",
        "publishDate": date(2025, 9, 5),
        "category": "tech",
    }
    data.update(overrides)
    return data


def issue_fields(result):
    assert isinstance(result, Invalid)
    return [issue.field for issue in result.issues]


def test_extract_frontmatter():
    text = "---\ntitle: Hello\ntags: [js, css]\n---\n# Body\n"
    data, body = extract_frontmatter(text)
    assert data == {"title": "Hello", "tags": ["js", "css"]}
    assert body == "# Body\n"

    data, body = extract_frontmatter("# No frontmatter")
    assert data == {}
    assert body == "# No frontmatter"

    data, body = extract_frontmatter("---\n---\nbody")
    assert data == {}
    assert body == "body"


def test_extract_frontmatter_keeps_dashes_inside_values():
    data, body = extract_frontmatter("---\ntitle: a --- b\n---\nbody")
    assert data == {"title": "a --- b"}
    assert body == "body"


def test_extract_frontmatter_errors():
    with pytest.raises(FrontmatterError) as excinfo:
        extract_frontmatter("---\ntitle: [unclosed\n---\n", "post.md")
    assert excinfo.value.source_path == "post.md"
    assert "Invalid YAML" in excinfo.value.message

    with pytest.raises(FrontmatterError) as excinfo:
        extract_frontmatter("---\n- a\n- b\n---\n")
    assert "mapping" in excinfo.value.message


def test_dump_frontmatter_round_trips_through_extract():
    text = dump_frontmatter({"title": "Hi", "publishDate": date(2025, 1, 2)}, "Body")
    data, body = extract_frontmatter(text)
    assert data == {"title": "Hi", "publishDate": date(2025, 1, 2)}
    assert body == "\nBody"


def test_coerce_date_accepts_date_like_values():
    assert coerce_date(date(2025, 9, 5)) == utc(2025, 9, 5)
    assert coerce_date(datetime(2025, 9, 5, 10, 30)) == utc(2025, 9, 5, 10, 30)
    assert coerce_date("2025-09-05") == utc(2025, 9, 5)
    assert coerce_date("2025-09-05T10:00:00Z") == utc(2025, 9, 5, 10)
    assert coerce_date("2025-09-05T12:00:00+02:00") == utc(2025, 9, 5, 10)
    assert coerce_date(0) == utc(1970, 1, 1)
    assert coerce_date(1_000) == utc(1970, 1, 1, 0, 0, 1)

    aware = datetime(2025, 9, 5, 1, tzinfo=timezone(timedelta(hours=3)))
    assert coerce_date(aware) == utc(2025, 9, 4, 22)
    assert coerce_date(aware).tzinfo == timezone.utc


@pytest.mark.parametrize("value", ["not a date", "", True, [2025], {"y": 2025}])
def test_coerce_date_rejects_garbage(value):
    with pytest.raises((TypeError, ValueError)):
        coerce_date(value)


def test_validate_post_applies_defaults():
    result = validate_post(valid_frontmatter())
    assert isinstance(result, Valid)
    post = result.unwrap()
    assert post.title == "Hello"
    assert post.publish_date == utc(2025, 9, 5)
    assert post.updated_date is None
    assert post.is_draft is False
    assert post.tags == ()
    assert post.hero_image is None
    assert post.category == Reference("category", "tech")


def test_validate_post_reads_all_fields():
    post = validate_post(
        valid_frontmatter(
            updatedDate="2025-09-10",
            isDraft=True,
            tags=["js", "JS"],
            heroImage="https://example.com/hero.png",
            category={"collection": "category", "id": "design"},
            layout="ignored",
        )
    ).unwrap()
    assert post.updated_date == utc(2025, 9, 10)
    assert post.is_draft is True
    assert post.tags == ("js", "JS")
    assert post.hero_image == ImageRef("https://example.com/hero.png")
    assert post.hero_image.path is None
    assert post.category.id == "design"


def test_validate_post_accepts_pub_date_alias():
    raw = valid_frontmatter()
    del raw["publishDate"]
    raw["pubDate"] = "2024-01-02"
    assert validate_post(raw).unwrap().publish_date == utc(2024, 1, 2)


def test_validate_post_reports_every_failing_field():
    result = validate_post(
        {
            "title": "  ",
            "description": 3,
            "publishDate": "yesterday",
            "isDraft": "no",
            "category": {"collection": "blog", "id": "x"},
            "tags": ["ok", 7],
        },
        "posts/bad.md",
    )
    assert issue_fields(result) == [
        "title",
        "description",
        "publishDate",
        "isDraft",
        "category",
        "tags[1]",
    ]
    with pytest.raises(ValidationError) as excinfo:
        result.unwrap()
    assert excinfo.value.source_path == "posts/bad.md"
    assert excinfo.value.kind == "blog"
    assert "posts/bad.md" in str(excinfo.value)
    assert "isDraft: expected a boolean" in str(excinfo.value)


def test_validate_post_missing_required_fields():
    result = validate_post({})
    assert issue_fields(result) == ["title", "description", "publishDate", "category"]
    assert all(issue.message == "required field is missing" for issue in result.issues)


def test_validate_post_rejects_non_mapping_and_bad_tags():
    assert issue_fields(validate_post(["title"])) == ["<root>"]
    assert issue_fields(validate_post(valid_frontmatter(tags="js"))) == ["tags"]


def test_validate_post_hero_image_resolution(tmp_path: Path):
    (tmp_path / "hero.png").write_bytes(b"png")
    post = validate_post(valid_frontmatter(heroImage="hero.png"), base_dir=tmp_path).unwrap()
    assert post.hero_image.src == "hero.png"
    assert post.hero_image.path == (tmp_path / "hero.png").resolve()

    result = validate_post(valid_frontmatter(heroImage="missing.png"), base_dir=tmp_path)
    assert issue_fields(result) == ["heroImage"]
    assert "image not found" in result.issues[0].message


def test_validate_category():
    category = validate_category({"id": "tech", "slug": "tech", "name": "Tech"}).unwrap()
    assert category == Category("tech", "tech", "Tech")

    result = validate_category({"id": "tech", "name": 1}, "quire.yaml:categories[0]")
    assert issue_fields(result) == ["slug", "name"]
    assert result.error().source_path == "quire.yaml:categories[0]"
    assert issue_fields(validate_category("tech")) == ["<root>"]
