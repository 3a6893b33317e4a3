"""Content schema for Quire.

This module defines the two entity kinds a blog is built from and the
explicit validation functions that turn raw frontmatter or configuration
mappings into typed values.

Key classes:
- Post: Validated frontmatter of one blog post.
- Category: One entry of the configured category list.
- Reference: Lazy pointer from a post to an entry of another collection.
- ImageRef: Hero image of a post, local or remote.
- Valid / Invalid: Tagged result returned by the validators.
- ValidationError: Raised when an Invalid result is unwrapped.

Validation never coerces silently. Each validator walks every field, collects
a ValidationIssue per problem and returns Invalid if there was at least one,
so a single run reports everything wrong with an entry.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")

BLOG = "blog"
CATEGORY = "category"

# Frontmatter keys accepted for the publish date, in priority order.
PUBLISH_DATE_KEYS = ("publishDate", "pubDate")

REMOTE_PREFIXES = ("http://", "https://", "//")


@dataclass(frozen=True)
class Reference:
    """Pointer to an entry of another collection, resolved when consumed.

    Attributes:
        collection: Name of the target collection (e.g. "category").
        id: Identifier of the target entry.
    """

    collection: str
    id: str


@dataclass(frozen=True)
class ImageRef:
    """Hero image of a post.

    Attributes:
        src: Value as written in the frontmatter.
        path: Resolved local file, or None for remote images.
    """

    src: str
    path: Path | None = None


@dataclass(frozen=True)
class Post:
    """Validated frontmatter of a blog post.

    Attributes:
        title: Non-empty title.
        description: Short summary, may be empty.
        publish_date: Publication date, timezone-aware UTC.
        category: Reference to exactly one category.
        updated_date: Optional last-update date, timezone-aware UTC.
        is_draft: Drafts are excluded from every published view.
        hero_image: Optional hero image.
        tags: Ordered tag labels, exact strings.
    """

    title: str
    description: str
    publish_date: datetime
    category: Reference
    updated_date: datetime | None = None
    is_draft: bool = False
    hero_image: ImageRef | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Category:
    """A blog category.

    Attributes:
        id: Unique key posts reference.
        slug: Unique URL path segment.
        name: Display name.
    """

    id: str
    slug: str
    name: str


@dataclass(frozen=True)
class ValidationIssue:
    """One failing field of an entity."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(Exception):
    """An entity that failed schema validation.

    Attributes:
        source_path: Where the entity came from (file path or config location).
        kind: Collection name of the entity ("blog" or "category").
        issues: Every failing field.
        message: Human-readable summary of the issues.
    """

    def __init__(
        self,
        source_path: Path | str,
        kind: str,
        issues: tuple[ValidationIssue, ...] | list[ValidationIssue],
    ):
        self.source_path = source_path
        self.kind = kind
        self.issues = tuple(issues)
        self.message = f"invalid {kind} entry: " + "; ".join(
            str(issue) for issue in self.issues
        )
        super().__init__(f"{source_path}: {self.message}")


@dataclass(frozen=True)
class Valid(Generic[T]):
    """Successful validation carrying the typed value."""

    value: T

    ok = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Invalid:
    """Failed validation carrying every issue found."""

    source_path: Path | str
    kind: str
    issues: tuple[ValidationIssue, ...]

    ok = False

    def error(self) -> ValidationError:
        return ValidationError(self.source_path, self.kind, self.issues)

    def unwrap(self):
        raise self.error()


ValidationResult = Union[Valid[T], Invalid]


def coerce_date(value: Any) -> datetime:
    """Normalize a date-like value to a timezone-aware UTC datetime.

    Accepts date and datetime objects, ISO-8601 strings (a trailing "Z" is
    read as UTC) and numbers, which are epoch milliseconds. Naive values are
    taken to be UTC; bare dates become midnight UTC.

    Args:
        value: Raw frontmatter value.

    Returns:
        Timezone-aware datetime in UTC.

    Raises:
        TypeError: If the value's type cannot represent a date.
        ValueError: If the value cannot be parsed.

    Examples:
        >>> coerce_date("2025-09-05")
        datetime.datetime(2025, 9, 5, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, bool):
        raise TypeError("expected a date, got bool")
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"timestamp {value!r} is out of range") from exc
    elif isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"cannot parse {value!r} as a date") from None
    else:
        raise TypeError(f"expected a date, got {type(value).__name__}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def validate_post(
    raw: Any,
    source_path: Path | str = "<post>",
    base_dir: Path | None = None,
) -> ValidationResult[Post]:
    """Validate a post's frontmatter.

    Args:
        raw: Parsed frontmatter mapping.
        source_path: Identity of the post, used in issues.
        base_dir: Directory local hero images are resolved against. When
            None, local images are accepted without an existence check.

    Returns:
        Valid(Post) or Invalid listing every failing field.
    """
    if not isinstance(raw, Mapping):
        return _not_a_mapping(raw, source_path, BLOG)

    issues: list[ValidationIssue] = []
    title = _string(raw, "title", issues, required=True, non_empty=True)
    description = _string(raw, "description", issues, required=True)
    date_key = next((key for key in PUBLISH_DATE_KEYS if key in raw), PUBLISH_DATE_KEYS[0])
    publish_date = _date(raw, date_key, issues, required=True)
    updated_date = _date(raw, "updatedDate", issues, required=False)
    is_draft = _boolean(raw, "isDraft", issues, default=False)
    hero_image = _image(raw, "heroImage", issues, base_dir)
    category = _reference(raw, "category", CATEGORY, issues)
    tags = _string_list(raw, "tags", issues)

    if issues:
        return Invalid(source_path, BLOG, tuple(issues))
    return Valid(
        Post(
            title=title,
            description=description,
            publish_date=publish_date,
            category=category,
            updated_date=updated_date,
            is_draft=is_draft,
            hero_image=hero_image,
            tags=tags,
        )
    )


def validate_category(
    raw: Any, source_path: Path | str = "<category>"
) -> ValidationResult[Category]:
    """Validate one configured category."""
    if not isinstance(raw, Mapping):
        return _not_a_mapping(raw, source_path, CATEGORY)

    issues: list[ValidationIssue] = []
    category_id = _string(raw, "id", issues, required=True, non_empty=True)
    slug = _string(raw, "slug", issues, required=True, non_empty=True)
    name = _string(raw, "name", issues, required=True, non_empty=True)

    if issues:
        return Invalid(source_path, CATEGORY, tuple(issues))
    return Valid(Category(id=category_id, slug=slug, name=name))


def _not_a_mapping(raw: Any, source_path: Path | str, kind: str) -> Invalid:
    issue = ValidationIssue("<root>", f"expected a mapping, got {type(raw).__name__}")
    return Invalid(source_path, kind, (issue,))


def _string(
    raw: Mapping[str, Any],
    key: str,
    issues: list[ValidationIssue],
    required: bool,
    non_empty: bool = False,
) -> str | None:
    value = raw.get(key)
    if value is None:
        if required:
            issues.append(ValidationIssue(key, "required field is missing"))
        return None
    if not isinstance(value, str):
        issues.append(
            ValidationIssue(key, f"expected a string, got {type(value).__name__}")
        )
        return None
    if non_empty and not value.strip():
        issues.append(ValidationIssue(key, "must not be empty"))
        return None
    return value


def _date(
    raw: Mapping[str, Any],
    key: str,
    issues: list[ValidationIssue],
    required: bool,
) -> datetime | None:
    value = raw.get(key)
    if value is None:
        if required:
            issues.append(ValidationIssue(key, "required field is missing"))
        return None
    try:
        return coerce_date(value)
    except (TypeError, ValueError) as exc:
        issues.append(ValidationIssue(key, str(exc)))
        return None


def _boolean(
    raw: Mapping[str, Any],
    key: str,
    issues: list[ValidationIssue],
    default: bool,
) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        issues.append(
            ValidationIssue(key, f"expected a boolean, got {type(value).__name__}")
        )
        return default
    return value


def _reference(
    raw: Mapping[str, Any],
    key: str,
    collection: str,
    issues: list[ValidationIssue],
) -> Reference | None:
    value = raw.get(key)
    if value is None:
        issues.append(ValidationIssue(key, "required field is missing"))
        return None
    if isinstance(value, Mapping):
        target = value.get("collection", collection)
        if target != collection:
            issues.append(
                ValidationIssue(
                    key, f"expected a reference to {collection!r}, got {target!r}"
                )
            )
            return None
        value = value.get("id")
    if not isinstance(value, str) or not value.strip():
        issues.append(
            ValidationIssue(key, f"expected a {collection} id, got {value!r}")
        )
        return None
    return Reference(collection, value)


def _string_list(
    raw: Mapping[str, Any], key: str, issues: list[ValidationIssue]
) -> tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        issues.append(
            ValidationIssue(key, f"expected a list of strings, got {type(value).__name__}")
        )
        return ()
    items: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            issues.append(
                ValidationIssue(
                    f"{key}[{index}]", f"expected a string, got {type(item).__name__}"
                )
            )
            continue
        items.append(item)
    return tuple(items)


def _image(
    raw: Mapping[str, Any],
    key: str,
    issues: list[ValidationIssue],
    base_dir: Path | None,
) -> ImageRef | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        issues.append(ValidationIssue(key, f"expected an image path, got {value!r}"))
        return None
    if value.startswith(REMOTE_PREFIXES):
        return ImageRef(value)
    if base_dir is None:
        return ImageRef(value, Path(value))
    path = (base_dir / value).resolve()
    if not path.is_file():
        issues.append(ValidationIssue(key, f"image not found: {value}"))
        return None
    return ImageRef(value, path)
