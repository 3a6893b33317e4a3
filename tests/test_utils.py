from pathlib import Path

from quire import utils


def test_slugify():
    assert utils.slugify("Hello, World!") == "hello-world"
    assert utils.slugify("Mixed Case Slug") == "mixed-case-slug"
    assert utils.slugify("!!!") == "index"


def test_entry_id_from_path():
    root = Path("content/blog")
    assert utils.entry_id_from_path(root / "first-post.md", root) == "first-post"
    assert utils.entry_id_from_path(root / "2025" / "Hello World.mdx", root) == "2025/hello-world"


def test_content_file_predicates():
    assert utils.is_content_file(Path("post.md"))
    assert utils.is_content_file(Path("post.MDX"))
    assert not utils.is_content_file(Path("notes.txt"))
    assert utils.is_internal_path(Path("_drafts/post.md"))
    assert utils.is_internal_path(Path("2025/_hidden.md"))
    assert not utils.is_internal_path(Path("2025/post.md"))


def test_urls():
    assert utils.post_url("2025/hello") == "/blog/2025/hello/"
    assert utils.category_url("tech") == "/category/tech/"
    assert utils.tag_url("js") == "/tags/js/"
    assert utils.tag_url("c++ tips") == "/tags/c%2B%2B%20tips/"


def test_ensure_clean_dir(tmp_path):
    target = tmp_path / "build"
    target.mkdir()
    (target / "old.txt").write_text("old", encoding="utf-8")
    utils.ensure_clean_dir(target)
    assert list(target.iterdir()) == []

    # fallback deletion path when rmtree is ineffective
    nested = tmp_path / "stubborn"
    (nested / "inner").mkdir(parents=True)
    (nested / "inner" / "file.txt").write_text("data", encoding="utf-8")
    original_rmtree = utils.shutil.rmtree

    def fake_rmtree(path, ignore_errors=False):
        return None

    utils.shutil.rmtree = fake_rmtree
    try:
        utils.ensure_clean_dir(nested)
    finally:
        utils.shutil.rmtree = original_rmtree
    assert nested.exists() and list(nested.iterdir()) == []

    missing = tmp_path / "missing-dir"
    utils.ensure_clean_dir(missing)
    assert missing.exists()
