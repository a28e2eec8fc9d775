"""Tests for image reference rewriting and slugs."""

import pytest

from kbimport.errors import StorageError
from kbimport.images import ImageRewriter, destination_dir, slugify


@pytest.fixture
def rewriter(assets):
    return ImageRewriter(assets)


@pytest.fixture
def doc_dir(tmp_path):
    """A markdown directory with sibling and parent-level images."""
    root = tmp_path / "tutorial"
    (root / "en").mkdir(parents=True)
    (root / "img").mkdir()
    (root / "img" / "logo.png").write_bytes(b"logo-bytes")
    (root / "en" / "shot.jpg").write_bytes(b"shot-bytes")
    return root / "en"


class TestSlugify:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Setup", "setup"),
            ("Getting Started", "getting-started"),
            ("  Windows / macOS  ", "windows-macos"),
            ("Café Menü", "cafe-menu"),
            ("snake_case_name", "snake-case-name"),
            ("A  --  B", "a-b"),
            ("Contact @ Home", "contact-at-home"),
            ("v2.0 Release!", "v20-release"),
        ],
    )
    def test_slugs(self, text, expected):
        assert slugify(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("设置", "she-zhi"),
            ("Настройка", "nastroika"),
            ("Über Café", "uber-cafe"),
        ],
    )
    def test_non_latin_is_transliterated(self, text, expected):
        assert slugify(text) == expected

    def test_empty(self):
        assert slugify("") == ""

    def test_destination_dir(self):
        assert destination_dir("en", "Getting Started") == (
            "knowledge/ppanel-tutorial/en/getting-started"
        )


class TestImageRewriter:
    def test_local_image_copied_and_rewritten(self, rewriter, doc_dir, settings):
        body = "Intro\n\n![logo](../img/logo.png)\n"

        result = rewriter.rewrite(body, doc_dir, "en", "Setup")

        assert result == "Intro\n\n![logo](/storage/knowledge/ppanel-tutorial/en/setup/logo.png)\n"
        copied = settings.managed_dir / "en" / "setup" / "logo.png"
        assert copied.read_bytes() == b"logo-bytes"

    def test_sibling_image_and_alt_text(self, rewriter, doc_dir):
        result = rewriter.rewrite("![A screenshot](shot.jpg)", doc_dir, "zh-CN", "Getting Started")

        assert result == (
            "![A screenshot](/storage/knowledge/ppanel-tutorial/zh-CN/getting-started/shot.jpg)"
        )

    def test_backslash_target(self, rewriter, doc_dir, settings):
        result = rewriter.rewrite("![logo](..\\img\\logo.png)", doc_dir, "en", "Setup")

        assert result == "![logo](/storage/knowledge/ppanel-tutorial/en/setup/logo.png)"
        assert (settings.managed_dir / "en" / "setup" / "logo.png").is_file()

    @pytest.mark.parametrize(
        "body",
        [
            "![remote](https://example.com/a.png)",
            "![remote](http://example.com/img/logo.png)",
            "before ![x](https://cdn.example.com/x.png?size=2) after",
        ],
    )
    def test_remote_images_untouched(self, rewriter, doc_dir, settings, body):
        assert rewriter.rewrite(body, doc_dir, "en", "Setup") == body
        assert not settings.managed_dir.exists()

    def test_missing_image_untouched(self, rewriter, doc_dir, settings):
        body = "![gone](../img/missing.png)"

        assert rewriter.rewrite(body, doc_dir, "en", "Setup") == body
        assert not settings.managed_dir.exists()

    def test_directory_target_untouched(self, rewriter, doc_dir):
        body = "![dir](../img)"
        assert rewriter.rewrite(body, doc_dir, "en", "Setup") == body

    def test_mixed_references(self, rewriter, doc_dir, settings):
        body = (
            "![one](../img/logo.png) text ![two](https://example.com/b.png)\n"
            "![three](nope.png) ![four](shot.jpg)"
        )

        result = rewriter.rewrite(body, doc_dir, "en", "Setup")

        assert result == (
            "![one](/storage/knowledge/ppanel-tutorial/en/setup/logo.png) text "
            "![two](https://example.com/b.png)\n"
            "![three](nope.png) ![four](/storage/knowledge/ppanel-tutorial/en/setup/shot.jpg)"
        )
        assert (settings.managed_dir / "en" / "setup" / "logo.png").is_file()
        assert (settings.managed_dir / "en" / "setup" / "shot.jpg").is_file()

    def test_plain_links_not_treated_as_images(self, rewriter, doc_dir):
        body = "[logo](../img/logo.png)"
        assert rewriter.rewrite(body, doc_dir, "en", "Setup") == body

    def test_same_filename_later_copy_wins(self, rewriter, tmp_path, settings):
        """Distinct images sharing a basename in one category overwrite each other."""
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        (tmp_path / "a" / "pic.png").write_bytes(b"first")
        (tmp_path / "b" / "pic.png").write_bytes(b"second")

        rewriter.rewrite("![a](a/pic.png)", tmp_path, "en", "Setup")
        rewriter.rewrite("![b](b/pic.png)", tmp_path, "en", "Setup")

        assert (settings.managed_dir / "en" / "setup" / "pic.png").read_bytes() == b"second"

    def test_copy_failure_raises_storage_error(self, rewriter, doc_dir, settings):
        # A file where the category directory should be
        target = settings.managed_dir / "en"
        target.mkdir(parents=True)
        (target / "setup").write_text("blocker")

        with pytest.raises(StorageError):
            rewriter.rewrite("![logo](../img/logo.png)", doc_dir, "en", "Setup")


class TestAssetStorage:
    def test_url(self, assets):
        assert assets.url("knowledge/x/y.png") == "/storage/knowledge/x/y.png"
        assert assets.url("/knowledge/x/y.png") == "/storage/knowledge/x/y.png"

    def test_path(self, assets, settings):
        assert assets.path("knowledge/ppanel-tutorial") == settings.managed_dir

    def test_copy_file_creates_directories(self, assets, tmp_path):
        src = tmp_path / "img.png"
        src.write_bytes(b"data")

        rel = assets.copy_file(src, "knowledge/ppanel-tutorial/en/setup")

        assert rel == "knowledge/ppanel-tutorial/en/setup/img.png"
        assert assets.exists(rel)
        assert assets.path(rel).read_bytes() == b"data"

    def test_delete_directory(self, assets, tmp_path):
        src = tmp_path / "img.png"
        src.write_bytes(b"data")
        assets.copy_file(src, "knowledge/ppanel-tutorial/en/setup")

        assert assets.delete_directory("knowledge/ppanel-tutorial") is True
        assert not assets.exists("knowledge/ppanel-tutorial")
        assert assets.exists("knowledge")

    def test_delete_missing_directory(self, assets):
        assert assets.delete_directory("knowledge/ppanel-tutorial") is False
