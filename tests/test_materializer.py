"""Tests for ImageMaterializer."""

from pathlib import Path

import pytest

from obsidian_hugo.core.materializer import ImageMaterializer
from obsidian_hugo.core.models import ImageCopyError


class TestPlan:
    """Tests for destination naming."""

    def test_flattens_folders(self, tmp_path):
        materializer = ImageMaterializer(tmp_path)
        resolved = materializer.plan(tmp_path / "src.png", "media/shots/My Shot.png")
        assert resolved.destination_name == "My-Shot.png"
        assert resolved.source_path == tmp_path / "src.png"

    def test_windows_separators(self, tmp_path):
        materializer = ImageMaterializer(tmp_path)
        assert materializer.plan(tmp_path / "a", "media\\a b.png").destination_name == "a-b.png"

    def test_url_encoding(self, tmp_path):
        materializer = ImageMaterializer(tmp_path)
        assert materializer.url_for("café (1).png") == "/images/caf%C3%A9%20(1).png"

    def test_custom_prefix(self, tmp_path):
        assert ImageMaterializer(tmp_path, "static/img/").url_for("a.png") == "/static/img/a.png"
        assert ImageMaterializer(tmp_path, "").url_for("a.png") == "/a.png"


class TestMaterialize:
    """Tests for materialize()."""

    @pytest.fixture
    def source(self, tmp_path):
        path = tmp_path / "vault" / "My Image.png"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"\x89PNG fake")
        return path

    @pytest.mark.asyncio
    async def test_copies_and_renders(self, source, tmp_path):
        static_dir = tmp_path / "site" / "static" / "images"
        materializer = ImageMaterializer(static_dir)

        markdown = await materializer.materialize(source, "My Image.png", "A picture")

        assert markdown == "![A picture](/images/My-Image.png)"
        assert (static_dir / "My-Image.png").read_bytes() == b"\x89PNG fake"

    @pytest.mark.asyncio
    async def test_default_alt_is_sanitized_stem(self, source, tmp_path):
        materializer = ImageMaterializer(tmp_path / "out")

        markdown = await materializer.materialize(source, "folder/My Image.png", "")

        assert markdown == "![My-Image](/images/My-Image.png)"

    @pytest.mark.asyncio
    async def test_overwrites_existing(self, source, tmp_path):
        static_dir = tmp_path / "out"
        static_dir.mkdir()
        (static_dir / "My-Image.png").write_bytes(b"old")
        materializer = ImageMaterializer(static_dir)

        await materializer.materialize(source, "My Image.png", "x")

        assert (static_dir / "My-Image.png").read_bytes() == b"\x89PNG fake"

    @pytest.mark.asyncio
    async def test_copy_failure_wrapped(self, tmp_path):
        materializer = ImageMaterializer(tmp_path / "out")
        missing = tmp_path / "gone.png"

        with pytest.raises(ImageCopyError) as exc_info:
            await materializer.materialize(missing, "gone.png", "")

        assert exc_info.value.source == missing
        assert exc_info.value.destination == tmp_path / "out" / "gone.png"
        assert "gone.png" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_destination_blocked_by_file(self, source, tmp_path):
        blocker = tmp_path / "out"
        blocker.write_text("not a directory")
        materializer = ImageMaterializer(blocker / "images")

        with pytest.raises(ImageCopyError):
            await materializer.materialize(source, "My Image.png", "")
