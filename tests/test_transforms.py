"""Tests for naming helpers, link transforms and front matter handling."""

import datetime
from pathlib import Path

import pytest
import yaml

from obsidian_hugo.core.models import Document, FrontmatterError, NoteContext
from obsidian_hugo.transforms.frontmatter import (
    compose,
    dump_document,
    identity,
    merge_defaults,
    prune_and_add,
    split_frontmatter,
    title_case,
)
from obsidian_hugo.transforms.links import hugo_ref, section_link
from obsidian_hugo.transforms.naming import sanitize_filename, slugify


FIXED_NOW = datetime.datetime(2024, 3, 1, 12, 30, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def note():
    return NoteContext(vault_root=Path("/vault"), relative_path=Path("posts/My Note.md"))


class TestSlugify:
    """Tests for slugify."""

    def test_accents_and_punctuation(self):
        assert slugify("Héllo, World!") == "hello-world"

    def test_repeated_hyphens_and_padding(self):
        assert slugify("  a--b  ") == "a-b"

    def test_underscores_become_hyphens(self):
        assert slugify("snake_case name") == "snake-case-name"

    def test_lowercases(self):
        assert slugify("My Note") == "my-note"

    def test_leading_and_trailing_symbols(self):
        assert slugify("--Draft!--") == "draft"

    def test_empty(self):
        assert slugify("") == ""


class TestSanitizeFilename:
    """Tests for sanitize_filename."""

    def test_forbidden_characters_removed(self):
        assert sanitize_filename('a:b/c*d') == "abcd"

    def test_whitespace_becomes_hyphen(self):
        assert sanitize_filename("My Image  1.png") == "My-Image-1.png"

    def test_collapses_and_trims_hyphens(self):
        assert sanitize_filename("- a - b -") == "a-b"

    def test_control_characters_removed(self):
        assert sanitize_filename("a\x01b\x1f.png") == "ab.png"

    def test_empty_falls_back(self):
        assert sanitize_filename('<>:"|?*') == "untitled"
        assert sanitize_filename("") == "untitled"

    def test_unchanged_name(self):
        assert sanitize_filename("diagram.png") == "diagram.png"


class TestLinkTransforms:
    """Tests for link transform factories."""

    def test_section_link(self):
        transform = section_link("posts")
        assert transform("My Note", "my-note", "") == "[My Note](/posts/my-note/)"

    def test_section_link_with_anchor(self):
        transform = section_link("posts")
        assert transform("My Note", "my-note", "intro") == "[My Note](/posts/my-note/#intro)"

    def test_section_link_strips_slashes(self):
        transform = section_link("/blog/")
        assert transform("A", "a", "") == "[A](/blog/a/)"

    def test_section_link_empty_section(self):
        transform = section_link("")
        assert transform("A", "a", "") == "[A](/a/)"

    def test_hugo_ref(self):
        transform = hugo_ref()
        assert transform("My Note", "my-note", "") == '[My Note]({{< ref "my-note" >}})'

    def test_hugo_ref_with_anchor(self):
        transform = hugo_ref()
        assert transform("My Note", "my-note", "intro") == '[My Note]({{< ref "my-note#intro" >}})'


class TestSplitFrontmatter:
    """Tests for split_frontmatter."""

    def test_no_frontmatter(self):
        doc = split_frontmatter("# Title\n\nBody\n")
        assert doc.metadata == {}
        assert doc.body == "# Title\n\nBody\n"

    def test_with_frontmatter(self):
        doc = split_frontmatter("---\ntitle: Hello\ntags:\n  - a\n---\nBody\n")
        assert doc.metadata == {"title": "Hello", "tags": ["a"]}
        assert doc.body == "Body\n"

    def test_empty_block(self):
        doc = split_frontmatter("---\n---\nBody")
        assert doc.metadata == {}
        assert doc.body == "Body"

    def test_unclosed_block_is_body(self):
        raw = "---\ntitle: Unclosed\n\nContent.\n"
        doc = split_frontmatter(raw)
        assert doc.metadata == {}
        assert doc.body == raw

    def test_malformed_yaml(self):
        with pytest.raises(FrontmatterError):
            split_frontmatter("---\ntags: [unclosed\n---\nBody\n")

    def test_non_mapping(self):
        with pytest.raises(FrontmatterError):
            split_frontmatter("---\n- a\n- b\n---\nBody\n")

    def test_horizontal_rule_later_in_body(self):
        doc = split_frontmatter("---\ntitle: T\n---\nText\n\n---\n\nMore\n")
        assert doc.metadata == {"title": "T"}
        assert doc.body == "Text\n\n---\n\nMore\n"


class TestMergeDefaults:
    """Tests for merge_defaults."""

    def test_defaults_when_absent(self):
        merged = merge_defaults({}, "My Note", FIXED_NOW)
        assert merged["title"] == "My Note"
        assert merged["date"] == "2024-03-01T12:30:00+00:00"
        datetime.datetime.fromisoformat(merged["date"])

    def test_existing_title_kept_verbatim(self):
        merged = merge_defaults({"title": "keep ME; as is"}, "file", FIXED_NOW)
        assert merged["title"] == "keep ME; as is"

    def test_existing_date_kept(self):
        merged = merge_defaults({"date": datetime.date(2020, 1, 2)}, "file", FIXED_NOW)
        assert merged["date"] == datetime.date(2020, 1, 2)

    def test_empty_title_counts_as_absent(self):
        merged = merge_defaults({"title": "", "date": None}, "file", FIXED_NOW)
        assert merged["title"] == "file"
        assert merged["date"] == "2024-03-01T12:30:00+00:00"

    def test_other_fields_preserved_in_order(self):
        merged = merge_defaults({"tags": ["x"], "draft": True}, "file", FIXED_NOW)
        assert list(merged) == ["title", "date", "tags", "draft"]
        assert merged["tags"] == ["x"]
        assert merged["draft"] is True


class TestDumpDocument:
    """Tests for dump_document."""

    def test_with_metadata(self):
        output = dump_document(Document(metadata={"title": "T", "date": "2024-01-01"}, body="Body\n"))
        assert output.startswith("---\n")
        assert output.endswith("---\nBody\n")
        fm = yaml.safe_load(output.split("---\n")[1])
        assert fm == {"title": "T", "date": "2024-01-01"}

    def test_keeps_key_order(self):
        output = dump_document(Document(metadata={"title": "T", "date": "d", "alpha": 1}, body=""))
        assert output.index("title") < output.index("date") < output.index("alpha")

    def test_without_metadata(self):
        assert dump_document(Document(metadata={}, body="Just content")) == "Just content\n"

    def test_trailing_blank_lines_kept(self):
        body = "Intro\n\n```\ncode\n\n\n```\n\n"
        output = dump_document(Document(metadata={"title": "T"}, body=body))
        assert output == "---\ntitle: T\n---\n" + body

    def test_newline_added_when_missing(self):
        output = dump_document(Document(metadata={"title": "T"}, body="```\ncode\n\n```"))
        assert output.endswith("---\n```\ncode\n\n```\n")

    def test_unicode(self):
        output = dump_document(Document(metadata={"title": "Café"}, body="x"))
        assert "title: Café" in output

    def test_round_trip(self):
        raw = dump_document(Document(metadata={"title": "T", "tags": ["a", "b"]}, body="Body"))
        doc = split_frontmatter(raw)
        assert doc.metadata == {"title": "T", "tags": ["a", "b"]}
        assert doc.body == "Body\n"


class TestFrontmatterTransforms:
    """Tests for front matter transform factories."""

    def test_identity(self, note):
        transform = identity()
        fm = {"title": "Test", "tags": ["a", "b"]}
        result = transform(fm, note)
        assert result == fm
        assert result is not fm

    def test_prune_keep_keys(self, note):
        transform = prune_and_add(keep_keys=["tags"])
        fm = {"title": "T", "date": "d", "tags": ["a"], "extra": "gone"}
        assert transform(fm, note) == {"title": "T", "date": "d", "tags": ["a"]}

    def test_prune_remove_keys(self, note):
        transform = prune_and_add(remove_keys=["extra", "title"])
        fm = {"title": "T", "extra": "gone", "tags": []}
        assert transform(fm, note) == {"title": "T", "tags": []}

    def test_add_fields_do_not_override(self, note):
        transform = prune_and_add(add_fields={"author": "Me", "draft": False})
        fm = {"title": "T", "draft": True}
        assert transform(fm, note) == {"title": "T", "draft": True, "author": "Me"}

    def test_title_case(self, note):
        transform = title_case()
        result = transform({"title": "the art of war; part two"}, note)
        assert result["title"] == "The Art of War: Part Two"

    def test_title_case_ignores_non_string(self, note):
        transform = title_case()
        assert transform({"title": 42}, note) == {"title": 42}

    def test_compose(self, note):
        transform = compose(prune_and_add(remove_keys=["secret"]), title_case())
        result = transform({"title": "hello world", "secret": 1}, note)
        assert result == {"title": "Hello World"}
