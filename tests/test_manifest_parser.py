"""Tests for manifest parsing."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from gitbook2epub.exceptions import EmptyManifestError
from gitbook2epub.manifest_parser import (
    ManifestEntry,
    Mutation,
    ParserState,
    TreeBuilder,
    classify_line,
    indent_level,
    is_index_page,
    next_mutation,
    parse_manifest,
    parse_manifest_file,
    primary_index_title,
)
from gitbook2epub.schemas import Item, SubChapter


def _entry(target: str, level: int = 1, index: bool = False) -> ManifestEntry:
    return ManifestEntry(title=target, target=target, indent=(level - 1) * 2, is_index_page=index)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("* [a](a.md)", 1),
        ("  * [a](a.md)", 2),
        ("   * [a](a.md)", 2),
        ("    * [a](a.md)", 3),
        ("      * [a](a.md)", 4),
        ("\t* [a](a.md)", 1),
    ],
)
def test_indent_level(line: str, expected: int) -> None:
    assert indent_level(line) == expected


class TestIsIndexPage:
    """Tests for is_index_page function."""

    def test_readme_in_subdirectory(self) -> None:
        assert is_index_page("chapter1/README.md")

    def test_root_readme_is_not_container(self) -> None:
        assert not is_index_page("README.md")

    def test_plain_file(self) -> None:
        assert not is_index_page("chapter1/intro.md")

    def test_case_insensitive(self) -> None:
        assert is_index_page("chapter1/readme.md")

    def test_custom_index_names(self) -> None:
        assert is_index_page("part/index.md", ("index.md",))
        assert not is_index_page("part/README.md", ("index.md",))


class TestClassifyLine:
    """Tests for classify_line function."""

    def test_star_bullet(self) -> None:
        entry = classify_line("* [Intro](intro.md)")
        assert entry == ManifestEntry(title="Intro", target="intro.md", indent=0, is_index_page=False)

    def test_dash_bullet_nested(self) -> None:
        entry = classify_line("    - [Deep](a/b.md)")
        assert entry is not None
        assert entry.indent_level == 3

    def test_ignores_blank_and_non_list_lines(self) -> None:
        assert classify_line("") is None
        assert classify_line("   ") is None
        assert classify_line("# Summary") is None
        assert classify_line("[Intro](intro.md)") is None

    def test_ignores_list_line_without_link(self) -> None:
        assert classify_line("* Part One") is None

    def test_ignores_external_links(self) -> None:
        assert classify_line("* [Site](https://example.com/page.md)") is None

    def test_ignores_other_extensions(self) -> None:
        assert classify_line("* [Image](cover.png)") is None

    def test_strips_anchor_and_decodes(self) -> None:
        entry = classify_line("* [Part](my%20part/README.md#top)")
        assert entry is not None
        assert entry.target == "my part/README.md"
        assert entry.is_index_page


class TestNextMutation:
    """Tests for the builder transition function."""

    def test_level_one_index_page_opens_chapter(self) -> None:
        for state in ParserState:
            assert next_mutation(state, _entry("ch/README.md", 1, True)) is Mutation.OPEN_CHAPTER

    def test_level_one_plain_file_is_front_matter(self) -> None:
        assert next_mutation(ParserState.CHAPTER_OPEN, _entry("a.md")) is Mutation.ADD_FRONT_MATTER

    def test_nested_entry_without_chapter_is_front_matter(self) -> None:
        assert next_mutation(ParserState.NO_CHAPTER, _entry("a.md", 2)) is Mutation.ADD_FRONT_MATTER

    def test_nested_index_page_opens_subchapter(self) -> None:
        entry = _entry("ch/sub/README.md", 2, True)
        assert next_mutation(ParserState.CHAPTER_OPEN, entry) is Mutation.OPEN_SUBCHAPTER
        assert next_mutation(ParserState.SUBCHAPTER_OPEN, entry, 2) is Mutation.OPEN_SUBCHAPTER

    def test_deeper_item_goes_to_subchapter(self) -> None:
        entry = _entry("ch/sub/a.md", 3)
        assert next_mutation(ParserState.SUBCHAPTER_OPEN, entry, 2) is Mutation.ADD_SUBCHAPTER_ITEM

    def test_sibling_item_goes_to_chapter(self) -> None:
        entry = _entry("ch/b.md", 2)
        assert next_mutation(ParserState.SUBCHAPTER_OPEN, entry, 2) is Mutation.ADD_CHAPTER_ITEM

    def test_item_in_open_chapter(self) -> None:
        assert next_mutation(ParserState.CHAPTER_OPEN, _entry("ch/a.md", 2)) is Mutation.ADD_CHAPTER_ITEM

    def test_any_indentation_is_nested(self) -> None:
        tab_child = ManifestEntry(title="A", target="ch/a.md", indent=1, is_index_page=False)
        assert tab_child.indent_level == 1
        assert next_mutation(ParserState.CHAPTER_OPEN, tab_child) is Mutation.ADD_CHAPTER_ITEM

    def test_subchapter_scope_uses_raw_indentation(self) -> None:
        entry = ManifestEntry(title="A", target="ch/sub/a.md", indent=3, is_index_page=False)
        assert next_mutation(ParserState.SUBCHAPTER_OPEN, entry, 2) is Mutation.ADD_SUBCHAPTER_ITEM


class TestTreeBuilder:
    """Tests for TreeBuilder state changes."""

    def test_states_follow_entries(self, tmp_path: Path) -> None:
        builder = TreeBuilder(tmp_path)
        assert builder.state is ParserState.NO_CHAPTER

        assert builder.feed(_entry("ch/README.md", 1, True)) is Mutation.OPEN_CHAPTER
        assert builder.state is ParserState.CHAPTER_OPEN

        assert builder.feed(_entry("ch/sub/README.md", 2, True)) is Mutation.OPEN_SUBCHAPTER
        assert builder.state is ParserState.SUBCHAPTER_OPEN

        assert builder.feed(_entry("ch/sub/a.md", 3)) is Mutation.ADD_SUBCHAPTER_ITEM
        assert builder.state is ParserState.SUBCHAPTER_OPEN

        assert builder.feed(_entry("ch/b.md", 2)) is Mutation.ADD_CHAPTER_ITEM
        assert builder.state is ParserState.CHAPTER_OPEN

    def test_duplicate_is_skipped(self, tmp_path: Path) -> None:
        builder = TreeBuilder(tmp_path)
        builder.feed(_entry("a.md"))
        assert builder.feed(_entry("./a.md")) is Mutation.SKIP_DUPLICATE
        assert len(builder.tree.front_matter) == 1


class TestPrimaryIndexTitle:
    """Tests for primary_index_title function."""

    def test_title_from_manifest(self) -> None:
        assert primary_index_title("# Summary\n\n* [Foreword](README.md)\n", "README.md") == "Foreword"

    def test_nested_line_is_ignored(self) -> None:
        assert primary_index_title("  * [Nested](README.md)\n", "README.md") == "Preface"

    def test_default_title(self) -> None:
        assert primary_index_title("* [Ch](ch/README.md)\n", "README.md") == "Preface"


class TestParseManifest:
    """Tests for parse_manifest function."""

    def test_example_book(self, example_book: Path) -> None:
        """README, a chapter and a nested section produce the expected tree."""
        tree = parse_manifest_file(example_book / "SUMMARY.md")

        assert [item.title for item in tree.front_matter] == ["Intro"]
        assert tree.front_matter[0].is_primary_index
        assert tree.front_matter[0].path == (example_book / "README.md").resolve()

        assert len(tree.chapters) == 1
        chapter = tree.chapters[0]
        assert chapter.title == "Ch1"
        assert chapter.path == (example_book / "ch1" / "README.md").resolve()
        assert [node.title for node in chapter.files] == ["S1"]
        assert isinstance(chapter.files[0], Item)
        assert chapter.files[0].is_sub_item

        assert tree.max_level == 2
        assert tree.entry_count() == 3

    def test_primary_index_registered_without_manifest_line(self, make_book) -> None:
        book = make_book("* [Ch](ch/README.md)\n", {"README.md": "# Hi\n", "ch/README.md": "# Ch\n"})

        tree = parse_manifest((book / "SUMMARY.md").read_text(), book)

        assert tree.front_matter[0].title == "Preface"
        assert tree.front_matter[0].is_primary_index
        assert tree.entry_count() == 2

    def test_flat_manifest_degrades_to_front_matter(self, make_book) -> None:
        book = make_book("* [A](a.md)\n* [B](b.md)\n", {"a.md": "# A\n", "b.md": "# B\n"})

        tree = parse_manifest((book / "SUMMARY.md").read_text(), book)

        assert [item.title for item in tree.front_matter] == ["A", "B"]
        assert tree.chapters == []
        assert tree.max_level == 1

    def test_nested_lines_without_chapter_keep_max_level_one(self, make_book) -> None:
        summary = "* [A](a.md)\n  * [B](b.md)\n    * [C](c.md)\n"
        book = make_book(summary, {"a.md": "a", "b.md": "b", "c.md": "c"})

        tree = parse_manifest(summary, book)

        assert [item.title for item in tree.front_matter] == ["A", "B", "C"]
        assert tree.max_level == 1

    def test_single_flat_entry(self, make_book) -> None:
        book = make_book("* [Only](only.md)\n", {"only.md": "# Only\n"})

        tree = parse_manifest("* [Only](only.md)\n", book)

        assert tree.max_level == 1
        assert tree.entry_count() == 1

    def test_duplicate_targets_keep_first_occurrence(self, make_book) -> None:
        summary = (
            "* [Ch](ch/README.md)\n"
            "  * [A](ch/a.md)\n"
            "  * [B](ch/b.md)\n"
            "  * [A again](ch/a.md)\n"
        )
        book = make_book(summary, {"ch/README.md": "# Ch", "ch/a.md": "a", "ch/b.md": "b"})

        tree = parse_manifest(summary, book)

        assert [node.title for node in tree.chapters[0].files] == ["A", "B"]
        assert tree.entry_count() == 3

    def test_readme_line_not_duplicated(self, example_book: Path) -> None:
        tree = parse_manifest((example_book / "SUMMARY.md").read_text(), example_book)
        readme = (example_book / "README.md").resolve()
        assert sum(1 for item in tree.front_matter if item.path == readme) == 1

    def test_subchapters_and_items(self, make_book) -> None:
        summary = (
            "* [Ch](ch/README.md)\n"
            "  * [Sub](ch/sub/README.md)\n"
            "    * [A](ch/sub/a.md)\n"
            "  * [B](ch/b.md)\n"
            "    * [C](ch/c.md)\n"
        )
        files = {
            "ch/README.md": "# Ch",
            "ch/sub/README.md": "# Sub",
            "ch/sub/a.md": "# A",
            "ch/b.md": "# B",
            "ch/c.md": "# C",
        }
        book = make_book(summary, files)

        tree = parse_manifest(summary, book)

        chapter = tree.chapters[0]
        assert [node.title for node in chapter.files] == ["Sub", "B", "C"]
        sub = chapter.files[0]
        assert isinstance(sub, SubChapter)
        assert sub.indent_level == 2
        assert [item.title for item in sub.files] == ["A"]
        assert tree.max_level == 3

    def test_multiple_chapters_reset_subchapter(self, make_book) -> None:
        summary = (
            "* [One](one/README.md)\n"
            "  * [Sub](one/sub/README.md)\n"
            "* [Two](two/README.md)\n"
            "    * [Deep](two/deep.md)\n"
        )
        book = make_book(summary, {})

        tree = parse_manifest(summary, book)

        assert [chapter.title for chapter in tree.chapters] == ["One", "Two"]
        assert [node.title for node in tree.chapters[1].files] == ["Deep"]
        assert isinstance(tree.chapters[1].files[0], Item)

    @pytest.mark.parametrize("indent", ["\t", " "])
    def test_shallow_indented_child_stays_in_chapter(self, make_book, indent: str) -> None:
        summary = f"* [Ch](ch/README.md)\n{indent}* [A](ch/a.md)\n"
        book = make_book(summary, {"ch/README.md": "# Ch", "ch/a.md": "# A"})

        tree = parse_manifest(summary, book)

        assert tree.front_matter == []
        assert [node.title for node in tree.chapters[0].files] == ["A"]

    def test_odd_indentation_under_subchapter(self, make_book) -> None:
        summary = "* [Ch](ch/README.md)\n  * [Sub](ch/sub/README.md)\n   * [A](ch/sub/a.md)\n"
        book = make_book(summary, {})

        tree = parse_manifest(summary, book)

        chapter = tree.chapters[0]
        assert [node.title for node in chapter.files] == ["Sub"]
        sub = chapter.files[0]
        assert isinstance(sub, SubChapter)
        assert sub.indent == 2
        assert [item.title for item in sub.files] == ["A"]

    def test_missing_sources_are_synthesized(self, make_book, caplog: pytest.LogCaptureFixture) -> None:
        summary = "* [Ch](ch/README.md)\n  * [Gone](ch/gone.md)\n"
        book = make_book(summary, {"ch/README.md": "# Ch"})

        with caplog.at_level(logging.WARNING, logger="gitbook2epub.manifest_parser"):
            tree = parse_manifest(summary, book)

        chapter = tree.chapters[0]
        assert not chapter.synthesized
        assert chapter.files[0].synthesized
        assert chapter.files[0].path == (book / "ch" / "gone.md").resolve()
        assert "ch/gone.md" in caplog.text

    def test_missing_readme_listed_in_manifest(self, make_book) -> None:
        book = make_book("* [Intro](README.md)\n", {})

        tree = parse_manifest("* [Intro](README.md)\n", book)

        assert len(tree.front_matter) == 1
        assert tree.front_matter[0].synthesized
        assert not tree.front_matter[0].is_primary_index

    def test_custom_index_pages(self, make_book) -> None:
        summary = "* [Part](part/index.md)\n  * [A](part/a.md)\n"
        book = make_book(summary, {"part/index.md": "# Part", "part/a.md": "# A"})

        tree = parse_manifest(summary, book, index_pages=("index.md",))

        assert [chapter.title for chapter in tree.chapters] == ["Part"]
        assert [node.title for node in tree.chapters[0].files] == ["A"]

    def test_empty_manifest_raises(self, make_book) -> None:
        book = make_book("# Summary\n\nNothing here.\n", {"README.md": "# Hi"})

        with pytest.raises(EmptyManifestError, match="No chapter links"):
            parse_manifest("# Summary\n\nNothing here.\n", book)

    def test_only_external_links_raises(self, tmp_path: Path) -> None:
        with pytest.raises(EmptyManifestError):
            parse_manifest("* [Site](https://example.com/x.md)\n", tmp_path)
