"""Tests for yanos.posts: loading, categorizing and ordering posts."""

from __future__ import annotations

from pathlib import Path

import pytest

from yanos.front_matter import FrontMatterError, PostHeader
from yanos.ordering import DateParseError
from yanos.posts import (
    CategoryIndex,
    PostRecord,
    category_sort_key,
    load_posts,
    output_path_for,
    sort_latest_first,
)


def record(name, header=None):
    return PostRecord(
        source_file=f"{name}.md",
        output_path=output_path_for(Path(f"{name}.md"), header),
        header=header,
        content="",
    )


class TestOutputPath:
    def test_without_header(self):
        assert output_path_for(Path("posts/hello.md"), None) == "hello.html"

    def test_without_category(self):
        assert output_path_for(Path("hello.md"), PostHeader(title="x")) == "hello.html"

    def test_with_category(self):
        assert output_path_for(Path("hello.md"), PostHeader(category="notes")) == "notes/hello.html"

    def test_only_last_extension_dropped(self):
        assert output_path_for(Path("v1.2.md"), None) == "v1.2.html"


class TestCategoryIndex:
    def test_uncategorized_sorts_first(self):
        assert sorted(["b", None, "a"], key=category_sort_key) == [None, "a", "b"]

    def test_buckets_keep_insertion_order(self):
        index = CategoryIndex()
        a = record("a", PostHeader(category="x"))
        b = record("b")
        c = record("c", PostHeader(category="x"))
        for post in (a, b, c):
            index.add(post)
        assert index.keys() == [None, "x"]
        assert index["x"] == [a, c]
        assert index[None] == [b]
        assert list(index.posts()) == [b, a, c]
        assert len(index) == 2

    def test_empty_category_is_uncategorized(self):
        index = CategoryIndex()
        index.add(record("a", PostHeader(category="")))
        assert None in index
        assert index[None][0].output_path == "a.html"


class TestLoadPosts:
    def test_empty_directory(self, tmp_path):
        index = load_posts(tmp_path)
        assert len(index) == 0
        assert index.keys() == []

    def test_groups_by_category(self, posts_dir):
        index = load_posts(posts_dir)
        assert index.keys() == [None, "code", "notes"]
        assert [p.source_file for p in index["notes"]] == ["first.md", "second.md"]
        assert [p.output_path for p in index["notes"]] == ["notes/first.html", "notes/second.html"]

    def test_uncategorized_post(self, posts_dir):
        about = load_posts(posts_dir)[None][0]
        assert about.header is None
        assert about.output_path == "about.html"
        assert about.preview_text == "No front matter."

    def test_post_contents(self, posts_dir):
        first = load_posts(posts_dir)["notes"][0]
        assert first.header == PostHeader(title="First", date="2021-05-01", category="notes")
        assert first.content.startswith("<h1>First</h1>\n")
        assert [h.text for h in first.headings] == ["First", "Details"]
        assert first.preview_text == "Opening line."

    def test_subdirectories_are_skipped(self, posts_dir):
        (posts_dir / "drafts").mkdir()
        index = load_posts(posts_dir)
        assert sum(len(posts) for _, posts in index.items()) == 4

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_posts(tmp_path / "nope")

    def test_bad_front_matter_names_file(self, tmp_path):
        (tmp_path / "broken.md").write_text('---\ntitle = "x\n---\nbody', encoding="utf-8")
        with pytest.raises(FrontMatterError, match="broken.md"):
            load_posts(tmp_path)


class TestSortLatestFirst:
    def test_newest_first_and_undated_last(self):
        old = record("old", PostHeader(date="2001-01-01"))
        new = record("new", PostHeader(date="2020-01-01"))
        undated = record("undated", PostHeader(title="u"))
        headerless = record("headerless")
        ordered = sort_latest_first([headerless, old, undated, new])
        assert ordered == [new, old, undated, headerless]

    def test_invalid_date_propagates(self):
        posts = [record("a", PostHeader(date="yesterday")), record("b", PostHeader(date="2020-01-01"))]
        with pytest.raises(DateParseError):
            sort_latest_first(posts)
