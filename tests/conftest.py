from __future__ import annotations

from pathlib import Path

import pytest

POST_TEMPLATE = (
    "<title>{% if header and header.title %}{{ header.title }}{% else %}{{ post.source_file }}{% endif %}</title>\n"
    "<nav>{{ toc('<ul>', '</ul>', '<li>', '</li>') }}</nav>\n"
    "{{ markdown_content }}"
)
CATEGORY_TEMPLATE = (
    "<h1>{{ category }}</h1>\n"
    "{% for post in category_posts %}<a href=\"{{ post.output_path }}\">{{ post.preview_text }}</a>\n{% endfor %}"
)
INDEX_TEMPLATE = (
    "{% for post in posts_meta %}{{ post.output_path }}\n{% endfor %}"
    "categories:{% for name in post_categories %} {{ name }}{% endfor %}\n"
)


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "templates"
    directory.mkdir()
    (directory / "post.html").write_text(POST_TEMPLATE, encoding="utf-8")
    (directory / "category.html").write_text(CATEGORY_TEMPLATE, encoding="utf-8")
    (directory / "index.html").write_text(INDEX_TEMPLATE, encoding="utf-8")
    return directory


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "posts"
    directory.mkdir()
    (directory / "first.md").write_text(
        '---\ntitle = "First"\ndate = "2021-05-01"\ncategory = "notes"\n---\n'
        "# First\n\nOpening line.\n\n## Details\n\nMore.\n",
        encoding="utf-8",
    )
    (directory / "second.md").write_text(
        '---\ntitle = "Second"\ndate = "2022-01-01"\ncategory = "notes"\n---\n'
        "# Second\n\nNewer post.\n",
        encoding="utf-8",
    )
    (directory / "rust.md").write_text(
        '---\ntitle = "Rust"\ndate = "2020-03-03"\ncategory = "code"\n---\nCode post.\n',
        encoding="utf-8",
    )
    (directory / "about.md").write_text("# About\n\nNo front matter.\n", encoding="utf-8")
    return directory
