"""Render the post catalog into the output directory."""

from __future__ import annotations

import logging
import shutil
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateRuntimeError

from yanos.posts import CategoryIndex, PostRecord, load_posts, sort_latest_first
from yanos.toc import make_toc_function

logger = logging.getLogger(__name__)

POST_TEMPLATE = "post.html"
CATEGORY_TEMPLATE = "category.html"
INDEX_TEMPLATE = "index.html"

# template variables
POSTS_META = "posts_meta"
POST_CATEGORIES = "post_categories"
POST_CONTENT = "markdown_content"
HEADER = "header"
POST = "post"
CATEGORY = "category"
CATEGORY_POSTS = "category_posts"

TOC_FUNCTION = "toc"


class TocUnavailableError(TemplateRuntimeError):
    """Raised when ``toc`` is called from a template other than the post page."""


def _toc_unavailable(*args: Any, **kwargs: Any) -> str:
    raise TocUnavailableError(
        f"'{TOC_FUNCTION}' is only available while rendering {POST_TEMPLATE}"
    )


class RenderContext:
    """Key/value state shared by every template render of one build."""

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def insert(self, key: str, value: Any) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    @contextmanager
    def scoped(self, **values: Any) -> Iterator["RenderContext"]:
        """Insert ``values`` for the duration of the block only."""
        for key, value in values.items():
            self.insert(key, value)
        try:
            yield self
        finally:
            for key in values:
                self.remove(key)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values


def init_engine(templates_dir: Path) -> Environment:
    logger.info("Loading templates from %s", templates_dir)
    engine = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    engine.globals[TOC_FUNCTION] = _toc_unavailable
    return engine


def write_output(out_dir: Path, filename: str, content: str) -> Path:
    """Write ``content`` to ``out_dir/filename``, creating subdirectories."""
    filepath = Path(out_dir) / filename
    out_file_dir = filepath.parent
    if not out_file_dir.is_dir():
        logger.info("Creating output directory %s", out_file_dir)
        out_file_dir.mkdir(parents=True, exist_ok=True)
    filepath.write_text(content, encoding="utf-8")
    return filepath


def copy_static_files(static_dir: Path, out_dir: Path) -> Optional[Path]:
    static_dir = Path(static_dir)
    if not static_dir.exists():
        logger.info("No static directory found, skipping")
        return None

    logger.info("Copying static assets")
    target = Path(out_dir) / static_dir.name
    shutil.copytree(static_dir, target, dirs_exist_ok=True)
    return target


class SiteRenderer:
    """Drive the template engine over every post, category and the index.

    The renderer owns a single :class:`RenderContext`. Per-post and
    per-category values are only present in it for the one render call that
    needs them.
    """

    def __init__(self, engine: Environment, output_dir: Path) -> None:
        self.engine = engine
        self.output_dir = Path(output_dir)
        self.context = RenderContext()

    def render(self, index: CategoryIndex) -> List[Path]:
        written: List[Path] = []

        self.context.insert(POSTS_META, sort_latest_first(index.posts()))
        self.context.insert(POST_CATEGORIES, index.keys())

        for category, posts in index.items():
            logger.info("Rendering category: %s", category)

            for post in posts:
                html = self.render_post(post)
                written.append(write_output(self.output_dir, post.output_path, html))

            self.context.remove(POST_CONTENT)
            self.context.remove(HEADER)

            if category is not None:
                html = self.render_category(category, posts)
                written.append(write_output(self.output_dir, f"{category}.html", html))

        written.append(write_output(self.output_dir, "index.html", self.render_index()))
        return written

    def render_post(self, post: PostRecord) -> str:
        template = self.engine.get_template(POST_TEMPLATE)
        values = {
            POST_CONTENT: post.content,
            HEADER: post.header,
            POST: post,
            # shadows the stand-in registered in the engine globals
            TOC_FUNCTION: make_toc_function(post.headings),
        }
        with self.context.scoped(**values):
            return template.render(self.context.as_dict())

    def render_category(self, category: str, posts: List[PostRecord]) -> str:
        template = self.engine.get_template(CATEGORY_TEMPLATE)
        values = {CATEGORY: category, CATEGORY_POSTS: sort_latest_first(posts)}
        with self.context.scoped(**values):
            return template.render(self.context.as_dict())

    def render_index(self) -> str:
        template = self.engine.get_template(INDEX_TEMPLATE)
        return template.render(self.context.as_dict())


def generate_site(
    templates_dir: Path,
    posts_dir: Path,
    output_dir: Path,
    static_dir: Optional[Path] = None,
) -> List[Path]:
    start_time = time.perf_counter()

    engine = init_engine(templates_dir)
    index = load_posts(posts_dir)
    written = SiteRenderer(engine, output_dir).render(index)

    if static_dir is not None:
        copy_static_files(static_dir, output_dir)

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info("Took %dms", elapsed_ms)
    return written
