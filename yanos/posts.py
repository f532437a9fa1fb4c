"""Read a directory of Markdown posts and group them by category."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from yanos.front_matter import FrontMatterError, PostHeader, split_front_matter
from yanos.ordering import compare_header_date, compare_optional
from yanos.render_markdown import convert_markdown
from yanos.toc import TocHeading

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostRecord:
    source_file: str
    output_path: str
    header: Optional[PostHeader]
    content: str
    headings: List[TocHeading] = field(default_factory=list)
    preview_text: str = ""

    @property
    def category(self) -> Optional[str]:
        if self.header is None:
            return None
        return self.header.category or None


def category_sort_key(category: Optional[str]) -> Tuple[bool, str]:
    # uncategorized first, then named categories alphabetically
    return (category is not None, category or "")


class CategoryIndex:
    """Posts bucketed by optional category name, iterated in key order."""

    def __init__(self) -> None:
        self._buckets: Dict[Optional[str], List[PostRecord]] = {}

    def add(self, post: PostRecord) -> None:
        self._buckets.setdefault(post.category, []).append(post)

    def keys(self) -> List[Optional[str]]:
        return sorted(self._buckets, key=category_sort_key)

    def items(self) -> Iterator[Tuple[Optional[str], List[PostRecord]]]:
        for key in self.keys():
            yield key, self._buckets[key]

    def posts(self) -> Iterator[PostRecord]:
        for _, posts in self.items():
            yield from posts

    def __getitem__(self, category: Optional[str]) -> List[PostRecord]:
        return self._buckets[category]

    def __contains__(self, category: object) -> bool:
        return category in self._buckets

    def __iter__(self) -> Iterator[Optional[str]]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._buckets)


def output_path_for(source: Path, header: Optional[PostHeader]) -> str:
    out_name = f"{source.stem}.html"
    if header is not None and header.category:
        return str(PurePosixPath(header.category, out_name))
    return out_name


def load_post(path: Path) -> PostRecord:
    source = path.read_text(encoding="utf-8")
    try:
        header, markdown = split_front_matter(source)
    except FrontMatterError as exc:
        raise FrontMatterError(f"{path}: {exc}") from exc

    output_path = output_path_for(path, header)
    logger.debug("Setting output path for %s to %s", path.name, output_path)
    if header is not None and header.category:
        logger.info("Post %s has category %s", path, header.category)

    converted = convert_markdown(markdown)
    return PostRecord(
        source_file=path.name,
        output_path=output_path,
        header=header,
        content=converted.content,
        headings=converted.headings,
        preview_text=converted.preview_text,
    )


def load_posts(posts_dir: Path) -> CategoryIndex:
    """Convert every file in ``posts_dir`` and bucket the results by category."""
    posts_dir = Path(posts_dir)
    logger.info("Using markdown files in %s", posts_dir)

    index = CategoryIndex()
    for path in sorted(posts_dir.iterdir()):
        if not path.is_file():
            continue
        index.add(load_post(path))
    return index


def _compare_latest_first(a: PostRecord, b: PostRecord) -> int:
    return compare_optional(b.header, a.header, compare_header_date)


def sort_latest_first(posts: Iterable[PostRecord]) -> List[PostRecord]:
    """Newest posts first; posts without a header or date go last."""
    return sorted(posts, key=cmp_to_key(_compare_latest_first))
