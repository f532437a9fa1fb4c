"""Split an optional TOML front matter block from a Markdown post."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

FRONT_MATTER_DELIMITER = "---\n"
HEADER_FIELDS = ("title", "date", "category")


class FrontMatterError(ValueError):
    """Raised when a front matter block cannot be decoded."""


@dataclass(frozen=True)
class PostHeader:
    title: Optional[str] = None
    date: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PostHeader":
        values = {}
        for key in HEADER_FIELDS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise FrontMatterError(
                    f"Front matter field '{key}' must be a string, got {type(value).__name__}"
                )
            values[key] = value
        return cls(**values)


def split_front_matter(raw: str) -> Tuple[Optional[PostHeader], str]:
    """Return the decoded header (if any) and the remaining Markdown body.

    A post only carries front matter when it starts with a ``---`` line and the
    block is closed by a second one. Without a closing delimiter the text after
    the opening line is returned as the body.
    """
    if not raw.startswith(FRONT_MATTER_DELIMITER):
        return None, raw

    parts = raw.split(FRONT_MATTER_DELIMITER, 2)
    block = parts[1]
    body = parts[2] if len(parts) > 2 else block

    if block == body:
        return None, body

    try:
        data = tomllib.loads(block)
    except tomllib.TOMLDecodeError as exc:
        raise FrontMatterError(f"Invalid front matter: {exc}") from exc

    return PostHeader.from_mapping(data), body
