"""Build nested table of contents markup from a flat heading list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from jinja2 import TemplateRuntimeError

TOC_FRAGMENTS = ("open_list", "close_list", "open_item", "close_item")


@dataclass(frozen=True)
class TocHeading:
    level: int
    # level of the heading recorded just before this one, not its parent
    prev_level: Optional[int]
    text: str


@dataclass(frozen=True)
class TocConfig:
    open_list: str
    close_list: str
    open_item: str
    close_item: str
    skip_first: bool = False


def build_toc(headings: Sequence[TocHeading], config: TocConfig) -> str:
    """Render ``headings`` as nested lists using the fragments in ``config``.

    Each heading opens at most one list when it is deeper than the previous
    heading and closes at most one when it is shallower, so a jump from h1 to h3
    nests a single level. Lists still open after the last heading are closed.
    """
    parts: List[str] = []
    open_count = 0

    entries = headings[1:] if config.skip_first else headings
    for heading in entries:
        if heading.level > (heading.prev_level or 0):
            parts.append(config.open_list)
            open_count += 1
        if heading.prev_level is not None and heading.level < heading.prev_level:
            parts.append(config.close_list)
            open_count -= 1
        parts.append(config.open_item)
        parts.append(heading.text)
        parts.append(config.close_item)

    parts.extend(config.close_list for _ in range(open_count))
    return "".join(parts)


def _parse_toc_call(args: Sequence[Any], kwargs: Dict[str, Any]) -> TocConfig:
    names = TOC_FRAGMENTS + ("skip_first",)
    if len(args) > len(names):
        raise TemplateRuntimeError(
            f"toc() takes at most {len(names)} arguments ({len(args)} given)"
        )

    values = dict(zip(names, args))
    for name, value in kwargs.items():
        if name not in names:
            raise TemplateRuntimeError(f"toc() got an unexpected argument '{name}'")
        if name in values:
            raise TemplateRuntimeError(f"toc() got multiple values for argument '{name}'")
        values[name] = value

    missing = [name for name in TOC_FRAGMENTS if name not in values]
    if missing:
        raise TemplateRuntimeError(
            "toc() missing required argument(s): " + ", ".join(missing)
        )
    for name in TOC_FRAGMENTS:
        if not isinstance(values[name], str):
            raise TemplateRuntimeError(f"toc() argument '{name}' must be a string")

    return TocConfig(
        open_list=values["open_list"],
        close_list=values["close_list"],
        open_item=values["open_item"],
        close_item=values["close_item"],
        skip_first=bool(values.get("skip_first", False)),
    )


def make_toc_function(headings: Sequence[TocHeading]) -> Callable[..., str]:
    """Bind ``headings`` into the ``toc`` callable exposed to the post template.

    The callable takes the four list/item fragments and an optional
    ``skip_first`` flag. A malformed call raises
    :class:`jinja2.TemplateRuntimeError` like any other template failure.
    """

    def toc(*args: Any, **kwargs: Any) -> str:
        return build_toc(headings, _parse_toc_call(args, kwargs))

    return toc
