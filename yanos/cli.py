"""Generate the site from Markdown posts and Jinja templates."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import TemplateError

from yanos.server import DEFAULT_HOST, DEFAULT_PORT, serve
from yanos.site import generate_site
from yanos.watch import DEFAULT_DEBOUNCE, Change, watch_directories

logger = logging.getLogger(__name__)

POSTS_DIR = Path("posts")
TEMPLATES_DIR = Path("templates")
STATIC_DIR = Path("static")
OUTPUT_DIR = Path("out")

BUILD_ERRORS = (OSError, ValueError, TemplateError)


@dataclass
class SiteConfig:
    posts_dir: Path = POSTS_DIR
    templates_dir: Path = TEMPLATES_DIR
    static_dir: Path = STATIC_DIR
    output_dir: Path = OUTPUT_DIR
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debounce: float = DEFAULT_DEBOUNCE

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "SiteConfig":
        return cls(
            posts_dir=Path(args.posts_dir),
            templates_dir=Path(args.templates_dir),
            static_dir=Path(args.static_dir),
            output_dir=Path(args.output_dir),
            host=args.host,
            port=args.port,
            debounce=args.debounce,
        )

    @property
    def watched_dirs(self) -> List[Path]:
        return [self.templates_dir, self.posts_dir, self.static_dir]


def build(config: SiteConfig) -> List[Path]:
    return generate_site(
        config.templates_dir,
        config.posts_dir,
        config.output_dir,
        static_dir=config.static_dir,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="yanos", description=__doc__)
    parser.add_argument("--posts-dir", default=str(POSTS_DIR), help="Directory containing markdown posts")
    parser.add_argument("--templates-dir", default=str(TEMPLATES_DIR), help="Directory containing post.html, category.html and index.html")
    parser.add_argument("--static-dir", default=str(STATIC_DIR), help="Directory copied into the output as-is")
    parser.add_argument("--output-dir", default=str(OUTPUT_DIR), help="Directory for the generated site")
    parser.add_argument("--serve", action="store_true", help="Serve the output directory after building")
    parser.add_argument("--watch", action="store_true", help="Rebuild when posts, templates or static files change")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Address for --serve")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port for --serve")
    parser.add_argument("--debounce", type=float, default=DEFAULT_DEBOUNCE, help="Seconds to wait for changes to settle in --watch")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")


def rebuild(config: SiteConfig, changes: List[Change]) -> None:
    logger.info("%d change(s) detected, rebuilding", len(changes))
    try:
        build(config)
    except BUILD_ERRORS as exc:
        logger.error("Rebuild failed: %s", exc)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    config = SiteConfig.from_args(args)

    try:
        written = build(config)
    except BUILD_ERRORS as exc:
        logger.error("Build failed: %s", exc)
        return 1
    logger.info("Wrote %d file(s) to %s", len(written), config.output_dir)

    if args.serve and args.watch:
        server = threading.Thread(
            target=serve,
            args=(config.output_dir, config.host, config.port),
            daemon=True,
        )
        server.start()

    if args.watch:
        try:
            watch_directories(
                config.watched_dirs,
                lambda changes: rebuild(config, changes),
                debounce=config.debounce,
            )
        except KeyboardInterrupt:
            pass
    elif args.serve:
        serve(config.output_dir, config.host, config.port)

    return 0


if __name__ == "__main__":
    sys.exit(main())
