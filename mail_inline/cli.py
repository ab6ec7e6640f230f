"""Command-line entry point for the HTML email inliner."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_ENCODING, InlineConfig
from .css import CSSInliningEngine
from .errors import InlineMailError
from .pipeline import run_pipeline

logger = logging.getLogger("mail_inline.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mail-inline",
        description=(
            "Embed local images as data URIs and inline CSS into style attributes "
            "so an HTML file survives email clients that strip external resources."
        ),
    )
    parser.add_argument("input", type=Path, help="HTML file to transform")
    parser.add_argument("output", type=Path, help="Where to write the self-contained HTML")
    parser.add_argument(
        "--no-style-urls",
        dest="inline_style_urls",
        action="store_false",
        help="Leave CSS url(...) references untouched",
    )
    parser.add_argument(
        "--svg-base64",
        dest="svg_as_text",
        action="store_false",
        help="Base64 encode SVG files instead of embedding them as UTF-8 text",
    )
    parser.add_argument(
        "--sniff-types",
        action="store_true",
        help="Detect the MIME type of unknown extensions from the file signature",
    )
    parser.add_argument(
        "--no-remote-stylesheets",
        dest="load_remote_stylesheets",
        action="store_false",
        help="Do not fetch remote stylesheets referenced by <link> tags",
    )
    parser.add_argument(
        "--keep-style-tags",
        action="store_true",
        help="Keep <style> tags in the output after inlining",
    )
    parser.add_argument(
        "--extra-css",
        type=Path,
        default=None,
        help="CSS file whose rules are inlined in addition to the document's own",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> InlineConfig:
    extra_css: Optional[str] = None
    if args.extra_css is not None:
        try:
            extra_css = args.extra_css.read_text(encoding=DEFAULT_ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            raise InlineMailError(f"Error reading extra CSS file: {exc}") from exc

    return InlineConfig(
        input_path=args.input,
        output_path=args.output,
        inline_style_urls=args.inline_style_urls,
        svg_as_text=args.svg_as_text,
        sniff_unknown_types=args.sniff_types,
        load_remote_stylesheets=args.load_remote_stylesheets,
        keep_style_tags=args.keep_style_tags,
        extra_css=extra_css,
    )


def main(
    argv: Sequence[str] | None = None,
    engine: Optional[CSSInliningEngine] = None,
) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        force=True,
    )

    try:
        config = build_config(args)
        result = asyncio.run(run_pipeline(config, engine))
    except InlineMailError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    logger.info("Saved inlined HTML to %s", result.output_path)
    if result.stats.missing:
        logger.info("%d local reference(s) could not be inlined", result.stats.missing)
    logger.debug("Finished in %.2fs", result.total_seconds)


if __name__ == "__main__":
    main()
