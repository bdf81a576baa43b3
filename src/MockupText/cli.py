from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import markdown_parser, renderer_docx, renderer_html
from .config import PRESETS, RenderOptions, load_options_file
from .dispatcher import dispatch_document
from .inline_parser import MARKER_SETS
from .model import Variant
from .utils import configure_logging, read_text, resolve_output_path

FORMAT_SUFFIXES = {"html": ".html", "docx": ".docx"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mockuptext",
        description="Render chat, AI-reply or Markdown text into styled HTML or DOCX.",
    )
    parser.add_argument("input", type=str, help="Path to the source text file")
    parser.add_argument("-o", "--output", type=str, help="Output file or directory")
    parser.add_argument("-f", "--format", choices=sorted(FORMAT_SUFFIXES), default="html", help="Output format")
    parser.add_argument("--preset", choices=sorted(PRESETS), help="Start from a consumer preset")
    parser.add_argument("--config", type=str, help="YAML file with render options")
    parser.add_argument("--variant", choices=[v.value for v in Variant], help="Presentation density")
    parser.add_argument("--markers", choices=sorted(MARKER_SETS), help="Inline marker set")
    parser.add_argument("--math", action="store_true", default=None, help="Extract $...$ math before inline markers")
    parser.add_argument("--code-theme", type=str, help="Code theme (vscode, github, dracula, monokai)")
    parser.add_argument("--light", action="store_true", help="Use the light code theme")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def resolve_options(args: argparse.Namespace) -> RenderOptions:
    options = PRESETS[args.preset] if args.preset else RenderOptions()
    if args.config:
        config_path = Path(args.config).expanduser()
        logging.info("Loading options from %s", config_path)
        options = load_options_file(config_path, base=options)
    return options.merged(
        variant=args.variant,
        markers=args.markers,
        math=args.math,
        code_theme=args.code_theme,
        dark=False if args.light else None,
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    output_path = resolve_output_path(input_path, args.output, FORMAT_SUFFIXES[args.format])
    options = resolve_options(args)

    logging.info("Reading %s", input_path)
    text = read_text(input_path)
    logging.debug("Source length: %d chars", len(text))

    logging.info("Parsing blocks...")
    document = markdown_parser.parse_markdown(text)
    logging.debug("Parsed %d blocks", len(document.blocks))
    root = dispatch_document(document.blocks, options)

    logging.info("Rendering %s to %s", args.format.upper(), output_path)
    if args.format == "docx":
        renderer_docx.render_document(root, output_path)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(renderer_html.render_html(root), encoding="utf-8")

    logging.info("Done. Saved to %s", output_path)


if __name__ == "__main__":
    main()
