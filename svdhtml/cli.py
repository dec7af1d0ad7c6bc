"""Command line entry point: ``svdhtml INPUT -o OUTDIR``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from svdhtml.core.assembler import assemble
from svdhtml.core.exceptions import SvdHtmlError
from svdhtml.core.parser import load_svd
from svdhtml.output.writer import write_documents
from svdhtml.render import create_renderer, list_available_renderers
from svdhtml.utils.config_loader import load_config
from svdhtml.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="svdhtml",
        description="Render a CMSIS-SVD register map as static HTML pages.",
    )
    parser.add_argument("input", type=Path, help="CMSIS-SVD XML file")
    parser.add_argument(
        "-o", "--output", type=Path, required=True, help="Output directory"
    )
    parser.add_argument("--config", type=Path, help="Render settings YAML")
    parser.add_argument(
        "--renderer",
        choices=list_available_renderers(),
        help="Output layout (default: from config, 'pages')",
    )
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    parser.add_argument("--quiet", action="store_true", help="Reduce console output")
    return parser.parse_args(argv)


def run(
    input_path: Path,
    out_dir: Path,
    config_path: Optional[Path] = None,
    renderer_name: Optional[str] = None,
) -> list[Path]:
    """Parse, lay out, render and write; nothing is written unless all succeed."""
    config = load_config(config_path)
    renderer = create_renderer(renderer_name or config.renderer)

    chip = load_svd(input_path)
    site = assemble(chip, config)
    documents = renderer.render(site)
    return write_documents(documents, out_dir)


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    setup_logging(level=args.log_level, quiet=args.quiet)

    logger.info("svdhtml: %s -> %s", args.input, args.output)
    try:
        run(args.input, args.output, args.config, args.renderer)
    except SvdHtmlError as exc:
        logger.debug("details: %s", exc.details)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
