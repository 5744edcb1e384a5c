#!/usr/bin/env python3
"""Render the demo scene.

This script renders the classic Whitted demo scene (checkerboard floor, two
shiny spheres, four coloured lights) and writes it to an image file.

Usage:
    python -m examples.render_demo [options]

Options:
    --width WIDTH           Image width in pixels (default: 512)
    --height HEIGHT         Image height in pixels (default: 512)
    --max-depth DEPTH       Reflection depth bound (default: 5)
    --band-size ROWS        Rows per progress update (default: 16)
    --output OUTPUT         Output file path (default: whitted.png)
    --log-level LEVEL       Logging level (default: INFO)
    --quiet                 Suppress progress output

Example:
    python -m examples.render_demo --width 256 --height 256 --output demo.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("whitted.examples.render_demo")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Whitted demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=5,
        help="Reflection depth bound (default: 5)",
    )
    parser.add_argument(
        "--band-size",
        type=int,
        default=16,
        help="Rows per progress update (default: 16)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="whitted.png",
        help="Output file path (default: whitted.png)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_demo(
    width: int = 512,
    height: int = 512,
    max_depth: int = 5,
    output_path: str = "whitted.png",
    band_size: int = 16,
    quiet: bool = False,
) -> Path:
    """Render the demo scene and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Reflection depth bound.
        output_path: Output file path.
        band_size: Rows rendered between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.core.renderer import RenderConfig, Renderer
    from whitted.scene.demo import create_demo_scene

    config = RenderConfig(width=width, height=height, max_depth=max_depth, band_size=band_size)

    logger.info("Creating demo scene (%dx%d)", width, height)
    scene = create_demo_scene()
    scene.upload()

    renderer = Renderer.from_config(config)
    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    renderer.save_image(str(output_file))

    logger.info("Saved to %s in %.2fs", output_file.absolute(), time.time() - start_time)
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    from whitted.logging_config import setup_logging

    setup_logging(level="WARNING" if args.quiet else args.log_level)

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        logger.info("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        logger.info("Using CPU backend")

    from whitted.preview.export import ImageWriteError

    try:
        render_demo(
            width=args.width,
            height=args.height,
            max_depth=args.max_depth,
            output_path=args.output,
            band_size=args.band_size,
            quiet=args.quiet,
        )
        return 0
    except ImageWriteError as e:
        logger.error("Could not write image: %s", e)
        return 1
    except (ValueError, RuntimeError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
