#!/usr/bin/env python3
"""Render the Cornell box scene.

This script demonstrates end-to-end rendering of the classic Cornell box scene
with the rtx path tracer. It creates the scene, renders it in progressive
passes and saves the result as PNG.

Usage:
    python examples/render_cornell_box.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 128)
    --height HEIGHT     Image height in pixels (default: 128)
    --rays RAYS         Rays per pixel per pass (default: 16)
    --passes PASSES     Number of progressive passes (default: 4)
    --bounces BOUNCES   Maximum bounces per ray (default: 10)
    --seed SEED         Master seed for a reproducible render
    --workers WORKERS   Number of render threads (default: all numba threads)
    --output OUTPUT     Output file path (default: cornell_box.png)
    --scene-json PATH   Also write the scene description to PATH
    --preview           Show the result in a Matplotlib window
    --verbose           Log per-row progress

Example:
    python examples/render_cornell_box.py --width 64 --height 64 --passes 2 --seed 7
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from loguru import logger

from rtx.core.progressive import ProgressiveRenderer
from rtx.log import configure_logging
from rtx.preview import save_png, show_preview
from rtx.scene import Config, create_cornell_box_scene, save_scene
from rtx.scene.cornell_box import BOX_SIZE, CAMERA_DISTANCE


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Cornell box scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=128,
        help="Image width in pixels (default: 128)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=128,
        help="Image height in pixels (default: 128)",
    )
    parser.add_argument(
        "--rays",
        type=int,
        default=16,
        help="Rays per pixel per pass (default: 16)",
    )
    parser.add_argument(
        "--passes",
        type=int,
        default=4,
        help="Number of progressive passes (default: 4)",
    )
    parser.add_argument(
        "--bounces",
        type=int,
        default=10,
        help="Maximum bounces per ray (default: 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Master seed for a reproducible render",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Render threads (default: all numba threads)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="cornell_box.png",
        help="Output file path (default: cornell_box.png)",
    )
    parser.add_argument(
        "--scene-json",
        type=str,
        default=None,
        help="Also write the scene description to this JSON file",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-row progress",
    )
    return parser.parse_args()


def render_cornell_box(args: argparse.Namespace) -> Path:
    """Render the Cornell box scene and save to file.

    Returns:
        Path to the saved image file.
    """
    config = Config(
        rays_per_pixel=args.rays,
        max_bounces=args.bounces,
        focal_length=CAMERA_DISTANCE + BOX_SIZE / 2.0,
        seed=args.seed,
        max_workers=args.workers,
    )
    scene = create_cornell_box_scene(config=config)
    if args.scene_json:
        save_scene(scene, args.scene_json)

    renderer = ProgressiveRenderer(scene, args.width, args.height)
    start_time = time.perf_counter()

    def progress_callback(current: int, target: int) -> None:
        elapsed = time.perf_counter() - start_time
        logger.info(
            "Pass {}/{} done, {} samples per pixel, {:.1f}s elapsed",
            current,
            target,
            renderer.sample_count,
            elapsed,
        )

    renderer.render(args.passes, callback=progress_callback)

    output_file = Path(args.output)
    save_png(renderer.image, output_file, tone_map="reinhard", gamma=2.2)

    if args.preview:
        show_preview(
            renderer.image,
            tone_map="reinhard",
            gamma=2.2,
            sample_count=renderer.sample_count,
        )

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    configure_logging("DEBUG" if args.verbose else "INFO")

    try:
        render_cornell_box(args)
    except ValueError as e:
        logger.error("Invalid render settings: {}", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
