"""
Command line renderer: python -m raytrace scene.json

Renders a frame sequence from a scene document and writes one PNG per
frame. Assembling the PNGs into a video is left to an external tool.
"""
import argparse
import dataclasses
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .errors import RaytraceError
from .image_io import frame_filename, save_frame
from .logging_config import setup_logging
from .render import render_ldr_sequence
from .scene_file import load_job

logger = logging.getLogger("raytrace.cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="raytrace", description=__doc__.strip().splitlines()[0])
    parser.add_argument("scene", help="scene JSON document")
    parser.add_argument("--frames", type=int, default=1, help="number of frames to render")
    parser.add_argument("--start", type=int, default=0, help="index of the first frame")
    parser.add_argument("--output-dir", default=None,
                        help="directory for PNG frames (default: renders/<timestamp>)")
    parser.add_argument("--pattern", default="frame_{:04d}.png", help="frame filename pattern")
    parser.add_argument("--workers", type=int, default=None, help="override worker processes")
    parser.add_argument("--seed", type=int, default=None, help="override the random seed")
    parser.add_argument("--preview", default=None, metavar="FILE.html",
                        help="write an interactive plotly preview instead of rendering")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-file", default=None, help="also log to this file")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("raytrace", args.log_level, Path(args.log_file) if args.log_file else None)

    try:
        scene, camera, config = load_job(args.scene)
        logger.info("Loaded %s: %d primitives, %d lights, %d materials", args.scene,
                    len(scene), len(scene.lights), len(scene.materials))
        overrides = {}
        if args.workers is not None:
            overrides["workers"] = args.workers
        if args.seed is not None:
            overrides["seed"] = args.seed
        if overrides:
            config = dataclasses.replace(config, **overrides)
        if args.frames < 1:
            raise RaytraceError(f"--frames must be >= 1, got {args.frames}")
    except (OSError, RaytraceError) as exc:
        logger.error("Cannot start render: %s", exc)
        return 2

    if args.preview:
        from .preview import create_scene_preview

        create_scene_preview(scene, camera).write_html(args.preview)
        logger.info("Saved scene preview %s", args.preview)
        return 0

    output_dir = args.output_dir
    if output_dir is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_dir = os.path.join("renders", f"render_{timestamp}_d{config.max_depth}_"
                                  f"{config.width}x{config.height}")

    logger.info("Rendering %d frame(s) of %s into %s", args.frames, scene, output_dir)
    indices = range(args.start, args.start + args.frames)
    for index, ldr in render_ldr_sequence(scene, camera, config, indices):
        save_frame(ldr, os.path.join(output_dir, frame_filename(args.pattern, index)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
