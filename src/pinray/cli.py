"""Command-line entry point: build a scene, render it, save the image.

Usage:
    pinray [output] [options]
    python -m pinray [output] [options]

Options:
    output                  Output file path (default: output.ppm)
    --scene FILE            JSON scene description (default: built-in scene)
    --arch {cpu,gpu}        Taichi backend (default: cpu)
    --rows-per-batch N      Rows rendered between progress updates (default: 20)
    --quiet                 Suppress timing and progress output
    --log-level LEVEL       Logging level (default: WARNING)
    --log-file FILE         Also write log records to FILE

Example:
    pinray sphere.ppm
    pinray scene.png --scene my_scene.json --arch gpu
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

from pinray import __version__
from pinray.logging_config import setup_logging
from pinray.preview.progress import ProgressBar

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "output.ppm"
DEFAULT_ROWS_PER_BATCH = 20
PROGRESS_STEPS = 40


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pinray",
        description="Render a scene of matte spheres and point lights with hard shadows.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=DEFAULT_OUTPUT,
        help=f"Output file path; .ppm writes binary PPM, other suffixes use Pillow "
        f"(default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--scene",
        type=Path,
        default=None,
        help="JSON scene description (default: built-in single-sphere scene)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend; gpu falls back to cpu when unavailable (default: cpu)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=DEFAULT_ROWS_PER_BATCH,
        help=f"Rows rendered between progress updates (default: {DEFAULT_ROWS_PER_BATCH})",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress timing and progress output",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def init_taichi(arch: str) -> str:
    """Initialize Taichi on the requested backend.

    Returns:
        The name of the backend actually used.
    """
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu)
            return "gpu"
        except Exception as err:
            logger.warning("GPU backend unavailable (%s), falling back to CPU", err)
    ti.init(arch=ti.cpu)
    return "cpu"


def run(
    output: str | Path,
    scene_path: Path | None = None,
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    quiet: bool = False,
) -> Path:
    """Build the scene, render it and save the image.

    Taichi must already be initialized.

    Args:
        output: Output file path.
        scene_path: Optional JSON scene file; None uses the built-in scene.
        rows_per_batch: Rows rendered between progress updates.
        quiet: If True, print nothing.

    Returns:
        Path to the saved image.
    """
    # Lazy imports so Taichi fields are created after ti.init()
    from pinray.core.renderer import Renderer
    from pinray.scene.default_scene import create_default_scene
    from pinray.scene.manager import load_scene

    start = time.perf_counter()
    if scene_path is None:
        scene = create_default_scene()
    else:
        scene = load_scene(scene_path)
    renderer = Renderer(scene)
    build_time = time.perf_counter() - start

    if not quiet:
        print()
        print(f"Build time: {build_time:.3f}")

    bar = ProgressBar(PROGRESS_STEPS)

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            bar.set_completed(done * 100 // total)
            bar.print()

    start = time.perf_counter()
    renderer.render(rows_per_batch=rows_per_batch, callback=progress_callback)
    render_time = time.perf_counter() - start

    if not quiet:
        print()
        print(f"Render time: {render_time:.3f}")

    path = renderer.save_image(output)
    logger.info("Saved %dx%d image to %s", renderer.width, renderer.height, path)

    if not quiet:
        print(f"Save into: {path}")

    return path


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    backend = init_taichi(args.arch)
    logger.info("Using %s backend", backend)

    try:
        run(
            args.output,
            scene_path=args.scene,
            rows_per_batch=args.rows_per_batch,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Render failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
