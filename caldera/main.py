"""Caldera - Wave Function Collapse voxel map generator."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from caldera.core.config import GeneratorConfig, MapSize
from caldera.logging_config import setup_logging


def generate(args: argparse.Namespace) -> int:
    """Generate a map and write the placement list.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    from pydantic import ValidationError

    from caldera.export import write_mv_import
    from caldera.generation import MapConfig, create_state_table, generate_map
    from caldera.generation.wfc import GenerationError

    size = MapSize(args.size)
    preset = MapConfig(args.preset)

    try:
        config = GeneratorConfig.for_size(
            size,
            max_distance=args.max_distance,
            tile_size=args.tile_size,
            contradiction_policy="strict" if args.strict else "deferred",
        )
    except ValidationError as e:
        print(f"Error: invalid settings\n{e}", file=sys.stderr)
        return 2

    if args.retries < 1:
        print(f"Error: invalid settings\n--retries must be at least 1, got {args.retries}", file=sys.stderr)
        return 2

    states = create_state_table(preset)
    total = config.dimensions.cell_count

    print(f"Generating {config.dimensions} map ({total} cells) with preset '{preset.value}'...")

    progress_callback = None
    pbar = None
    if not args.no_progress:
        from tqdm import tqdm
        pbar = tqdm(total=total, desc="  Collapsing", unit="cells")
        last_progress = [0]

        def update_progress(current: int, total_cells: int) -> None:
            delta = current - last_progress[0]
            if delta > 0:
                pbar.update(delta)
                last_progress[0] = current

        progress_callback = update_progress

    try:
        generated = generate_map(
            config,
            states,
            seed=args.seed,
            max_retries=args.retries,
            progress_callback=progress_callback,
        )
    except GenerationError as e:
        print(f"\nError: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    finally:
        if pbar is not None:
            pbar.close()

    try:
        output = write_mv_import(
            generated.assignment.items(),
            generated.dimensions,
            args.output,
            tile_size=config.tile_size,
            vox_dir=args.vox_dir,
        )
    except OSError as e:
        print(f"\nError: could not write {args.output}: {e}", file=sys.stderr)
        return 1

    print(f"  Attempts: {generated.attempts} (seed={generated.seed})")
    for name, count in generated.counts().items():
        print(f"    {name}: {count}")
    print(f"  Wrote {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser. Defaults can come from CALDERA_* env vars."""
    parser = argparse.ArgumentParser(
        description="Caldera - Wave Function Collapse voxel map generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  caldera                         # Small map, random seed
  caldera --size medium --seed 7  # Reproducible 20x20x20 map
  caldera --preset test-edge      # Run a test preset
        """,
    )
    parser.add_argument(
        "--size",
        choices=[size.value for size in MapSize],
        default=os.environ.get("CALDERA_SIZE", MapSize.SMALL.value),
        help="Map size preset (default: small)",
    )
    parser.add_argument(
        "--preset",
        choices=[
            "simple",
            "mound",
            "test-edge",
            "test-100-ground",
            "test-contradiction",
            "test-initial-weights-error",
        ],
        default=os.environ.get("CALDERA_PRESET", "simple"),
        help="State table preset (default: simple)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=os.environ.get("CALDERA_SEED"),
        help="Random seed (default: random)",
    )
    parser.add_argument(
        "--max-distance",
        type=int,
        default=2,
        help="Hops each collapse broadcasts (default: 2)",
    )
    parser.add_argument(
        "--tile-size",
        type=int,
        default=3,
        help="Voxels per cell side in the export (default: 3)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=10,
        help="Attempts before giving up on contradictions (default: 10)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail as soon as propagation empties a cell",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(os.environ.get("CALDERA_OUTPUT", "mv_import.txt")),
        help="Placement list file (default: mv_import.txt)",
    )
    parser.add_argument(
        "--vox-dir",
        type=Path,
        default=Path("states"),
        help="Directory holding <state>.vox models (default: states/)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path(os.environ.get("CALDERA_LOG_DIR", "logs")),
        help="Log directory (default: logs/)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Caldera."""
    # Load environment variables first
    load_dotenv()

    args = build_parser().parse_args(argv)

    # Setup logging
    console_level = logging.DEBUG if args.debug else logging.WARNING
    log_path = setup_logging(args.log_dir, console_level=console_level)

    from caldera import __version__
    print(f"Caldera v{__version__}")
    print(f"Log file: {log_path}")
    print()

    return generate(args)


if __name__ == "__main__":
    sys.exit(main())
