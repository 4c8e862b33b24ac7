"""Command-line interface for the transformation pipeline."""

import argparse
import logging
import sys
from pathlib import Path

from .config import Config
from .errors import MalformedMarkupError
from .pipeline import HorasPipeline

COMMANDS = ("transform", "dump-config")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Normalize bilingual office documents for e-book embedding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Using a config file
  horae --config config.yaml

  # Direct arguments
  horae --input data/raw --output data/normalized --lang2 English

  # One row per source line, ASCII only
  horae --input data/raw --nosplit --ascii

  # Show the default configuration
  horae dump-config
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    transform_parser = subparsers.add_parser("transform", help="Transform a directory of documents")
    setup_transform_parser(transform_parser)

    dump_parser = subparsers.add_parser("dump-config", help="Print the default configuration")
    dump_parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    # If no command specified, treat as transform command
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS + ("-h", "--help"):
        argv.insert(0, "transform")

    return parser.parse_args(argv)


def setup_transform_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for transform command."""
    parser.add_argument("--config", type=Path, help="Path to YAML configuration file")

    # Input/Output
    parser.add_argument("--input", type=Path, help="Directory with <date>.html documents")
    parser.add_argument("--output", type=Path, help="Output directory for normalized documents")

    # Transformation options
    parser.add_argument("--lang1", type=str, help="Language of the left column (default: Latin)")
    parser.add_argument("--lang2", type=str, help="Language of the right column (default: English)")
    parser.add_argument(
        "--reference-language",
        type=str,
        help="Language name or code whose sentences drive the alignment",
    )
    parser.add_argument("--dialog", type=Path, help="horas.dialog file listing the known languages")
    parser.add_argument("--nosplit", action="store_true", help="Do not split sentences into separate rows")
    parser.add_argument("--nocomments", action="store_true", help="Omit comments")
    parser.add_argument("--noomitted", action="store_true", help="Omit rows marked as omitted")
    parser.add_argument("--ascii", action="store_true", help="Convert accented characters to ASCII")
    parser.add_argument("--antepost", action="store_true", help="Include $Ante and $Post in expands")
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of parallel workers (default: 1)",
    )

    # Output options
    parser.add_argument("--no-row-tables", action="store_true", help="Skip saving aligned row CSV files")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite existing output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")


def build_config(args: argparse.Namespace) -> Config:
    """Build configuration from arguments."""
    # Start with config file if provided
    if getattr(args, "config", None):
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    if getattr(args, "input", None):
        config.input_dir = args.input
    if getattr(args, "output", None):
        config.output.output_dir = args.output
    if getattr(args, "workers", None) is not None:
        config.workers = args.workers
    if getattr(args, "dialog", None):
        config.languages.dialog_path = args.dialog

    transform = config.transform.model_dump()
    if getattr(args, "lang1", None):
        transform["lang1"] = args.lang1
    if getattr(args, "lang2", None):
        transform["lang2"] = args.lang2
    if getattr(args, "reference_language", None):
        transform["reference_language"] = args.reference_language
    for flag, field in (
        ("nosplit", "no_split"),
        ("nocomments", "no_comments"),
        ("noomitted", "no_omitted"),
        ("ascii", "ascii"),
        ("antepost", "antepost"),
    ):
        if getattr(args, flag, False):
            transform[field] = True
    # Re-validate so the field validators see command-line values too
    config.transform = type(config.transform)(**transform)

    if getattr(args, "no_row_tables", False):
        config.output.save_row_tables = False
    if getattr(args, "overwrite", False):
        config.output.overwrite = True

    return Config(**config.model_dump())


def handle_transform(args: argparse.Namespace) -> int:
    """Handle transform command."""
    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.input_dir:
        print("Error: Input directory is required (use --input or --config)", file=sys.stderr)
        return 1

    try:
        pipeline = HorasPipeline(config)
        count = pipeline.run()
        print(f"\nProcessed {count} documents")
        return 0
    except (FileNotFoundError, FileExistsError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MalformedMarkupError as e:
        logging.error(f"Malformed markup: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Transformation failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


def handle_dump_config() -> int:
    """Print the default configuration as YAML."""
    print(Config().dump_yaml(), end="")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(getattr(args, "verbose", False))

    if args.command == "dump-config":
        return handle_dump_config()
    return handle_transform(args)


if __name__ == "__main__":
    sys.exit(main())
