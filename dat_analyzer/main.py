# main.py
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import DecodeError
from .export import to_dict
from .options import DEFAULT_DEFERRED, DecodeOptions
from .parser import SectionName, WorldFileParser
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def collect_dat_files(paths: Iterable[Path]) -> List[Path]:
    """Expand directories to the .dat files they contain."""
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(path.glob('*.dat')))
        else:
            files.append(path)
    return files


def process_dat_files(files: Iterable[Path],
                      output_dir: Path,
                      options: DecodeOptions) -> int:
    """Decode each file and write ``<stem>_analysis.json``.

    Returns:
        Number of files that failed
    """
    parser = WorldFileParser(options)
    output_dir.mkdir(parents=True, exist_ok=True)
    failures = 0

    for dat_file in files:
        try:
            logger.info(f"Processing {dat_file}")
            document = parser.parse_file(dat_file)

            result = {
                'file_path': str(dat_file),
                'document': to_dict(document),
                'warnings': list(document.warnings)
            }
            output_path = output_dir / f"{dat_file.stem}_analysis.json"
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(result, f, indent=2)
            logger.info(f"Results written to {output_path}")

        except DecodeError as e:
            failures += 1
            logger.error(f"Failed to decode {dat_file}: {e}")
        except OSError as e:
            failures += 1
            logger.error(f"Failed to process {dat_file}: {e}")

    return failures


def options_from_args(args: argparse.Namespace) -> DecodeOptions:
    """Decoder options for the parsed command line."""
    deferred = (DEFAULT_DEFERRED | frozenset(args.defer)) - frozenset(args.decode)
    return DecodeOptions(
        strict=args.strict,
        vertex_tangents=not args.no_tangents,
        deferred_sections=deferred,
        world_tree=args.world_tree
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Decode LithTech world (.dat) files and generate analysis files'
    )
    parser.add_argument('paths',
                        nargs='+',
                        help='World files, or directories containing them')
    parser.add_argument('--output',
                        default='output',
                        help='Output directory for JSON analysis files')
    parser.add_argument('--strict',
                        action='store_true',
                        help='Fail on declared size mismatches instead of warning')
    parser.add_argument('--no-tangents',
                        action='store_true',
                        help='Render vertices have no tangent/binormal (older worlds)')
    sections = [name.value for name in SectionName]
    parser.add_argument('--defer',
                        action='append',
                        default=[],
                        choices=sections,
                        help='Locate a section without decoding it (repeatable)')
    parser.add_argument('--decode',
                        action='append',
                        default=[],
                        choices=sections,
                        help='Decode a section deferred by default (lightgrid, render_data)')
    parser.add_argument('--world-tree',
                        action='store_true',
                        help='Read the world info and BSP world tree after the header')
    parser.add_argument('--log-dir',
                        default='logs',
                        help='Log directory')
    parser.add_argument('--no-log-file',
                        action='store_true',
                        help='Log to the console only')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Enable verbose logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(None if args.no_log_file else args.log_dir, log_level)

    options = options_from_args(args)

    files = collect_dat_files(Path(p) for p in args.paths)
    if not files:
        logger.error("No .dat files found")
        return 1

    failures = process_dat_files(files, Path(args.output), options)
    if failures:
        logger.error(f"{failures} of {len(files)} files failed")
        return 1

    logger.info("Processing complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
