from __future__ import annotations

import argparse
import sys
from typing import Sequence

from .config import DEFAULT_CONVERTER

RESUME_COMMAND = "resume"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--converter",
        dest="converter",
        default=None,
        help=f"Converter executable name or path (default: {DEFAULT_CONVERTER})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Enable debug logging",
    )


def _convert_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polycity",
        usage="%(prog)s [options] <input directory>\n       %(prog)s resume [--converter NAME]",
        description=(
            "Convert every CityGML file in a directory with polygon-city and build a "
            "combined GeoJSON index of the output extents."
        ),
    )
    parser.add_argument(
        "input_dir",
        nargs="?",
        default=None,
        help="Directory containing the .gml files to convert",
    )
    parser.add_argument("-e", "--epsg", dest="epsg", default=None, help="EPSG code for input data")
    parser.add_argument(
        "-m", "--mapzen", dest="elevation_key", default=None, help="Mapzen Elevation API key"
    )
    parser.add_argument("-p", "--prefix", dest="prefix", default=None, help="Prefix for building IDs")
    parser.add_argument(
        "-el", "--elevation", dest="elevation_endpoint", default=None, help="Elevation endpoint"
    )
    parser.add_argument(
        "-w", "--wof", dest="wof_endpoint", default=None, help="Who's On First endpoint"
    )
    parser.add_argument("-l", "--license", dest="license", default=None, help="License text")
    parser.add_argument("-o", "--output", dest="output_dir", default=None, help="Output directory")
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="YAML or JSON file providing any of the options above (command line wins)",
    )
    parser.add_argument(
        "--read-workers",
        dest="read_workers",
        type=int,
        default=None,
        help="Number of index fragments read concurrently when building the catalog (default: 4)",
    )
    parser.add_argument(
        "--continue-on-interrupt",
        dest="continue_on_interrupt",
        action="store_true",
        help="Keep converting the remaining files after a conversion is interrupted",
    )
    parser.add_argument(
        "--strict-fragments",
        dest="strict_fragments",
        action="store_true",
        help="Fail the run on the first unreadable index fragment instead of skipping it",
    )
    _add_common_arguments(parser)
    return parser


def _resume_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polycity resume",
        description="Resume processing of existing polygon-city jobs",
    )
    _add_common_arguments(parser)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse either the conversion command or the ``resume`` subcommand."""

    tokens = list(sys.argv[1:] if argv is None else argv)
    if tokens and tokens[0] == RESUME_COMMAND:
        args = _resume_parser().parse_args(tokens[1:])
        args.command = RESUME_COMMAND
        return args
    args = _convert_parser().parse_args(tokens)
    args.command = "convert"
    return args


__all__ = ["RESUME_COMMAND", "parse_args"]
