"""
g2m: create a matlab/octave file from 3D-printer G-code

Usage examples:

  g2m                   # convert latest *.g file in local directory
  g2m -t                # test run, output to *.mecho
  g2m -d -l -e XXX.g    # debug comments with line numbers, extrusion rate
  g2m *.g               # process all g-code files
  g2m key=val *.g       # settings as key=value (debug, lnum, extrusionrate, gext, header)

The last point of the previous segment is repeated at the beginning of the
next one and marked with a feed rate of -1.
"""
import sys
import argparse
import logging

from .config import (
    ConfigError,
    apply_overrides,
    config_from_env,
    describe,
    find_latest_gcode,
    output_path_for,
    parse_override,
)
from .converter import convert_file, ConversionError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="g2m",
        description="G-code to Matlab/Octave converter",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("files", nargs="*", help="G-code files or key=value settings")
    parser.add_argument("-t", "--test", action="store_true", help="Dry run, output to *.mecho")
    parser.add_argument("-d", "--debug", action="store_true", help="Copy every input line as a comment")
    parser.add_argument("-l", "--lnum", action="store_true", help="Add line numbers to comments")
    parser.add_argument("-e", "--extrusionrate", action="store_true",
                        help="Output extrusion rate instead of accumulated extrusion")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only warnings and errors")
    return parser


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')

    for option in unknown:
        logger.warning(f"unknown option {option}")

    # key=value 와 파일 분리
    overrides = {}
    files = []
    for arg in args.files:
        pair = parse_override(arg)
        if pair:
            overrides[pair[0]] = pair[1]
        else:
            files.append(arg)

    flags = {}
    if args.debug:
        flags["debug"] = True
    if args.lnum:
        flags["lnum"] = True
    if args.extrusionrate:
        flags["extrusionrate"] = True
    if args.test:
        flags["dry_run"] = True

    try:
        config = config_from_env()
        config = apply_overrides(config, flags)
        config = apply_overrides(config, overrides)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    command_line = " ".join(["g2m"] + list(argv))
    logger.info(f"command line: {command_line}")
    for setting in describe(config):
        logger.info(f"setting: {setting}")

    if not files:
        latest = find_latest_gcode()
        if latest is None:
            print("Error: no *.g file found in current directory", file=sys.stderr)
            return 1
        files = [str(latest)]

    failed = 0
    for gcode_file in files:
        m_file = output_path_for(gcode_file, config)
        try:
            convert_file(gcode_file, m_file, config, command_line=command_line)
        except ConversionError as e:
            logger.error(f"{e}")
            failed += 1

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
