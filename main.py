"""
Entry point for the WordPress to markdown conversion tool.
"""

import argparse
import sys

from wp2md.conversion_tool import WordPressConversionTool
from wp2md.utils.errors import InvalidExportError
from wp2md.utils.pre_flight_checks import PreFlightCheckError

CONFIG_FILE = "config/conversion_config.json"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a WordPress export (WXR) into markdown posts."
    )
    parser.add_argument(
        "--config",
        default=CONFIG_FILE,
        help=f"JSON configuration file (default: {CONFIG_FILE})",
    )
    parser.add_argument("--input", help="WordPress export file, overrides export.input")
    parser.add_argument("--output", help="Output directory, overrides export.output")
    parser.add_argument(
        "--no-download",
        action="store_true",
        help="Write the posts without downloading their images",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main function to run the WordPress to markdown conversion tool.
    """
    args = parse_args(argv)
    tool = WordPressConversionTool(config_file=args.config)
    if args.input:
        tool.config["export"]["input"] = args.input
    if args.output:
        tool.config["export"]["output"] = args.output
    if args.no_download:
        tool.config["images"]["download"] = False

    tool.log_message("Starting WordPress to markdown conversion.")
    try:
        tool.run()
    except PreFlightCheckError as e:
        tool.log_message(str(e), level="ERROR")
        return 1
    except InvalidExportError as e:
        tool.log_message(f"Aborting: {e}", level="ERROR")
        return 1

    tool.log_message("Conversion finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
