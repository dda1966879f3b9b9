"""
zstar CLI - Inspect Command
Usage: python -m cli.commands.inspect backup.zst
"""
import argparse
import sys
from core.tools.inspector import Inspector
from core.errors import ZstarError
from core.utils.logger import logger


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="List the contents of a zstar archive without extracting"
    )
    parser.add_argument("input", help="Path to the .zst archive")

    args = parser.parse_args(argv)

    try:
        Inspector().inspect(args.input)
    except ZstarError as e:
        logger.error(f"Inspection failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
