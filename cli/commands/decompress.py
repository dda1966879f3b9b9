"""
zstar CLI - Decompress Command
Usage: python -m cli.commands.decompress backup.zst -o restored
"""
import argparse
import sys
from core.unpacker.unpacker import Unpacker
from core.errors import ZstarError
from core.utils.logger import logger


def main(argv=None):
    parser = argparse.ArgumentParser(description="Extract a zstar archive into a fresh directory")
    parser.add_argument("input", help="Path to the .zst file")
    parser.add_argument("-o", "--output",
                        help="Name of the output directory (default: <archive>_extracted). "
                             "An existing directory with this name is replaced.")

    args = parser.parse_args(argv)

    try:
        result = Unpacker().decompress_file(args.input, args.output)
        print(f"\n✅ Success! Extracted {result['extracted_files']} files to: {result['output_dir']}")

    except KeyboardInterrupt:
        print("\n❌ Operation cancelled by user.")
        sys.exit(130)
    except ZstarError as e:
        logger.error(f"Decompression failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
