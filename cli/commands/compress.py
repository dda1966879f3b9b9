"""
zstar CLI - Compress Command
Usage: python -m cli.commands.compress docs/ notes.txt -o backup.zst -l 10
"""
import argparse
import sys
from core.packager.packager import Packager
from core.errors import ZstarError
from core.utils.logger import logger


def main(argv=None):
    parser = argparse.ArgumentParser(description="Pack files and folders into a zstd compressed tar archive (.zst)")
    parser.add_argument("inputs", nargs="+", help="Files or directories to archive")
    parser.add_argument("-o", "--output", help="Path to the output .zst file")
    parser.add_argument("-l", "--level", default=None,
                        help="Compression level 1-19 or low/medium/high (default: 3)")

    args = parser.parse_args(argv)

    try:
        result = Packager().compress_files(args.inputs, args.output, args.level)

        print(f"\n✅ Success! Archive saved to: {result['output_file']}")
        print(f"   Original:  {result['original_size']} bytes")
        print(f"   Archive:   {result['compressed_size']} bytes")
        print(f"   Ratio:     {result['compression_ratio']:.1f}%")
        print(f"   Time:      {result['duration']:.2f}s")

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(130)
    except ZstarError as e:
        logger.error(f"Compression failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
