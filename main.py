#!/usr/bin/env python3
"""Main entry point for the face database tools.

Simplified entry point that delegates to the CLI module.

Usage:
    python main.py recognize <cascade> <data_path> <in_image> <out_info> [<out_image>]
    python main.py portraits <data_path> <name> <info_path>
    python main.py collect <cascade> <data_path> <device_id>

Or use the installed commands directly:
    recognize-image, name-to-portraits, face-collection
"""

import sys


def main():
    """Main entry point - delegates to CLI."""
    # If no arguments, show help
    if len(sys.argv) == 1:
        print(__doc__)
        print("Run 'python main.py --help' for more options")
        sys.exit(0)

    from facedb.cli import main as cli_main
    cli_main()


if __name__ == "__main__":
    main()
