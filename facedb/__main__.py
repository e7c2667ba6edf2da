"""Entry point for running the face database tools as a module.

Usage:
    python -m facedb recognize <cascade> <data_path> <in_image> <out_info> [<out_image>]
    python -m facedb portraits <data_path> <name> <info_path>
    python -m facedb collect <cascade> <data_path> <device_id>
"""

from .cli import main


if __name__ == "__main__":
    main()
