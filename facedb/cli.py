#!/usr/bin/env python3
"""Command-line tools for the face database.

Usage:
    recognize-image <cascade> <data_path> <in_image> <out_info> [<out_image>]
    name-to-portraits <data_path> <name> <info_path>
    face-collection <cascade> <data_path> <device_id> [--name NAME]

The same tools are available as sub-commands:
    python -m facedb recognize <cascade> <data_path> <in_image> <out_info>
    python -m facedb portraits <data_path> <name> <info_path>
    python -m facedb collect <cascade> <data_path> <device_id>
"""

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from .constants import Settings, load_settings, setup_logging
from .errors import ConfigurationError, FaceDBError

logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Config file (default: config/config.yaml)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def _add_recognize_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("cascade", help="Path to the Haar Cascade for face detection")
    parser.add_argument("data_path", help="Path to the face database")
    parser.add_argument("in_image", help="Input image to process face recognition")
    parser.add_argument("out_info", help="Output information of the face recognition result")
    parser.add_argument("out_image", nargs="?", default=None,
                        help="Output image of the face recognition result (optional)")
    _add_common_arguments(parser)


def _add_portraits_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("data_path", help="Path to the face database directory")
    parser.add_argument("name", help="Name of the person to convert")
    parser.add_argument("info_path", help="Path to the JSON file of protrait paths")
    _add_common_arguments(parser)


def _add_collect_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("cascade", help="Path to the Haar Cascade for face detection")
    parser.add_argument("data_path", help="Path to the face database directory")
    parser.add_argument("device_id", help="The webcam device id to grab frames from")
    parser.add_argument("--name", "-n", default=None,
                        help="Name of the current user (prompted for if omitted)")
    _add_common_arguments(parser)


def _init(args) -> Settings:
    """Load settings and configure logging.

    Raises:
        ConfigurationError: If the settings file is invalid; logging is
            configured with defaults first so the error can be reported
    """
    try:
        settings = load_settings(args.config)
    except ConfigurationError:
        setup_logging(debug=args.debug)
        raise
    setup_logging(settings.logging, debug=args.debug)
    return settings


def cmd_recognize(args) -> int:
    """Recognize the faces in one image."""
    from .sessions import BatchRecognitionConfig, run_batch_recognition

    config = BatchRecognitionConfig(
        cascade_path=args.cascade,
        data_path=args.data_path,
        input_image=args.in_image,
        output_info=args.out_info,
        output_image=args.out_image,
    )

    try:
        settings = _init(args)
        run_batch_recognition(config, settings)
    except (FaceDBError, ValueError) as e:
        logger.error(f"Face recognition failed: {e}")
        return 1
    return 0


def cmd_portraits(args) -> int:
    """Write the portrait paths of a person; always succeeds."""
    from .sessions import PortraitLookupConfig, run_portrait_lookup

    try:
        settings = _init(args)
    except ConfigurationError as e:
        logger.warning(f"{e}; using default settings")
        settings = Settings()

    run_portrait_lookup(PortraitLookupConfig(
        data_path=args.data_path,
        name=args.name,
        info_path=args.info_path,
        portraits_dir=settings.database.portraits_dir,
    ))
    return 0


def prompt_name(read: Callable[[str], str] = input) -> str:
    """Ask the user for the name of the person being captured."""
    print("Please type the name of current user. (No space)")
    return read("NAME: ").strip()


def cmd_collect(args) -> int:
    """Run the live face collection session."""
    from .sessions import CaptureSessionConfig, run_capture_session

    try:
        settings = _init(args)
    except ConfigurationError as e:
        logger.error(f"Face collection failed: {e}")
        return 1

    try:
        name = args.name or prompt_name()
    except EOFError:
        logger.error("No user name given")
        return 1

    config = CaptureSessionConfig(
        cascade_path=args.cascade,
        data_path=args.data_path,
        device_id=args.device_id,
        person_name=name,
    )

    try:
        run_capture_session(config, settings)
    except (FaceDBError, ValueError) as e:
        logger.error(f"Face collection failed: {e}")
        return 1
    return 0


def recognize_image_main(argv: Optional[List[str]] = None) -> None:
    """Entry point of recognize-image."""
    parser = argparse.ArgumentParser(
        prog="recognize-image",
        description="Face recognition from an image file",
    )
    _add_recognize_arguments(parser)
    sys.exit(cmd_recognize(parser.parse_args(argv)))


def name_to_portraits_main(argv: Optional[List[str]] = None) -> None:
    """Entry point of name-to-portraits."""
    parser = argparse.ArgumentParser(
        prog="name-to-portraits",
        description="Convert a name to the protrait paths of the face database",
    )
    _add_portraits_arguments(parser)
    sys.exit(cmd_portraits(parser.parse_args(argv)))


def face_collection_main(argv: Optional[List[str]] = None) -> None:
    """Entry point of face-collection."""
    parser = argparse.ArgumentParser(
        prog="face-collection",
        description="Collect face samples and portraits from a webcam",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
    SPACE   - Save face sample and retrain
    p       - Save portrait
    q/ESC   - Quit
""",
    )
    _add_collect_arguments(parser)
    sys.exit(cmd_collect(parser.parse_args(argv)))


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point with one sub-command per tool."""
    parser = argparse.ArgumentParser(
        prog="facedb",
        description="Face database tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m facedb recognize cascade.xml data photo.jpg result.json result.jpg
  python -m facedb portraits data alice portraits.json
  python -m facedb collect cascade.xml data 0 --name alice
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    _add_recognize_arguments(subparsers.add_parser("recognize", help="Recognize faces in an image"))
    _add_portraits_arguments(subparsers.add_parser("portraits", help="List a person's portraits"))
    _add_collect_arguments(subparsers.add_parser("collect", help="Collect faces from a webcam"))

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    commands: Dict[str, Callable] = {
        "recognize": cmd_recognize,
        "portraits": cmd_portraits,
        "collect": cmd_collect,
    }
    sys.exit(commands[args.command](args))


if __name__ == "__main__":
    main()
