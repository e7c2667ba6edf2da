"""Name to portrait paths lookup."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..catalog import PathLike, list_files, list_subdirectories
from ..constants import PROTRAITS_DIR
from ..errors import OutputWriteFailure, PathUnavailable
from ..output import write_json

logger = logging.getLogger(__name__)


@dataclass
class PortraitLookupConfig:
    """Inputs and output of one portrait lookup."""
    data_path: PathLike
    name: str
    info_path: PathLike
    portraits_dir: str = PROTRAITS_DIR


def lookup_portraits(data_path: PathLike, name: str, portraits_dir: str = PROTRAITS_DIR) -> List[str]:
    """Absolute paths of the portraits stored for a person.

    The name is matched against the entries of the portraits directory, so
    anything that is not a person directory there yields no paths.

    Returns:
        Portrait file paths in directory enumeration order; empty when the
        portraits directory or the person does not exist
    """
    portraits_path = Path(data_path) / portraits_dir
    try:
        people = list_subdirectories(portraits_path)
    except PathUnavailable as e:
        logger.info(f"No protrait data directory: {e}")
        return []

    logger.info(f'Open protrait data directory "{portraits_path}".')

    if name not in people:
        logger.info(f"No protrait directory for {name!r}")
        return []

    person_path = os.path.abspath(portraits_path / name)
    try:
        filenames = list_files(person_path)
    except PathUnavailable as e:
        logger.warning(f"Cannot read protrait directory: {e}")
        return []

    logger.info(f'Found user protrait directory "{person_path}". Protrait images:')
    paths = []
    for filename in filenames:
        path = os.path.join(person_path, filename)
        paths.append(path)
        logger.info(f"  - {path}")
    return paths


def run_portrait_lookup(config: PortraitLookupConfig) -> List[str]:
    """Look up a person's portraits and write them as a JSON array.

    A failure to write the index is logged, not raised.
    """
    paths = lookup_portraits(config.data_path, config.name, config.portraits_dir)
    try:
        write_json(config.info_path, paths)
    except OutputWriteFailure as e:
        logger.error(str(e))
    else:
        logger.info(f'Output result as file "{os.fspath(config.info_path)}".')
    return paths
