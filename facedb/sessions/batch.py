"""Batch recognition of a single image."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import cv2

from ..catalog import PathLike
from ..constants import Settings
from ..dataset import load_dataset
from ..detection import BaseFaceDetector, HaarCascadeDetector
from ..errors import DatasetUnavailable, FrameProcessingError
from ..output import annotate, write_image, write_results
from ..recognition import FaceModel, RecognitionResult, recognize

logger = logging.getLogger(__name__)


@dataclass
class BatchRecognitionConfig:
    """Inputs and outputs of one batch recognition run."""
    cascade_path: PathLike
    data_path: PathLike
    input_image: PathLike
    output_info: PathLike
    output_image: Optional[PathLike] = None


def load_image(path: PathLike):
    """Decode a color image.

    Raises:
        FrameProcessingError: If the file cannot be decoded
    """
    image = cv2.imread(os.fspath(path))
    if image is None:
        raise FrameProcessingError(f'Cannot decode the input image "{os.fspath(path)}".')
    logger.info("Load input image to process.")
    return image


def run_batch_recognition(
    config: BatchRecognitionConfig,
    settings: Optional[Settings] = None,
    detector: Optional[BaseFaceDetector] = None,
    model: Optional[FaceModel] = None,
) -> List[RecognitionResult]:
    """Recognize the faces in one image and write the results.

    Args:
        config: Paths of this run
        settings: Tool settings (defaults if None)
        detector: Face detector (Haar cascade from config.cascade_path if None)
        model: Untrained recognition model (from settings if None)

    Returns:
        Recognition results in detection order
    """
    settings = settings or Settings()
    db = settings.database

    faces_path = Path(config.data_path) / db.faces_dir
    if not faces_path.is_dir():
        raise DatasetUnavailable(f"The path to face database {faces_path} does not exist.")

    dataset = load_dataset(config.data_path, face_size=db.face_size, faces_dir=db.faces_dir)
    logger.info("Face database loaded.")
    width, height = dataset.image_size or db.face_size
    logger.info(f"Standard face image size is {width}*{height}")

    model = model or FaceModel.from_config(settings.recognition)
    model.train(dataset)

    if detector is None:
        detector = HaarCascadeDetector.from_config(os.fspath(config.cascade_path), settings.detection)

    image = load_image(config.input_image)
    results = recognize(image, detector, model)

    logger.info(f"{len(results)} faces detected.{' Faces are:' if results else ' (NO DATA).'}")
    for result in results:
        logger.info(f"  - {result.name} [{result.confidence}]")

    write_results(config.output_info, results)

    if config.output_image:
        write_image(config.output_image, annotate(image, results))
        logger.info(f'Output the processed image as "{os.fspath(config.output_image)}"')

    return results
