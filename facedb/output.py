"""Result serialization and image annotation."""

import json
import logging
import os
from typing import Any, Dict, List, Sequence, Tuple

import cv2
import numpy as np

from .catalog import PathLike
from .errors import OutputWriteFailure
from .recognition.types import RecognitionResult

logger = logging.getLogger(__name__)

# BGR
BOX_COLOR: Tuple[int, int, int] = (0, 255, 0)

BATCH_LABEL_TEMPLATE = "{name} [{confidence:.2f}]"
LIVE_LABEL_TEMPLATE = "Prediction = {name} [{confidence:f}]"


def result_to_dict(result: RecognitionResult) -> Dict[str, Any]:
    """JSON representation of one recognition result."""
    x, y, w, h = result.bbox
    return {
        "prediction": result.name,
        "confidence": result.confidence,
        "position": {"x": int(x), "y": int(y)},
        "size": {"width": int(w), "height": int(h)},
    }


def results_to_json(results: Sequence[RecognitionResult]) -> List[Dict[str, Any]]:
    """JSON array of recognition results, in detection order."""
    return [result_to_dict(result) for result in results]


def write_json(path: PathLike, payload: Any) -> None:
    """Write a JSON document followed by a newline.

    Raises:
        OutputWriteFailure: If the file cannot be opened or written
    """
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f)
            f.write("\n")
    except OSError as e:
        raise OutputWriteFailure(f'Cannot open the file "{os.fspath(path)}": {e.strerror or e}') from e


def write_results(path: PathLike, results: Sequence[RecognitionResult]) -> None:
    """Write recognition results as a JSON array."""
    write_json(path, results_to_json(results))
    logger.info(f'Output the information file as "{os.fspath(path)}"')


def annotate(
    image: np.ndarray,
    results: Sequence[RecognitionResult],
    template: str = BATCH_LABEL_TEMPLATE,
    color: Tuple[int, int, int] = BOX_COLOR,
) -> np.ndarray:
    """Draw each face box with its prediction above it on a copy of image."""
    output = image.copy()

    for result in results:
        face = result.face
        cv2.rectangle(output, face.top_left, face.bottom_right, color, 1)

        text = template.format(name=result.name, confidence=result.confidence)
        position = (max(face.x - 10, 0), max(face.y - 10, 0))
        cv2.putText(output, text, position, cv2.FONT_HERSHEY_PLAIN, 1.0, color, 2)

    return output


def write_image(path: PathLike, image: np.ndarray) -> None:
    """Encode and write an image; the format follows the file extension.

    Raises:
        OutputWriteFailure: If the image cannot be encoded or written
    """
    try:
        written = cv2.imwrite(os.fspath(path), image)
    except cv2.error as e:
        raise OutputWriteFailure(f'Cannot write the image "{os.fspath(path)}": {e}') from e
    if not written:
        raise OutputWriteFailure(f'Cannot write the image "{os.fspath(path)}".')
