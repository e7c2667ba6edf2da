"""Background retraining with fallback to the previous model version."""

import logging
import threading
from typing import Optional

from ..dataset import Dataset
from ..errors import FaceDBError
from .model import FaceModel

logger = logging.getLogger(__name__)


class BackgroundTrainer:
    """Retrain a FaceModel on a worker thread.

    The model keeps serving predictions from its current recognizer until
    the new one is installed. A newer submission or a cancel() makes any
    running job discard its result.
    """

    def __init__(self, model: FaceModel):
        self.model = model
        self.last_error: Optional[FaceDBError] = None
        self._lock = threading.Lock()
        self._generation = 0
        self._thread: Optional[threading.Thread] = None

    @property
    def busy(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def submit(self, dataset: Dataset) -> None:
        """Start retraining on a snapshot of the dataset."""
        snapshot = dataset.snapshot()
        with self._lock:
            self._generation += 1
            generation = self._generation

        thread = threading.Thread(
            target=self._run,
            args=(snapshot, generation),
            name=f"retrain-{generation}",
            daemon=True,
        )
        self._thread = thread
        thread.start()
        logger.debug(f"Retraining job {generation} started on {len(snapshot)} samples")

    def cancel(self) -> None:
        """Discard the result of any running job."""
        with self._lock:
            self._generation += 1

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for the latest job; True if no job is still running."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self.busy

    def _run(self, snapshot: Dataset, generation: int) -> None:
        try:
            state = self.model.fit(snapshot)
        except FaceDBError as e:
            self.last_error = e
            logger.warning(f"Retraining job {generation} failed: {e}")
            return

        with self._lock:
            if generation != self._generation:
                logger.debug(f"Retraining job {generation} superseded, result discarded")
                return
            self.model.install(state)
            self.last_error = None
