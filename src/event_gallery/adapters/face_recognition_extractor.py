"""Local dlib face descriptors via the face_recognition library."""

import asyncio
import importlib
import io
import logging
import threading
from dataclasses import dataclass, field
from types import ModuleType

from event_gallery.domain.errors import ExtractionFailureError
from event_gallery.services.descriptors import DescriptorExtractor

logger = logging.getLogger(__name__)


@dataclass
class FaceRecognitionExtractor(DescriptorExtractor):
    """Detects faces and computes 128-d dlib encodings in a worker thread.

    Importing face_recognition loads the dlib models, so the import is
    deferred to the first extraction. A thread keeps running after its
    caller times out, so every run holds ``_busy`` and a new run cannot
    start until the previous one has finished.
    """

    model: str = "hog"
    upsample_times: int = 1
    _module: ModuleType | None = field(default=None, init=False, repr=False)
    _load_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _busy: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    async def extract(self, image_bytes: bytes) -> list[list[float]]:
        """Return one encoding per detected face."""
        return await asyncio.to_thread(self._extract_sync, image_bytes)

    async def wait_idle(self) -> None:
        """Wait for a run abandoned by a timed-out caller to finish."""
        if self._busy.locked():
            logger.info("Waiting for previous extraction to finish")
            await asyncio.to_thread(self._wait_for_run)

    def _wait_for_run(self) -> None:
        with self._busy:
            return

    def _extract_sync(self, image_bytes: bytes) -> list[list[float]]:
        face_recognition = self._load()
        with self._busy:
            try:
                image = face_recognition.load_image_file(io.BytesIO(image_bytes))
                locations = face_recognition.face_locations(
                    image,
                    number_of_times_to_upsample=self.upsample_times,
                    model=self.model,
                )
                encodings = face_recognition.face_encodings(image, locations)
            except Exception as exc:
                raise ExtractionFailureError(f"Could not read faces: {exc}") from exc
        logger.info("Faces detected", extra={"faces": len(encodings)})
        return [encoding.tolist() for encoding in encodings]

    def _load(self) -> ModuleType:
        with self._load_lock:
            if self._module is None:
                logger.info("Loading face recognition models")
                self._module = importlib.import_module("face_recognition")
            return self._module
