"""Remote face embedding service client."""

from dataclasses import dataclass

import httpx

from event_gallery.domain.errors import ExtractionFailureError
from event_gallery.services.descriptors import DescriptorExtractor
from event_gallery.services.storage import detect_mime_type


@dataclass
class HttpxDescriptorExtractor(DescriptorExtractor):
    """Descriptor extractor that posts images to an embedding service."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 60.0

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 60.0
    ) -> "HttpxDescriptorExtractor":
        """Create an extractor with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def extract(self, image_bytes: bytes) -> list[list[float]]:
        """Return the service's descriptors for every face in the image."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/descriptors",
                files={"image": ("image", image_bytes, detect_mime_type(image_bytes))},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ExtractionFailureError(
                f"Embedding service request failed: {exc}"
            ) from exc
        descriptors = payload.get("descriptors") if isinstance(payload, dict) else None
        if not isinstance(descriptors, list):
            raise ExtractionFailureError("Embedding service returned no descriptor list")
        return descriptors

    async def wait_idle(self) -> None:
        """Requests are cancelled with their caller, so nothing lingers."""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
