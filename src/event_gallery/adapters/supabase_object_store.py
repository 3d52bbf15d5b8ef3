"""Supabase Storage object store for event images."""

import asyncio
from dataclasses import dataclass
from uuid import uuid4

from supabase import Client

from event_gallery.domain.errors import StorageFailureError
from event_gallery.services.storage import (
    ObjectStore,
    StoredObject,
    detect_mime_type,
    extension_for,
)


@dataclass
class SupabaseObjectStore(ObjectStore):
    """Stores images in a public Supabase Storage bucket."""

    client: Client
    bucket: str

    async def store(self, image_bytes: bytes, namespace: str) -> StoredObject:
        """Upload bytes under the namespace and return the public URL and path."""
        mime_type = detect_mime_type(image_bytes)
        path = f"{namespace.strip('/')}/{uuid4().hex}.{extension_for(mime_type)}"
        try:
            await asyncio.to_thread(self._upload, path, image_bytes, mime_type)
            url = await asyncio.to_thread(
                self.client.storage.from_(self.bucket).get_public_url, path
            )
        except Exception as exc:
            raise StorageFailureError(f"Storage upload failed for {path}") from exc
        return StoredObject(url=url, handle=path)

    async def delete(self, handle: str) -> None:
        """Remove a stored object by path."""
        try:
            await asyncio.to_thread(self.client.storage.from_(self.bucket).remove, [handle])
        except Exception as exc:
            raise StorageFailureError(f"Storage delete failed for {handle}") from exc

    def _upload(self, path: str, image_bytes: bytes, mime_type: str) -> None:
        self.client.storage.from_(self.bucket).upload(
            path=path,
            file=image_bytes,
            file_options={"content-type": mime_type},
        )
