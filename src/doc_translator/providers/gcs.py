"""
Google Cloud Storage backend for staging batch translation jobs.

The storage client is blocking, so every call runs in a worker thread.
"""

from __future__ import annotations

import asyncio

from google.api_core import exceptions as gexc
from google.cloud import storage

from doc_translator.errors import StorageFailure
from doc_translator.providers.base import ObjectStorage


class GCSStorage(ObjectStorage):
    """Object storage on a single GCS bucket."""

    def __init__(self, bucket_name: str, client: storage.Client | None = None):
        self._bucket_name = bucket_name
        self._client = client

    @property
    def bucket(self) -> storage.Bucket:
        if self._client is None:
            self._client = storage.Client()
        return self._client.bucket(self._bucket_name)

    def uri(self, key: str) -> str:
        return f"gs://{self._bucket_name}/{key.lstrip('/')}"

    async def write(self, key: str, content: bytes, content_type: str) -> None:
        blob = self.bucket.blob(key)
        try:
            await asyncio.to_thread(blob.upload_from_string, content, content_type=content_type)
        except gexc.GoogleAPICallError as e:
            raise StorageFailure(f"Could not upload {self.uri(key)}: {e.message}") from e

    async def list_keys(self, prefix: str) -> list[str]:
        def _list() -> list[str]:
            return [blob.name for blob in self.bucket.list_blobs(prefix=prefix)]

        try:
            return await asyncio.to_thread(_list)
        except gexc.GoogleAPICallError as e:
            raise StorageFailure(f"Could not list {self.uri(prefix)}: {e.message}") from e

    async def read(self, key: str) -> bytes:
        blob = self.bucket.blob(key)
        try:
            return await asyncio.to_thread(blob.download_as_bytes)
        except gexc.GoogleAPICallError as e:
            raise StorageFailure(f"Could not download {self.uri(key)}: {e.message}") from e

    async def delete(self, key: str) -> None:
        blob = self.bucket.blob(key)
        try:
            await asyncio.to_thread(blob.delete)
        except gexc.GoogleAPICallError as e:
            raise StorageFailure(f"Could not delete {self.uri(key)}: {e.message}") from e
