import asyncio
import logging
from pathlib import Path
from typing import Final

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from mediaserve.core.config import Settings, get_settings
from mediaserve.core.errors import StorageError, StorageUnavailable, UnknownTag

logger = logging.getLogger(__name__)


class StorageBackend:
    """One storage tier. Implementations raise ``StorageError`` on any failure."""

    scheme: str = "abstract"

    async def get(self, asset_id: str, tag: str) -> bytes:
        raise NotImplementedError


class S3StorageBackend(StorageBackend):
    """S3-compatible object store; each tag maps to its own bucket."""

    scheme: Final[str] = "s3"

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        session = boto3.session.Session()
        self.client = session.client(
            "s3",
            endpoint_url=str(self.settings.s3_endpoint) if self.settings.s3_endpoint else None,
            aws_access_key_id=self.settings.s3_access_key,
            aws_secret_access_key=self.settings.s3_secret_key,
            region_name=self.settings.s3_region,
            config=Config(signature_version="s3v4"),
        )

    def bucket_for(self, tag: str) -> str:
        try:
            return self.settings.tags[tag]
        except KeyError:
            raise UnknownTag() from None

    async def get(self, asset_id: str, tag: str) -> bytes:
        bucket = self.bucket_for(tag)

        def _get() -> bytes:
            response = self.client.get_object(Bucket=bucket, Key=asset_id)
            code = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if code != 200:
                raise StorageError(self.scheme, asset_id, f"status {code}")
            return response["Body"].read()

        try:
            return await asyncio.to_thread(_get)
        except ClientError as exc:
            code = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            raise StorageError(self.scheme, asset_id, f"status {code}") from exc
        except BotoCoreError as exc:
            raise StorageError(self.scheme, asset_id, str(exc)) from exc


class LocalStorageBackend(StorageBackend):
    """Local filesystem tier; objects live at ``<base>/<asset_id>`` for every tag."""

    scheme: Final[str] = "local"

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.base_path = Path(self.settings.local_storage_dir).resolve()

    def _key_path(self, key: str) -> Path:
        # Prevent directory traversal by resolving inside base path
        candidate = self.base_path.joinpath(*Path(key).parts).resolve()
        if not candidate.is_relative_to(self.base_path) or candidate == self.base_path:
            raise StorageError(self.scheme, key, "invalid storage key")
        return candidate

    async def get(self, asset_id: str, tag: str) -> bytes:
        path = self._key_path(asset_id)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise StorageError(self.scheme, asset_id, exc.strerror or str(exc)) from exc


class TieredRetriever:
    """Reads an asset from the first storage tier that can produce it."""

    def __init__(self, backends: list[StorageBackend]) -> None:
        if not backends:
            raise ValueError("TieredRetriever needs at least one backend")
        self.backends = list(backends)

    async def retrieve(self, asset_id: str, tag: str) -> bytes:
        last_error: StorageError | None = None
        for backend in self.backends:
            try:
                return await backend.get(asset_id, tag)
            except StorageError as exc:
                logger.warning("Storage tier %s failed: %s", backend.scheme, exc)
                last_error = exc

        raise StorageUnavailable() from last_error


def build_backends(settings: Settings) -> list[StorageBackend]:
    backends: list[StorageBackend] = []
    if settings.use_s3:
        backends.append(S3StorageBackend(settings))
    backends.append(LocalStorageBackend(settings))
    return backends


_retriever: TieredRetriever | None = None


def get_retriever() -> TieredRetriever:
    global _retriever
    if _retriever is None:
        _retriever = TieredRetriever(build_backends(get_settings()))
    return _retriever


def reset_retriever() -> None:
    global _retriever
    _retriever = None
