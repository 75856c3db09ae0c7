from __future__ import annotations

import logging

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from mediaserve.core.config import Settings, get_settings
from mediaserve.core.errors import TranscodeError
from mediaserve.schemas import AssetMetadata, ImageMetadata, ResizeRequest
from mediaserve.services.metadata import find_asset
from mediaserve.services.policy import admit, disposition_for
from mediaserve.services.resize import resolve_target_dimensions
from mediaserve.services.response import assemble_response
from mediaserve.services.storage import TieredRetriever, get_retriever
from mediaserve.services.transcode import transcode
from mediaserve.tasks.runner import TranscodeRunner

logger = logging.getLogger(__name__)


class DeliveryService:
    def __init__(
        self,
        runner: TranscodeRunner,
        retriever: TieredRetriever | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.runner = runner
        self.retriever = retriever or get_retriever()

    async def fetch_file(
        self,
        asset_id: str,
        tag: str,
        metadata: AssetMetadata,
        resize: ResizeRequest | None,
    ) -> tuple[bytes, str | None]:
        """Return the stored bytes, transcoded when a resize applies.

        The second element is the new content type, or ``None`` when the
        original bytes are returned untouched.
        """
        contents = await self.retriever.retrieve(asset_id, tag)

        if resize is None or not isinstance(metadata, ImageMetadata):
            return contents, None

        # Nothing past this point may fail the request; any error serves the original.
        try:
            target = resolve_target_dimensions(resize, metadata.width, metadata.height)
            if target is None:
                return contents, None

            output = await self.runner.run(
                transcode,
                contents,
                target.width,
                target.height,
                resize.fit,
                self.settings.serve,
            )
        except TranscodeError as exc:
            logger.warning("Serving original for %s, transcode failed: %s", asset_id, exc)
            return contents, None
        except RuntimeError as exc:
            logger.warning("Serving original for %s, transcode unavailable: %s", asset_id, exc)
            return contents, None
        except Exception:
            logger.exception("Serving original for %s, unexpected resize error", asset_id)
            return contents, None

        return output.data, output.content_type

    async def serve(
        self,
        session: AsyncSession,
        asset_id: str,
        tag: str,
        resize: ResizeRequest | None = None,
    ) -> Response:
        record = await find_asset(session, asset_id, tag)
        admit(record, self.settings.content_type_denylist)

        contents, content_type = await self.fetch_file(asset_id, tag, record.metadata, resize)
        content_type = content_type or record.content_type

        return assemble_response(
            contents,
            content_type,
            disposition_for(content_type),
            self.settings.cache_control,
        )
