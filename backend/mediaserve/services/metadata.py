from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mediaserve.core.errors import AssetNotFound
from mediaserve.models import Asset
from mediaserve.schemas import AssetRecord, ImageMetadata, OtherMetadata


def record_from_asset(asset: Asset) -> AssetRecord:
    if asset.metadata_type == "image" and (asset.width or 0) > 0 and (asset.height or 0) > 0:
        metadata: ImageMetadata | OtherMetadata = ImageMetadata(
            width=asset.width, height=asset.height
        )
    else:
        metadata = OtherMetadata()

    return AssetRecord(
        content_type=asset.content_type,
        deleted=asset.deleted,
        metadata=metadata,
    )


async def find_asset(session: AsyncSession, asset_id: str, tag: str) -> AssetRecord:
    stmt = select(Asset).where(Asset.id == asset_id, Asset.tag == tag)
    result = await session.execute(stmt)
    asset = result.scalar_one_or_none()
    if asset is None:
        raise AssetNotFound()
    return record_from_asset(asset)
