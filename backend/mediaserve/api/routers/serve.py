from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from mediaserve.api.deps import get_delivery_service, get_resize_request, resolve_tag
from mediaserve.core.errors import MediaServeError
from mediaserve.db.session import get_session
from mediaserve.schemas import ResizeRequest
from mediaserve.services.delivery import DeliveryService

router = APIRouter(tags=["serve"])


async def _serve(
    service: DeliveryService,
    session: AsyncSession,
    asset_id: str,
    tag: str,
    resize: ResizeRequest,
) -> Response:
    try:
        return await service.serve(session, asset_id, tag, resize)
    except MediaServeError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("/{asset_id}", name="serve_default_tag")
async def serve_default(
    asset_id: str,
    resize: ResizeRequest = Depends(get_resize_request),
    session: AsyncSession = Depends(get_session),
    service: DeliveryService = Depends(get_delivery_service),
) -> Response:
    return await _serve(service, session, asset_id, resolve_tag(), resize)


@router.get("/{tag}/{asset_id}", name="serve")
async def serve_tagged(
    tag: str,
    asset_id: str,
    resize: ResizeRequest = Depends(get_resize_request),
    session: AsyncSession = Depends(get_session),
    service: DeliveryService = Depends(get_delivery_service),
) -> Response:
    return await _serve(service, session, asset_id, resolve_tag(tag), resize)
