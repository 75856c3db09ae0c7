from fastapi import HTTPException, Query, Request

from mediaserve.core.config import get_settings
from mediaserve.core.errors import UnknownTag
from mediaserve.schemas import ResizeRequest
from mediaserve.services.delivery import DeliveryService


def get_delivery_service(request: Request) -> DeliveryService:
    return request.app.state.delivery_service


def resolve_tag(tag: str | None = None) -> str:
    settings = get_settings()
    resolved = tag or settings.default_tag
    if resolved not in settings.tags:
        raise HTTPException(status_code=UnknownTag.status_code, detail=UnknownTag.detail)
    return resolved


def get_resize_request(
    size: int | None = Query(default=None, gt=0),
    width: int | None = Query(default=None, gt=0),
    height: int | None = Query(default=None, gt=0),
    max_side: int | None = Query(default=None, gt=0),
    fit: str | None = Query(default=None),
    dpr: float | None = Query(default=None, gt=0, allow_inf_nan=False),
) -> ResizeRequest:
    return ResizeRequest(
        size=size,
        width=width,
        height=height,
        max_side=max_side,
        fit=fit,
        dpr=dpr,
    )
