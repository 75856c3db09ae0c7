from fastapi import APIRouter

from mediaserve import __version__
from mediaserve.core.config import get_settings
from mediaserve.schemas import ServiceInfo

router = APIRouter(tags=["info"])


@router.get("/", response_model=ServiceInfo)
async def get_info() -> ServiceInfo:
    settings = get_settings()
    return ServiceInfo(
        name="mediaserve",
        version=__version__,
        tags=sorted(settings.tags),
        serve=settings.serve.model_dump(),
        storage_backend=settings.storage_backend,
    )
