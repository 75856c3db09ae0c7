from contextlib import asynccontextmanager
from fastapi import FastAPI

from mediaserve.core.config import get_settings
from mediaserve.core.logging import configure_logging
from mediaserve.db.session import dispose_engine
from mediaserve.services.delivery import DeliveryService
from mediaserve.tasks.runner import TranscodeRunner
from mediaserve.api.routers import info as info_router
from mediaserve.api.routers import serve as serve_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    runner = TranscodeRunner()
    app.state.transcode_runner = runner
    app.state.delivery_service = DeliveryService(runner)

    await runner.start()
    yield
    await runner.stop()
    await dispose_engine()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        debug=settings.debug,
        title="mediaserve",
        lifespan=lifespan,
    )

    app.include_router(info_router.router)
    app.include_router(serve_router.router)

    return app


app = create_app()
