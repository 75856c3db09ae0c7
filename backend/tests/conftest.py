import io
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mediaserve.core.config import get_settings
from mediaserve.db import session as db_session
from mediaserve.db.base import Base
from mediaserve.models import Asset
from mediaserve.services import storage as storage_service
from mediaserve.services.delivery import DeliveryService
from mediaserve.tasks.runner import TranscodeRunner


def make_image(width: int, height: int, fmt: str = "JPEG", mode: str = "RGB") -> bytes:
    image = Image.new("RGBA", (width, height), (200, 30, 30, 255))
    if mode != "RGBA":
        image = image.convert(mode)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def storage_dir(tmp_path):
    path = tmp_path / "files"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def configure_environment(monkeypatch, tmp_path, storage_dir):
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("LOCAL_STORAGE_DIR", str(storage_dir))
    monkeypatch.setenv("TAGS", '{"attachments": "attachments", "avatars": "avatars"}')
    monkeypatch.setenv("DEFAULT_TAG", "attachments")
    monkeypatch.setenv("SERVE", '{"format": "png"}')
    monkeypatch.setenv("CONTENT_TYPE_DENYLIST", '["application/x-executable"]')
    get_settings.cache_clear()
    db_session.reset_session_factory()
    storage_service.reset_retriever()
    yield
    get_settings.cache_clear()
    db_session.reset_session_factory()
    storage_service.reset_retriever()


@pytest_asyncio.fixture
async def prepare_database():
    engine = db_session.get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def runner():
    transcode_runner = TranscodeRunner(max_workers=2)
    await transcode_runner.start()
    yield transcode_runner
    await transcode_runner.stop()


@pytest.fixture
def app_instance(runner):
    from mediaserve.main import create_app

    app = create_app()

    # Setup state for tests, mimicking lifespan events
    app.state.transcode_runner = runner
    app.state.delivery_service = DeliveryService(runner)
    return app


@pytest_asyncio.fixture
async def client(app_instance, prepare_database):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def add_asset(prepare_database, storage_dir):
    """Insert an asset row and, unless ``data`` is None, its bytes on local storage."""

    async def _add(
        asset_id: str,
        data: bytes | None,
        content_type: str,
        *,
        tag: str = "attachments",
        metadata_type: str = "file",
        width: int | None = None,
        height: int | None = None,
        deleted: bool = False,
    ) -> Asset:
        asset = Asset(
            id=asset_id,
            tag=tag,
            filename=f"{asset_id}.bin",
            content_type=content_type,
            size=len(data or b""),
            deleted=deleted,
            metadata_type=metadata_type,
            width=width,
            height=height,
        )
        session_factory = db_session.get_session_factory()
        async with session_factory() as session:
            session.add(asset)
            await session.commit()
        if data is not None:
            (storage_dir / asset_id).write_bytes(data)
        return asset

    return _add
