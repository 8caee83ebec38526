from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["COOKIE_SECURE"] = "true"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from vidshare.api.deps import get_db, get_media_service
from vidshare.db import build_engine, make_session_factory
from vidshare.main import create_app
from vidshare.models.base import Base
from vidshare.services.media_service import MediaService
from vidshare.services.storage import StorageService

PASSWORD = "Secret#123"


class FakeStorage(StorageService):
    def __init__(self) -> None:
        self.uploaded: list[tuple[str, Optional[str]]] = []
        self.deleted: list[str] = []
        self.fail = False

    def upload_file(self, object_name: str, file_path: str, content_type: Optional[str]) -> str:
        if self.fail:
            raise ConnectionError("media host unreachable")
        with open(file_path, "rb") as handle:
            assert handle.read()
        self.uploaded.append((object_name, content_type))
        return f"https://media.test/{object_name}"

    def delete_object(self, object_name: str) -> None:
        if self.fail:
            raise ConnectionError("media host unreachable")
        self.deleted.append(object_name)

    def object_name_for(self, url: str) -> Optional[str]:
        prefix = "https://media.test/"
        return url[len(prefix):] if url.startswith(prefix) else None


def image_file(name: str = "avatar.png") -> tuple[str, bytes, str]:
    return (name, b"\x89PNG\r\n\x1a\nfake-image", "image/png")


def video_file(name: str = "clip.mp4") -> tuple[str, bytes, str]:
    return (name, b"\x00\x00\x00\x18ftypmp42fake-video", "video/mp4")


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession], storage: FakeStorage
) -> FastAPI:
    app = create_app()

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_media_service] = lambda: MediaService(storage)
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    # Auth cookies are marked Secure, so over plain http they are stored but
    # never sent back; requests authenticate with explicit Bearer headers.
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


class ApiHelper:
    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def register(
        self,
        username: str,
        *,
        email: Optional[str] = None,
        password: str = PASSWORD,
        full_name: Optional[str] = None,
    ) -> dict[str, Any]:
        resp = await self.client.post(
            "/api/v1/users/register",
            data={
                "fullName": full_name or f"{username.title()} Tester",
                "email": email or f"{username}@mail.com",
                "username": username,
                "password": password,
            },
            files={"avatar": image_file()},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    async def login(self, username: str, password: str = PASSWORD) -> dict[str, Any]:
        resp = await self.client.post(
            "/api/v1/users/login", json={"username": username, "password": password}
        )
        assert resp.status_code == 200, resp.text
        self.client.cookies.clear()
        return resp.json()["data"]

    async def signup(self, username: str) -> tuple[dict[str, Any], dict[str, str]]:
        user = await self.register(username)
        tokens = await self.login(username)
        return user, {"Authorization": f"Bearer {tokens['accessToken']}"}

    async def publish(
        self,
        headers: dict[str, str],
        title: str = "First video",
        description: str = "A short clip",
    ) -> dict[str, Any]:
        resp = await self.client.post(
            "/api/v1/videos",
            data={"title": title, "description": description},
            files={"videoFile": video_file(), "thumbnail": image_file("thumb.png")},
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]


@pytest.fixture
def api(client: AsyncClient) -> ApiHelper:
    return ApiHelper(client)
