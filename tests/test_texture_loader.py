"""
Tests for the session server texture loader, against a local aiohttp server.
"""

import asyncio
import json
import uuid
from types import SimpleNamespace

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from skinfetch.services.textures.errors import LoaderError
from skinfetch.services.textures.loader import TextureLoader
from skinfetch.services.textures.types import TextureProperty

PLAYER = uuid.UUID("069a79f4-44e9-4726-a5be-fca90e38aaf5")

TEXTURES = {
    "name": "textures",
    "value": "eyJ0aW1lc3RhbXAiOjE2MDAwMDAwMDB9",
    "signature": "c2lnbmF0dXJl",
}


@pytest_asyncio.fixture
async def session_server():
    """Serve canned profile responses keyed by undashed UUID."""
    state = SimpleNamespace(responses={}, requests=[], delay=0.0)

    async def profile(request):
        state.requests.append(request)
        if state.delay:
            await asyncio.sleep(state.delay)
        status, body = state.responses.get(request.match_info["profile_id"], (204, None))
        if body is None:
            return web.Response(status=status)
        return web.Response(status=status, text=body, content_type="application/json")

    app = web.Application()
    app.router.add_get("/session/minecraft/profile/{profile_id}", profile)
    server = test_utils.TestServer(app)
    await server.start_server()
    state.base_url = str(server.make_url("/session/minecraft/profile/"))
    try:
        yield state
    finally:
        await server.close()


def respond(server, status, payload):
    body = payload if isinstance(payload, str) or payload is None else json.dumps(payload)
    server.responses[PLAYER.hex] = (status, body)


class TestTextureLoader:
    """Test cases for TextureLoader."""

    @pytest.mark.asyncio
    async def test_returns_first_property(self, session_server):
        respond(
            session_server,
            200,
            {
                "id": PLAYER.hex,
                "name": "Notch",
                "properties": [TEXTURES, {"name": "other", "value": "x"}],
            },
        )
        loader = TextureLoader(base_url=session_server.base_url)

        texture = await loader.fetch(PLAYER)

        assert texture == TextureProperty.from_dict(TEXTURES)
        assert texture.signature == "c2lnbmF0dXJl"

    @pytest.mark.asyncio
    async def test_requests_undashed_signed_profile(self, session_server):
        respond(session_server, 200, {"properties": [TEXTURES]})
        loader = TextureLoader(base_url=session_server.base_url)

        await loader.fetch(PLAYER)

        request = session_server.requests[0]
        assert request.path.endswith("/" + PLAYER.hex)
        assert "-" not in request.match_info["profile_id"]
        assert request.query["unsigned"] == "false"

    @pytest.mark.asyncio
    async def test_shared_session_after_start(self, session_server):
        respond(session_server, 200, {"properties": [TEXTURES]})
        loader = TextureLoader(base_url=session_server.base_url)
        await loader.start()
        try:
            assert await loader.is_healthy()
            assert await loader(PLAYER) == TextureProperty.from_dict(TEXTURES)
        finally:
            await loader.stop()

        assert not await loader.is_healthy()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [204, 404, 429, 500])
    async def test_non_success_status(self, session_server, status):
        respond(session_server, status, None if status == 204 else "{}")
        loader = TextureLoader(base_url=session_server.base_url)

        with pytest.raises(LoaderError) as exc_info:
            await loader.fetch(PLAYER)

        assert exc_info.value.status == status
        assert exc_info.value.key == PLAYER

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"id": "abc", "name": "Notch"},
            {"properties": []},
            {"properties": "textures"},
            {"properties": [{"name": "textures"}]},
            [TEXTURES],
            "not json at all",
            "",
        ],
    )
    async def test_unusable_body(self, session_server, payload):
        respond(session_server, 200, payload)
        loader = TextureLoader(base_url=session_server.base_url)

        with pytest.raises(LoaderError) as exc_info:
            await loader.fetch(PLAYER)

        assert exc_info.value.status == 200

    @pytest.mark.asyncio
    async def test_timeout(self, session_server):
        respond(session_server, 200, {"properties": [TEXTURES]})
        session_server.delay = 1.0
        loader = TextureLoader(base_url=session_server.base_url, request_timeout=0.1)

        with pytest.raises(LoaderError) as exc_info:
            await loader.fetch(PLAYER)

        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        loader = TextureLoader(base_url="http://127.0.0.1:1/profile/")

        with pytest.raises(LoaderError):
            await loader.fetch(PLAYER)
