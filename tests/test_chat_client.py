import json

import httpx
import pytest

from client.chat_client import parse_args, run_client


@pytest.mark.asyncio
async def test_run_client_sends_text() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/assistant"
        assert json.loads(request.content) == {"message": "hi"}
        return httpx.Response(200, json={"response": "hello"})

    envelope = await run_client(
        "http://testserver", "hi", None, 5.0, transport=httpx.MockTransport(handler)
    )

    assert envelope == {"response": "hello"}


@pytest.mark.asyncio
async def test_run_client_uploads_image(tmp_path) -> None:
    image = tmp_path / "cat.png"
    image.write_bytes(b"\x89PNG")

    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/image"
        assert b'name="image"; filename="cat.png"' in request.content
        assert b"Content-Type: image/png" in request.content
        return httpx.Response(200, json={"description": "a cat"})

    envelope = await run_client(
        "http://testserver", None, image, 5.0, transport=httpx.MockTransport(handler)
    )

    assert envelope == {"description": "a cat"}


@pytest.mark.asyncio
async def test_run_client_exits_on_error() -> None:
    async def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": "quota"})

    with pytest.raises(SystemExit):
        await run_client(
            "http://testserver", "hi", None, 5.0, transport=httpx.MockTransport(handler)
        )


def test_parse_args_requires_one_input() -> None:
    with pytest.raises(SystemExit):
        parse_args([])

    args = parse_args(["--text", "hello"])
    assert args.text == "hello"
    assert args.image is None
