"""Command line client for manual testing against a running server."""

from __future__ import annotations

import argparse
import asyncio
import logging
import mimetypes
import pathlib
import time
from typing import Any

import httpx

DEFAULT_URL = "http://127.0.0.1:8000"

logger = logging.getLogger("chat_client")


async def send_message(client: httpx.AsyncClient, text: str) -> httpx.Response:
    """Post a text message to the assistant route."""

    return await client.post("/api/assistant", json={"message": text})


async def send_image(client: httpx.AsyncClient, path: pathlib.Path) -> httpx.Response:
    """Upload an image file to the captioning route."""

    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    files = {"image": (path.name, path.read_bytes(), content_type)}
    return await client.post("/api/image", files=files)


async def run_client(
    url: str,
    text: str | None,
    image: pathlib.Path | None,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Send one request and return the decoded JSON envelope.

    Raises SystemExit(1) when the server answers with a non-2xx status.
    """

    start = time.perf_counter()

    async with httpx.AsyncClient(base_url=url, timeout=timeout, transport=transport) as client:
        if image is not None:
            response = await send_image(client, image)
            logger.info("Uploaded %s (%d bytes)", image.name, image.stat().st_size)
        else:
            response = await send_message(client, text or "")
            logger.info("Sent text payload (%d chars)", len(text or ""))

    elapsed = time.perf_counter() - start
    envelope = response.json()

    if response.is_error:
        logger.error("Request failed with %d: %s", response.status_code, envelope.get("error"))
        raise SystemExit(1)

    logger.info("Received %s in %.2fs", envelope, elapsed)
    return envelope


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Test client for the multimodal chat proxy.")
    parser.add_argument("--url", default=DEFAULT_URL, help="Server base URL (default: %(default)s)")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--text", help="Message to send to the assistant.")
    group.add_argument("--image", type=pathlib.Path, help="Image file to caption.")
    parser.add_argument(
        "--timeout", type=float, default=60.0, help="Seconds to wait for the server to answer."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        asyncio.run(run_client(args.url, args.text, args.image, args.timeout))
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        pass


if __name__ == "__main__":  # pragma: no cover
    main()
