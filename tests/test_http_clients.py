"""Tests for HTTP-based adapters."""

import asyncio

import httpx
import pytest

from scavenger_hunt.adapters.qr_image_client import HttpxQrImageClient


def test_qr_image_client_requests_png() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"png-bytes")

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxQrImageClient(
        base_url="https://qr.test/v1/create-qr-code/", http_client=async_client
    )

    data = asyncio.run(client.render_png("https://hunt.example.com/hunt/qr/A", 300))

    assert data == b"png-bytes"
    assert seen[0].url.params["data"] == "https://hunt.example.com/hunt/qr/A"
    assert seen[0].url.params["size"] == "300x300"


def test_qr_image_client_raises_on_error_status() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    client = HttpxQrImageClient(
        base_url="https://qr.test/", http_client=httpx.AsyncClient(transport=transport)
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.render_png("payload", 100))
