"""Client for the third-party QR image generation endpoint."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class QrImageClient(Protocol):
    """Interface for rendering QR codes as images."""

    async def render_png(self, data: str, size: int) -> bytes:
        """Return PNG bytes of a QR code encoding ``data``."""


@dataclass
class HttpxQrImageClient:
    """QR image client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxQrImageClient":
        """Create a QR image client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    async def render_png(self, data: str, size: int) -> bytes:
        """Fetch a QR code image for ``data``."""
        response = await self.http_client.get(
            self.base_url,
            params={"data": data, "size": f"{size}x{size}", "format": "png"},
            timeout=10,
        )
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
