"""Thin async HTTP client for the storefront API, used by the checkout wizard."""
from typing import Optional

import httpx

from services.cart_service.owner import OwnerKey
from shared.config.settings import STOREFRONT_URL


class StorefrontAPIError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class StorefrontClient:
    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: str = STOREFRONT_URL):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=10.0)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs):
        try:
            resp = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise StorefrontAPIError(0, f"Could not reach the storefront API: {e}") from e
        if resp.is_error:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise StorefrontAPIError(resp.status_code, str(detail))
        return resp.json()

    async def get_cart(self, owner: OwnerKey) -> list:
        return await self._request("GET", "/api/cart", params=owner.as_params())

    async def add_to_cart(self, owner: OwnerKey, product_id: int, quantity: int = 1) -> dict:
        payload = {"productId": product_id, "quantity": quantity, **owner.as_params()}
        return await self._request("POST", "/api/cart", json=payload)

    async def clear_cart(self, owner: OwnerKey) -> dict:
        return await self._request("DELETE", "/api/cart", params=owner.as_params())

    async def create_order(self, order: dict, items: list) -> dict:
        return await self._request("POST", "/api/orders", json={"order": order, "items": items})

    async def get_order(self, order_id: int) -> dict:
        return await self._request("GET", f"/api/orders/{order_id}")
