"""Razorpay orders API client."""

from dataclasses import dataclass

import httpx

from nutriscan.services.payments import PaymentClient


@dataclass
class HttpxRazorpayClient(PaymentClient):
    """HTTPX-backed Razorpay client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, key_id: str, key_secret: str, base_url: str
    ) -> "HttpxRazorpayClient":
        """Create a Razorpay client with basic auth on a managed session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(auth=(key_id, key_secret)),
        )

    async def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict[str, str],
    ) -> dict[str, object]:
        """Create an order; amount is in the currency's minor unit."""
        response = await self.http_client.post(
            f"{self.base_url}/orders",
            json={
                "amount": amount_minor,
                "currency": currency,
                "receipt": receipt,
                "notes": notes,
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def fetch_order(self, order_id: str) -> dict[str, object]:
        """Fetch an order by id."""
        response = await self.http_client.get(
            f"{self.base_url}/orders/{order_id}", timeout=15
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
