"""HTTP client for the external prediction/training service."""

import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx

from stockout_predict.config import settings
from stockout_predict.errors import TransportError

logger = logging.getLogger(__name__)


class ForecastApiClient:
    """
    Thin async wrapper over the prediction service endpoints.

    Every call carries its own timeout. Network errors, timeouts and
    non-2xx responses are raised as TransportError after being logged.
    """

    def __init__(
        self,
        base_url: str | None = None,
        upload_timeout: float | None = None,
        train_timeout: float | None = None,
        predict_timeout: float | None = None,
        accuracy_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.upload_timeout = upload_timeout or settings.upload_timeout
        self.train_timeout = train_timeout or settings.train_timeout
        self.predict_timeout = predict_timeout or settings.predict_timeout
        self.accuracy_timeout = accuracy_timeout or settings.accuracy_timeout
        self.transport = transport

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def upload_data(self, file_path: Path) -> str:
        """
        Upload the sales history CSV as multipart field ``file``.

        Returns:
            Raw response body
        """
        url = self.url_for("upload-data")
        file_path = Path(file_path)
        if not file_path.is_file():
            raise TransportError(f"File does not exist or is not readable: {file_path}", url)

        with open(file_path, "rb") as f:
            files = {"file": (file_path.name, f, "text/csv")}
            response = await self._request(
                "POST", url, timeout=self.upload_timeout, files=files
            )
        return response.text

    async def train(self, sku: str, parameters: dict[str, Any] | None = None) -> dict:
        """
        Train the model for a SKU.

        Args:
            sku: Product SKU
            parameters: Locked hyperparameters, or None to let the trainer self-tune

        Returns:
            Decoded JSON response
        """
        url = self.url_for(f"train/{quote(sku, safe='')}")
        kwargs: dict[str, Any] = {}
        if parameters:
            kwargs["json"] = parameters
        response = await self._request(
            "POST", url, timeout=self.train_timeout, payload=parameters, **kwargs
        )
        return self._decode_json(response, url)

    async def predict(self, sku: str, current_stock: int) -> dict:
        """Get the stock-out forecast for a SKU at its current stock level."""
        url = self.url_for(f"predict/{quote(sku, safe='')}")
        response = await self._request(
            "GET",
            url,
            timeout=self.predict_timeout,
            params={"current_stock": current_stock},
        )
        return self._decode_json(response, url)

    async def validate_period_accuracy(self, sku: str, parameters: dict[str, Any]) -> dict:
        """Compare predicted and actual sales over the configured test period."""
        url = self.url_for(f"validate-period-accuracy/{quote(sku, safe='')}")
        response = await self._request(
            "POST",
            url,
            timeout=self.accuracy_timeout,
            payload=parameters,
            json=parameters,
        )
        return self._decode_json(response, url)

    async def _request(
        self,
        method: str,
        url: str,
        timeout: float,
        payload: dict | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e!r} payload={payload}")
            raise TransportError(f"Request failed: {e}", url, payload=payload) from e

        if not response.is_success:
            logger.error(
                f"{method} {url} returned {response.status_code}: "
                f"{response.text[:200]} payload={payload}"
            )
            raise TransportError(
                f"API returned status code {response.status_code}",
                url,
                status_code=response.status_code,
                body=response.text,
                payload=payload,
            )

        return response

    @staticmethod
    def _decode_json(response: httpx.Response, url: str) -> dict:
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                "Response is not valid JSON",
                url,
                status_code=response.status_code,
                body=response.text,
            ) from e
        if not isinstance(data, dict):
            raise TransportError(
                "Response is not a JSON object",
                url,
                status_code=response.status_code,
                body=response.text,
            )
        return data
