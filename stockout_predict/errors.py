"""Error taxonomy for the forecasting workflow."""


class StockoutPredictError(Exception):
    """Base class for all errors raised by this package."""


class TransportError(StockoutPredictError):
    """An external call failed: network error, timeout or non-2xx status."""

    def __init__(
        self,
        message: str,
        url: str,
        status_code: int | None = None,
        body: str | None = None,
        payload: dict | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body
        self.payload = payload

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            return f"{base} (url={self.url}, status={self.status_code})"
        return f"{base} (url={self.url})"


class ConfigError(StockoutPredictError):
    """The persisted parameter blob is missing or cannot be parsed."""


class PersistenceError(StockoutPredictError):
    """Writing to the configuration backend failed."""
