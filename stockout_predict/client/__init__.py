from .api_client import ForecastApiClient

__all__ = ["ForecastApiClient"]
