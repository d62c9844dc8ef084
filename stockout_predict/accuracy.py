"""Period-accuracy check: predicted vs actual sales as chart data."""

import logging
import math

from stockout_predict.client import ForecastApiClient
from stockout_predict.errors import TransportError
from stockout_predict.parameters import ParameterStore

logger = logging.getLogger(__name__)

PREDICTED_COLOR = "rgb(75, 192, 192)"
ACTUAL_COLOR = "rgb(255, 99, 132)"
AXIS_PADDING = 5


def build_chart_data(predicted: list[float], actual: list[float]) -> dict:
    """Line chart with one point per day and a padded, non-negative y range."""
    num_days = max(len(predicted), len(actual))
    values = list(predicted) + list(actual)

    chart = {
        "labels": [f"Day {i}" for i in range(1, num_days + 1)],
        "xAxisLabel": "Day",
        "yAxisLabel": "Quantity",
        "yAxisMin": max(0, math.floor(min(values)) - AXIS_PADDING),
        "yAxisMax": math.ceil(max(values)) + AXIS_PADDING,
        "yAxisFormat": "",
        "datasets": [],
    }
    if predicted:
        chart["datasets"].append({"label": "Predicted", "data": predicted, "color": PREDICTED_COLOR})
    if actual:
        chart["datasets"].append({"label": "Actual", "data": actual, "color": ACTUAL_COLOR})
    return chart


class AccuracyService:
    """Runs the accuracy check for a SKU with its stored parameters."""

    def __init__(self, store: ParameterStore, client: ForecastApiClient):
        self.store = store
        self.client = client

    async def fetch_accuracy_chart(self, sku: str) -> dict:
        if not sku:
            return {"success": False, "message": "SKU parameter is required"}

        params = await self.store.get_parameters(sku)
        body = params.accuracy_body() if params else {}

        try:
            response = await self.client.validate_period_accuracy(sku, body)
        except TransportError as e:
            if e.status_code is not None:
                message = f"API request failed with status: {e.status_code}"
            else:
                message = str(e)
            return {"success": False, "message": message}

        predicted = response.get("predicted") or []
        actual = response.get("actual") or []
        metrics = response.get("metrics")

        if not predicted and not actual:
            return {"success": False, "message": "No data found in API response"}

        result = {"success": True, "data": build_chart_data(predicted, actual)}
        if metrics is not None:
            result["metrics"] = metrics
        return result
