"""HTTP API for operators and the order-placement hook."""

from typing import Literal, Optional, List

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from stockout_predict import __version__
from stockout_predict.alerts import OrderLine, PlacedOrder
from stockout_predict.parameters.fields import store_bool
from stockout_predict.services import Services, get_services

app = FastAPI(
    title="Stockout Predict API",
    description="Per-SKU forecasting parameters, accuracy checks and order hooks",
    version=__version__,
)

BOOLEAN_FIELDS = ("yearly_seasonality", "weekly_seasonality", "daily_seasonality")


# Request models
class ParameterUpdateRequest(BaseModel):
    alert_threshold: Optional[int] = Field(default=None, ge=0)
    changepoint_prior_scale: Optional[float] = None
    seasonality_prior_scale: Optional[float] = None
    holidays_prior_scale: Optional[float] = None
    seasonality_mode: Optional[Literal["additive", "multiplicative", ""]] = None
    yearly_seasonality: Optional[bool] = None
    weekly_seasonality: Optional[bool] = None
    daily_seasonality: Optional[bool] = None
    lock_params: Optional[Literal["", "params", "model"]] = None

    def to_blob_fields(self) -> dict:
        """Only the fields the caller sent, in stored form."""
        fields = self.model_dump(exclude_unset=True)
        for name in BOOLEAN_FIELDS:
            if name in fields:
                fields[name] = store_bool(fields[name])
        return {k: ("" if v is None else v) for k, v in fields.items()}


class OrderItemRequest(BaseModel):
    sku: str
    product_id: Optional[int] = None
    stock_qty: Optional[float] = None


class OrderPlacedRequest(BaseModel):
    order_id: int | str
    items: List[OrderItemRequest] = []


# Endpoints
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "stockout-predict", "version": __version__}


@app.get("/api/parameters")
async def list_parameters(services: Services = Depends(get_services)):
    rows = await services.store.list_all_parameters(force_refresh=True)
    return {"parameters": [row.raw for row in rows]}


@app.get("/api/parameters/{sku}")
async def get_parameters(sku: str, services: Services = Depends(get_services)):
    row = await services.store.get_parameters(sku)
    if row is None:
        raise HTTPException(status_code=404, detail=f"No parameters for SKU {sku}")
    return row.raw


@app.patch("/api/parameters/{sku}")
async def update_parameters(
    sku: str,
    request: ParameterUpdateRequest,
    services: Services = Depends(get_services),
):
    """Merge the sent fields into the SKU's row, creating it if needed."""
    if not await services.store.merge_parameters(sku, request.to_blob_fields()):
        raise HTTPException(status_code=500, detail="Could not save parameters")
    row = await services.store.get_parameters(sku)
    return row.raw if row else {"sku": sku}


@app.get("/api/accuracy/{sku}")
async def accuracy_chart(sku: str, services: Services = Depends(get_services)):
    return await services.accuracy.fetch_accuracy_chart(sku)


@app.post("/api/orders/placed", status_code=202)
async def order_placed(request: OrderPlacedRequest, services: Services = Depends(get_services)):
    """Order placement hook; forecasting problems never fail the request."""
    order = PlacedOrder(
        order_id=request.order_id,
        lines=[
            OrderLine(sku=item.sku, product_id=item.product_id, stock_qty=item.stock_qty)
            for item in request.items
        ],
    )
    outcomes = await services.gate.on_order_placed(order)
    return {
        "order_id": request.order_id,
        "lines": [
            {"sku": line.sku, "outcome": outcome.value}
            for line, outcome in zip(order.lines, outcomes)
        ],
    }


if __name__ == "__main__":
    import uvicorn
    from stockout_predict.config import settings

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
