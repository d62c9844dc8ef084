"""Stockout Predict - per-SKU demand forecasting and low-stock alerting."""

__version__ = "0.1.0"
