"""Wiring of the workflow components over the database collaborators."""

from dataclasses import dataclass
from functools import lru_cache

from stockout_predict.accuracy import AccuracyService
from stockout_predict.alerts import (
    DatabaseCooldownStore,
    DatabaseNotificationSink,
    DatabaseStockLookup,
    PredictionGate,
)
from stockout_predict.client import ForecastApiClient
from stockout_predict.db.database import async_session_maker
from stockout_predict.export import DatabaseSalesReader, SalesExporter
from stockout_predict.parameters import DatabaseConfigBackend, ParameterStore
from stockout_predict.training import ExportTrainPipeline, TrainingOrchestrator


@dataclass
class Services:
    """One explicit store handle shared by every component."""
    store: ParameterStore
    client: ForecastApiClient
    exporter: SalesExporter
    orchestrator: TrainingOrchestrator
    pipeline: ExportTrainPipeline
    gate: PredictionGate
    accuracy: AccuracyService


def build_services(session_maker=async_session_maker, client: ForecastApiClient | None = None) -> Services:
    store = ParameterStore(DatabaseConfigBackend(session_maker))
    client = client or ForecastApiClient()
    exporter = SalesExporter(store, DatabaseSalesReader(session_maker))
    orchestrator = TrainingOrchestrator(store, client)
    return Services(
        store=store,
        client=client,
        exporter=exporter,
        orchestrator=orchestrator,
        pipeline=ExportTrainPipeline(exporter, orchestrator, client),
        gate=PredictionGate(
            store,
            client,
            DatabaseNotificationSink(session_maker),
            DatabaseCooldownStore(session_maker),
            DatabaseStockLookup(session_maker),
        ),
        accuracy=AccuracyService(store, client),
    )


@lru_cache
def get_services() -> Services:
    """Process-wide services instance."""
    return build_services()
