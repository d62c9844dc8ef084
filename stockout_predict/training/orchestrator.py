"""Per-SKU training orchestration and hyperparameter write-back."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from stockout_predict.client import ForecastApiClient
from stockout_predict.errors import TransportError
from stockout_predict.export import SalesExporter
from stockout_predict.parameters import (
    LockMode,
    ParameterStore,
    SkuParameterRow,
    extract_tuned_parameters,
)

logger = logging.getLogger(__name__)

# Checked in order; the first object present wins.
TUNED_PARAMETER_KEYS = ("best_parameters", "parameters_used")


@dataclass
class SkuTrainingResult:
    """Outcome of training one SKU."""
    sku: str
    success: bool
    self_tuned: bool
    message: str
    written_back: dict = field(default_factory=dict)
    write_back_failed: bool = False


@dataclass
class TrainingReport:
    """Aggregate outcome of a training pass."""
    results: list[SkuTrainingResult] = field(default_factory=list)
    write_back_failures: int = 0

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def message(self) -> str:
        return "\n".join(f"{r.sku}: {r.message}" for r in self.results)

    def to_dict(self) -> dict:
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "write_back_failures": self.write_back_failures,
            "message": self.message,
        }


@dataclass
class PipelineResult:
    """Outcome of export -> upload -> train."""
    export_path: Path | None
    uploaded: bool
    message: str
    training: TrainingReport | None = None

    @property
    def success(self) -> bool:
        return self.uploaded and self.training is not None


def find_tuned_parameters(response: dict) -> dict | None:
    """Locate the hyperparameter object in a training response."""
    containers = [response.get("training_info"), response]
    for key in TUNED_PARAMETER_KEYS:
        for container in containers:
            if isinstance(container, dict) and isinstance(container.get(key), dict):
                return container[key]
    return None


class TrainingOrchestrator:
    """
    Trains every tracked SKU against the prediction service.

    Rows locked with ``params`` send their hyperparameters; all other rows let
    the trainer self-tune, and tuned values from the response are merged back
    into the parameter store. One SKU failing never aborts the pass.
    """

    def __init__(self, store: ParameterStore, client: ForecastApiClient):
        self.store = store
        self.client = client

    async def train_all(self) -> TrainingReport:
        """Run one training pass over the freshly loaded parameter collection."""
        report = TrainingReport()
        rows = await self.store.list_all_parameters(force_refresh=True)

        for row in rows:
            if not row.sku:
                continue
            result = await self.train_sku(row)
            if result.write_back_failed:
                report.write_back_failures += 1
            report.results.append(result)

        logger.info(
            f"Training finished: {report.succeeded} succeeded, {report.failed} failed"
        )
        return report

    async def train_sku(self, row: SkuParameterRow) -> SkuTrainingResult:
        """Train a single SKU and write back tuned values when self-tuning."""
        body = None
        if row.lock_params is LockMode.PARAMS:
            body = row.training_body() or None
            if body is None:
                logger.info(f"No locked parameters for {row.sku}, falling back to self-tune")

        self_tuned = body is None and row.lock_params is not LockMode.MODEL

        try:
            response = await self.client.train(row.sku, body)
        except TransportError as e:
            logger.error(f"Training failed for {row.sku}: {e}")
            return SkuTrainingResult(row.sku, False, self_tuned, f"Training failed: {e}")

        if not self_tuned:
            return SkuTrainingResult(row.sku, True, False, "Trained with locked settings")

        tuned = find_tuned_parameters(response)
        if not tuned:
            return SkuTrainingResult(row.sku, True, True, "Trained, no parameters returned")

        extracted = extract_tuned_parameters(tuned)
        if not extracted:
            return SkuTrainingResult(row.sku, True, True, "Trained, no known parameters returned")

        if not await self.store.merge_parameters(row.sku, extracted):
            logger.error(f"Could not save tuned parameters for {row.sku}")
            return SkuTrainingResult(
                row.sku, True, True, "Trained, saving tuned parameters failed", write_back_failed=True
            )

        logger.info(f"Saved tuned parameters for {row.sku}: {extracted}")
        return SkuTrainingResult(
            row.sku, True, True, "Trained, tuned parameters saved", written_back=extracted
        )


class ExportTrainPipeline:
    """Export sales history, upload it, then train every SKU."""

    def __init__(
        self,
        exporter: SalesExporter,
        orchestrator: TrainingOrchestrator,
        client: ForecastApiClient,
    ):
        self.exporter = exporter
        self.orchestrator = orchestrator
        self.client = client

    async def run(self) -> PipelineResult:
        path = await self.exporter.export_sales_history()

        try:
            await self.client.upload_data(path)
        except TransportError as e:
            logger.error(f"Upload of {path} failed: {e}")
            return PipelineResult(path, False, f"Upload failed: {e}")

        report = await self.orchestrator.train_all()
        return PipelineResult(
            path,
            True,
            f"Uploaded {path.name}; trained {report.succeeded} SKU(s), {report.failed} failed",
            training=report,
        )
