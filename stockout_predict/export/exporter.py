"""Sales history CSV export."""

import csv
import fcntl
import logging
import math
from datetime import date, datetime
from pathlib import Path

from stockout_predict.config import settings
from stockout_predict.parameters import ParameterStore
from .reader import SalesHistoryReader, SalesObservation

logger = logging.getLogger(__name__)

EXPORT_FILE_NAME = "sales_history.csv"
CSV_HEADER = ["sku", "qty_ordered", "created_at"]


def format_created_at(value: datetime | str) -> str:
    """Source timestamp as stored, in ``Y-m-d H:i:s`` form for datetimes."""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


class SalesExporter:
    """
    Streams order lines for tracked SKUs into a CSV artifact.

    Only days strictly before today are exported so a still-accumulating day
    never reaches the trainer. Reads are paged to bound memory and the output
    file is exclusively locked while it is written.
    """

    def __init__(
        self,
        store: ParameterStore,
        reader: SalesHistoryReader,
        export_dir: Path | None = None,
        batch_size: int | None = None,
    ):
        self.store = store
        self.reader = reader
        self.export_dir = Path(export_dir or settings.export_dir)
        self.batch_size = batch_size or settings.export_batch_size

    @property
    def export_path(self) -> Path:
        return (self.export_dir / EXPORT_FILE_NAME).resolve()

    async def export_sales_history(self, today: date | None = None) -> Path:
        """
        Fetch sales history and write it to the CSV artifact.

        Returns:
            Absolute path to the generated file
        """
        today = today or date.today()
        path = self.export_path
        path.parent.mkdir(parents=True, exist_ok=True)

        skus = await self.store.list_skus()
        written = 0

        with open(path, "w", newline="", encoding="utf-8") as stream:
            fcntl.flock(stream.fileno(), fcntl.LOCK_EX)
            try:
                writer = csv.writer(stream)
                writer.writerow(CSV_HEADER)

                if skus:
                    total = await self.reader.count(skus, today)
                    last_page = max(1, math.ceil(total / self.batch_size))
                    for page in range(1, last_page + 1):
                        batch = await self.reader.fetch_page(skus, today, page, self.batch_size)
                        written += self._write_batch(writer, batch)
                else:
                    logger.info("No tracked SKUs, writing header-only export")

                stream.flush()
            finally:
                fcntl.flock(stream.fileno(), fcntl.LOCK_UN)

        logger.info(f"Exported {written} sales rows for {len(skus)} SKUs to {path}")
        return path

    @staticmethod
    def _write_batch(writer, batch: list[SalesObservation]) -> int:
        written = 0
        for item in batch:
            if not item.sku:
                continue
            writer.writerow([
                str(item.sku),
                float(item.qty_ordered),
                format_created_at(item.created_at),
            ])
            written += 1
        return written
