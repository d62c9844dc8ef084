from .exporter import CSV_HEADER, EXPORT_FILE_NAME, SalesExporter
from .reader import DatabaseSalesReader, SalesHistoryReader, SalesObservation

__all__ = [
    "CSV_HEADER",
    "EXPORT_FILE_NAME",
    "SalesExporter",
    "DatabaseSalesReader",
    "SalesHistoryReader",
    "SalesObservation",
]
