"""Stockout Predict - command line entry point."""

import argparse
import asyncio
import logging
import sys

from stockout_predict.config import settings
from stockout_predict.db.database import init_db
from stockout_predict.jobs import create_scheduler, job_export_and_train

logger = logging.getLogger(__name__)


async def run_export() -> int:
    """Export sales history, upload it and train every SKU."""
    print("Starting sales data export...")
    try:
        result = await job_export_and_train()
    except Exception as e:
        logger.exception(f"Export command error: {e}")
        print(f"An error occurred: {e}", file=sys.stderr)
        return 1

    if result.export_path:
        print(f"File saved to: {result.export_path}")
    if not result.uploaded:
        print(f"Upload failed: {result.message}", file=sys.stderr)
        return 1

    report = result.training
    print(f"Training: {report.succeeded} succeeded, {report.failed} failed")
    if report.message:
        print(report.message)
    return 0


async def run_scheduler():
    """Run the background scheduler until interrupted."""
    await init_db()
    scheduler = create_scheduler()
    scheduler.start()
    print("Scheduler started", file=sys.stderr)
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown()


def run_api():
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("stockout_predict.api:app", host=settings.api_host, port=settings.api_port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stockout-predict",
        description="Per-SKU demand forecasting and low-stock alerting.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser(
        "export",
        help="Export sales history (SKU, Qty, Date), upload it to the API and train.",
    )
    subparsers.add_parser("schedule", help="Run the daily export and training scheduler.")
    subparsers.add_parser("serve", help="Run the HTTP API.")
    subparsers.add_parser("init-db", help="Create database tables.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "export":
            return asyncio.run(run_export())
        if args.command == "schedule":
            asyncio.run(run_scheduler())
        elif args.command == "serve":
            run_api()
        elif args.command == "init-db":
            asyncio.run(init_db())
            print("Database initialized")
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
