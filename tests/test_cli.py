"""Tests for the command line entry point and the scheduler."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from stockout_predict.jobs import create_scheduler
from stockout_predict.main import build_parser, run_export
from stockout_predict.training import PipelineResult, SkuTrainingResult, TrainingReport


class TestScheduler:
    """Tests for the job scheduler."""

    def test_export_and_train_job(self):
        scheduler = create_scheduler()

        job = scheduler.get_job("export_and_train")

        assert job is not None
        assert job.max_instances == 1
        assert "hour='2'" in str(job.trigger)


class TestRunExport:
    """Tests for the export command."""

    def test_parser_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    @pytest.mark.asyncio
    async def test_success(self, capsys):
        report = TrainingReport(results=[SkuTrainingResult("SKU-A", True, True, "Trained")])
        result = PipelineResult(Path("/tmp/sales_history.csv"), True, "done", training=report)

        with patch("stockout_predict.main.job_export_and_train", AsyncMock(return_value=result)):
            code = await run_export()

        assert code == 0
        out = capsys.readouterr().out
        assert "File saved to: /tmp/sales_history.csv" in out
        assert "1 succeeded, 0 failed" in out

    @pytest.mark.asyncio
    async def test_upload_failure(self):
        result = PipelineResult(Path("/tmp/sales_history.csv"), False, "Upload failed")

        with patch("stockout_predict.main.job_export_and_train", AsyncMock(return_value=result)):
            assert await run_export() == 1

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        with patch("stockout_predict.main.job_export_and_train", AsyncMock(side_effect=OSError("disk full"))):
            assert await run_export() == 1
