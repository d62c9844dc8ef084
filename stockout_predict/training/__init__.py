from .orchestrator import (
    ExportTrainPipeline,
    PipelineResult,
    SkuTrainingResult,
    TrainingOrchestrator,
    TrainingReport,
    find_tuned_parameters,
)

__all__ = [
    "ExportTrainPipeline",
    "PipelineResult",
    "SkuTrainingResult",
    "TrainingOrchestrator",
    "TrainingReport",
    "find_tuned_parameters",
]
