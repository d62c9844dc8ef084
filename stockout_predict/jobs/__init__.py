from .scheduler import create_scheduler, job_export_and_train

__all__ = ["create_scheduler", "job_export_and_train"]
