from inl_qt.services.status_service import StatusService
from inl_qt.services.dialog_service import DialogService
from inl_qt.services.worker import run_in_worker, WorkerHandle

__all__ = ["StatusService", "DialogService", "run_in_worker", "WorkerHandle"]
