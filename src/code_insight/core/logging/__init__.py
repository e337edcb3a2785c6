from .logger import (
    clear_task_id,
    get_logger,
    get_task_id,
    log_stage,
    set_task_id,
    setup_logging,
)

__all__ = [
    "clear_task_id",
    "get_logger",
    "get_task_id",
    "log_stage",
    "set_task_id",
    "setup_logging",
]
