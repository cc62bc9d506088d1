from .demo import (  # noqa: F401
    AuditTrail,
    archive_finished_tasks,
    bootstrap_connection,
    run_demo,
    seed_sample_data,
)

__all__ = [
    "AuditTrail",
    "archive_finished_tasks",
    "bootstrap_connection",
    "run_demo",
    "seed_sample_data",
]
