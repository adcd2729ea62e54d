"""
Module de jobs planifies pour merchant-notify.

Ce module contient les taches de fond:
- HeartbeatJob: message generique periodique sur Discord

UTILISATION:
    from merchant_notify.jobs.scheduler import create_scheduler, start_scheduler, stop_scheduler
"""

from merchant_notify.jobs.heartbeat_job import HeartbeatJob
from merchant_notify.jobs.scheduler import create_scheduler, start_scheduler, stop_scheduler

__all__ = [
    "HeartbeatJob",
    "create_scheduler",
    "start_scheduler",
    "stop_scheduler",
]
