"""
Scheduler pour les jobs de fond.

Utilise APScheduler pour planifier les taches periodiques.

ARCHITECTURE:
- Scheduler BackgroundScheduler (thread-based)
- Demarre au startup de l'application
- S'arrete proprement au shutdown

JOBS PLANIFIES:
- Heartbeat Discord: toutes les DISCORD_HEARTBEAT_INTERVAL_MINUTES (si > 0)

UTILISATION:
    from merchant_notify.jobs.scheduler import create_scheduler, start_scheduler, stop_scheduler

    scheduler = create_scheduler()
    start_scheduler(scheduler)
    ...
    stop_scheduler(scheduler)
"""

import logging
import asyncio
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobEvent

from merchant_notify.config.settings import Settings, get_settings
from merchant_notify.jobs.heartbeat_job import create_heartbeat_job

logger = logging.getLogger(__name__)

HEARTBEAT_JOB_ID = "discord_heartbeat"

# Instance globale du scheduler
_scheduler: Optional[BackgroundScheduler] = None


def create_scheduler(settings: Optional[Settings] = None) -> BackgroundScheduler:
    """
    Cree et configure le scheduler.

    Args:
        settings: Configuration (defaut: get_settings())

    Returns:
        BackgroundScheduler configure avec les jobs
    """
    global _scheduler

    if _scheduler is not None:
        logger.warning("Scheduler already exists, returning existing instance")
        return _scheduler

    settings = settings or get_settings()
    logger.info("Creating scheduler...")

    scheduler = BackgroundScheduler(
        job_defaults={
            "coalesce": True,  # Fusionner les executions manquees
            "max_instances": 1,
            "misfire_grace_time": 60 * 5,
        }
    )

    scheduler.add_listener(_on_job_executed, EVENT_JOB_EXECUTED)
    scheduler.add_listener(_on_job_error, EVENT_JOB_ERROR)

    interval = settings.DISCORD_HEARTBEAT_INTERVAL_MINUTES
    if interval > 0:
        scheduler.add_job(
            _run_heartbeat_job,
            trigger=IntervalTrigger(minutes=interval),
            args=[settings],
            id=HEARTBEAT_JOB_ID,
            name="Discord Heartbeat Job",
            replace_existing=True,
        )
        logger.info(f"Scheduler created with jobs: {HEARTBEAT_JOB_ID} (every {interval}min)")
    else:
        logger.info("Scheduler created without heartbeat (DISCORD_HEARTBEAT_INTERVAL_MINUTES=0)")

    _scheduler = scheduler
    return scheduler


def start_scheduler(scheduler: Optional[BackgroundScheduler] = None) -> None:
    """
    Demarre le scheduler.

    Args:
        scheduler: Scheduler a demarrer (defaut: instance globale)
    """
    sched = scheduler or _scheduler
    if sched is None:
        logger.warning("No scheduler to start")
        return

    if sched.running:
        logger.warning("Scheduler already running")
        return

    sched.start()
    logger.info("Scheduler started")

    for job in sched.get_jobs():
        logger.info(f"  - {job.id}: {job.name} (next run: {job.next_run_time})")


def stop_scheduler(scheduler: Optional[BackgroundScheduler] = None) -> None:
    """
    Arrete le scheduler proprement et oublie l'instance globale.

    Args:
        scheduler: Scheduler a arreter (defaut: instance globale)
    """
    global _scheduler

    sched = scheduler or _scheduler
    if sched is None:
        logger.warning("No scheduler to stop")
        return

    if sched is _scheduler:
        _scheduler = None

    if not sched.running:
        logger.warning("Scheduler not running")
        return

    sched.shutdown(wait=True)
    logger.info("Scheduler stopped")


def get_scheduler() -> Optional[BackgroundScheduler]:
    """Retourne l'instance globale du scheduler (None si pas cree)."""
    return _scheduler


def run_job_now(job_id: str) -> bool:
    """
    Execute un job immediatement.

    Args:
        job_id: ID du job a executer

    Returns:
        True si le job a ete declenche, False sinon
    """
    if _scheduler is None or not _scheduler.running:
        logger.warning("Scheduler not running, cannot trigger job")
        return False

    job = _scheduler.get_job(job_id)
    if job is None:
        logger.warning(f"Job not found: {job_id}")
        return False

    _scheduler.modify_job(job_id, next_run_time=datetime.now(_scheduler.timezone))
    logger.info(f"Triggered job: {job_id}")
    return True


# =============================================================================
# PRIVATE FUNCTIONS
# =============================================================================

def _run_heartbeat_job(settings: Optional[Settings] = None) -> None:
    """
    Wrapper synchrone pour executer le job async.

    APScheduler ne supporte pas nativement les coroutines: le job
    tourne dans un thread du pool, sans boucle d'evenements.

    Args:
        settings: Configuration du scheduler, transmise au job
    """
    logger.debug("Running heartbeat job...")

    job = create_heartbeat_job(settings)

    try:
        stats = asyncio.run(job.run())
        logger.info(f"Heartbeat complete: {stats}")
    except Exception as e:
        logger.exception(f"Heartbeat job failed: {e}")


def _on_job_executed(event: JobEvent) -> None:
    """Handler appele quand un job s'execute avec succes."""
    logger.debug(f"Job executed successfully: {event.job_id}")


def _on_job_error(event: JobEvent) -> None:
    """Handler appele quand un job echoue."""
    logger.error(f"Job failed: {event.job_id} - {event.exception}")
