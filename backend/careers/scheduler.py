# backend/careers/scheduler.py
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI

from careers.core.config import settings
from careers.services.ingest import run_ingest

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(timezone="UTC")


def _ingest_job() -> dict:
    """
    Periodic re-ingestion of INGEST_SOURCE.
    Outlooks and sections already stored are counted as duplicates, not re-written.
    """
    try:
        report = run_ingest(settings.INGEST_SOURCE)
    except Exception:
        logger.exception("[scheduler] ingest failed, will retry next interval")
        return {"ok": False}
    return {
        "ok": True,
        "written": {k: v.written for k, v in report.entities.items()},
        "errors": len(report.errors),
    }


def init_scheduler(app: FastAPI) -> None:
    """Attach scheduler start/stop to FastAPI lifecycle."""
    if not settings.INGEST_SOURCE:
        logger.info("[scheduler] INGEST_SOURCE not set, scheduled ingest disabled")
        return

    @app.on_event("startup")
    def _start_scheduler():
        # coalesce to run once if missed, and avoid overlap
        scheduler.add_job(
            _ingest_job,
            "interval",
            minutes=max(1, settings.INGEST_INTERVAL_MIN),
            id="ingest",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if settings.INGEST_ON_START:
            scheduler.add_job(_ingest_job, id="ingest_on_start", replace_existing=True)
        scheduler.start()
        logger.info("[scheduler] ingest every %d min from %s", settings.INGEST_INTERVAL_MIN, settings.INGEST_SOURCE)

    @app.on_event("shutdown")
    def _stop_scheduler():
        if scheduler.running:
            scheduler.shutdown(wait=False)
