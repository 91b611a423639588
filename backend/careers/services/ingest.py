from __future__ import annotations

import json
import logging
import time
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar, Union

import requests
from dateutil import parser as dateparse
from requests.adapters import HTTPAdapter
from sqlalchemy.orm import Session, sessionmaker
from urllib3.util.retry import Retry

from careers.core import errors
from careers.core.config import settings
from careers.crud.economic_regions import upsert_economic_region
from careers.crud.outlooks import record_outlook
from careers.crud.programs import parse_credential, upsert_program, upsert_program_area
from careers.crud.unit_groups import add_section, upsert_unit_group
from careers.db.session import session_scope
from careers.schemas.ingest import EntityReport, IngestBundle, IngestReport

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_HEADERS = {
    "User-Agent": "careers-outlook-ingest/1.0",
    "Accept": "application/json",
}

# Reference data first so outlooks and programs can point at it
ENTITY_ORDER = ("unit_groups", "economic_regions", "sections", "program_areas", "programs", "outlooks")

# Re-sending these is expected and not a failure
_DUPLICATE_OK = {"sections", "outlooks"}


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------
def _http() -> requests.Session:
    s = requests.Session()
    retry = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset(["GET"]),
    )
    s.mount("http://", HTTPAdapter(max_retries=retry))
    s.mount("https://", HTTPAdapter(max_retries=retry))
    s.headers.update(DEFAULT_HEADERS)
    return s


def load_bundle(source: str) -> IngestBundle:
    """Read a bundle from an http(s) URL or a local JSON file."""
    if source.startswith(("http://", "https://")):
        with _http() as s:
            r = s.get(source, timeout=(settings.INGEST_CONNECT_TIMEOUT, settings.INGEST_READ_TIMEOUT))
            r.raise_for_status()
            data = r.json()
    else:
        with open(Path(source), "r", encoding="utf-8") as f:
            data = json.load(f)
    if not isinstance(data, dict):
        raise errors.ValidationError(f"bundle at {source} is not a JSON object", entity="bundle", key=source)
    return IngestBundle.model_validate(data)


# -----------------------------------------------------------------------------
# Field helpers
# -----------------------------------------------------------------------------
def _need(item: Dict[str, Any], *names: str) -> Any:
    for n in names:
        if item.get(n) is not None:
            return item[n]
    raise errors.ValidationError(f"missing field {names[0]}", entity=names[0])


def parse_when(value: Any) -> Union[date, datetime]:
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return dateparse.parse(value.strip())
        except (ValueError, OverflowError) as e:
            raise errors.ValidationError(f"unparseable date {value!r}", entity="release_date", key=value) from e
    raise errors.ValidationError(f"unparseable date {value!r}", entity="release_date", key=value)


def with_retry(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Call a store operation, retrying only TransientError."""
    attempts = max(1, settings.INGEST_MAX_RETRIES)
    for attempt in range(1, attempts + 1):
        try:
            return fn(*args, **kwargs)
        except errors.TransientError:
            if attempt >= attempts:
                raise
            logger.warning("[ingest] transient failure in %s, retry %d/%d", fn.__name__, attempt, attempts - 1)
            time.sleep(settings.INGEST_RETRY_DELAY * attempt)
    raise AssertionError("unreachable")


# -----------------------------------------------------------------------------
# Per-entity writers
# -----------------------------------------------------------------------------
def _write_unit_group(db: Session, item: Dict[str, Any]) -> None:
    upsert_unit_group(db, _need(item, "noc", "code"), _need(item, "occupation", "name"))


def _write_economic_region(db: Session, item: Dict[str, Any]) -> None:
    upsert_economic_region(
        db,
        _need(item, "economic_region_code", "code"),
        _need(item, "economic_region_name", "name"),
    )


def _write_section(db: Session, item: Dict[str, Any]) -> None:
    add_section(db, _need(item, "noc"), _need(item, "title"), item.get("items") or [])


def _write_program_area(db: Session, item: Dict[str, Any]) -> None:
    upsert_program_area(db, _need(item, "title"), item.get("id"))


def _write_program(db: Session, item: Dict[str, Any]) -> None:
    # reject a bad credential before an area gets created for it
    credential = parse_credential(_need(item, "credential"))
    area_id = item.get("program_area_id")
    if area_id is None and item.get("program_area"):
        # catalog rows may name their area instead of giving its id
        area_id = upsert_program_area(db, item["program_area"])
    upsert_program(
        db,
        _need(item, "nid"),
        _need(item, "title"),
        credential,
        area_id,
        duration=item.get("duration"),
        keywords=item.get("keywords"),
        noc=item.get("noc"),
        known_noc_groups=item.get("known_noc_groups"),
    )


def _write_outlook(db: Session, item: Dict[str, Any]) -> None:
    record_outlook(
        db,
        _need(item, "noc"),
        _need(item, "economic_region_code"),
        _need(item, "title"),
        _need(item, "outlook"),
        _need(item, "trends"),
        parse_when(_need(item, "release_date")),
        _need(item, "province"),
        lang=item.get("lang"),
        program_nid=item.get("program_nid"),
    )


WRITERS: Dict[str, Callable[[Session, Dict[str, Any]], None]] = {
    "unit_groups": _write_unit_group,
    "economic_regions": _write_economic_region,
    "sections": _write_section,
    "program_areas": _write_program_area,
    "programs": _write_program,
    "outlooks": _write_outlook,
}


# -----------------------------------------------------------------------------
# Entry points
# -----------------------------------------------------------------------------
def ingest_bundle(db: Session, bundle: IngestBundle, *, source: str = "inline") -> IngestReport:
    """
    Apply a bundle row by row. Each row is its own store write, so a bad
    row is reported and skipped without undoing the others. Re-running the
    same bundle writes no new outlooks or sections.
    """
    report = IngestReport(source=source)
    for entity in ENTITY_ORDER:
        rows = getattr(bundle, entity)
        stats = EntityReport()
        report.entities[entity] = stats
        writer = WRITERS[entity]
        for idx, item in enumerate(rows):
            try:
                with_retry(writer, db, item)
                stats.written += 1
            except errors.ConflictError as e:
                if entity in _DUPLICATE_OK:
                    stats.duplicates += 1
                    continue
                stats.failed += 1
                report.errors.append({"entity": entity, "index": idx, "kind": e.kind, "detail": str(e)})
            except errors.StoreError as e:
                stats.failed += 1
                report.errors.append({"entity": entity, "index": idx, "kind": e.kind, "detail": str(e)})
        if rows:
            logger.info(
                "[ingest] %s: written=%d duplicates=%d failed=%d",
                entity, stats.written, stats.duplicates, stats.failed,
            )
    return report


def run_ingest(source: Optional[str] = None, factory: Optional[sessionmaker] = None) -> IngestReport:
    """Load `source` (default settings.INGEST_SOURCE) and ingest it in a fresh session."""
    source = source or settings.INGEST_SOURCE
    if not source:
        raise errors.ValidationError("no ingest source configured", entity="bundle")
    bundle = load_bundle(source)
    with session_scope(factory) as db:
        report = ingest_bundle(db, bundle, source=source)
    logger.info("[ingest] done source=%s errors=%d", source, len(report.errors))
    return report
