# backend/careers/crud/outlooks.py
import hashlib
import logging
from datetime import date, datetime
from typing import List, Optional, Union

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from careers.core import errors
from careers.core.config import settings
from careers.crud.common import as_timestamp, atomic, required_str, translated
from careers.models.economic_region import EconomicRegion
from careers.models.outlook import Outlook
from careers.models.program import Program
from careers.models.unit_group import UnitGroup

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


def trends_hash(trends: str) -> str:
    """SHA-256 hex digest over the exact UTF-8 trends text (no normalisation)."""
    return hashlib.sha256(trends.encode("utf-8")).hexdigest()


def normalize_lang(lang: Optional[str]) -> str:
    if lang is None:
        return settings.DEFAULT_LANG
    return required_str(lang, "lang").upper()


def get_outlook(db: Session, outlook_id: int) -> Outlook:
    with translated(db, entity="outlook", key=outlook_id):
        row = db.get(Outlook, outlook_id)
    if row is None:
        raise errors.NotFoundError(f"outlook {outlook_id} not found", entity="outlook", key=outlook_id)
    return row


def find_duplicate(
    db: Session,
    *,
    noc: str,
    economic_region_code: str,
    lang: str,
    release_date: datetime,
    province: str,
    title: str,
    trends_hash: str,
    outlook: str,
) -> Optional[int]:
    """Id of the row holding this exact de-duplication key, if any."""
    return db.execute(
        select(Outlook.id).where(
            Outlook.noc == noc,
            Outlook.economic_region_code == economic_region_code,
            Outlook.lang == lang,
            Outlook.release_date == release_date,
            Outlook.province == province,
            Outlook.title == title,
            Outlook.trends_hash == trends_hash,
            Outlook.outlook == outlook,
        )
    ).scalar_one_or_none()


def record_outlook(
    db: Session,
    noc: str,
    economic_region_code: str,
    title: str,
    outlook: str,
    trends: str,
    release_date: DateLike,
    province: str,
    lang: Optional[str] = None,
    program_nid: Optional[int] = None,
) -> Outlook:
    """
    Insert one outlook row or reject it.

    The row is a duplicate when all of noc, region, lang, release date,
    province, title, outlook and the trends hash match an existing row;
    that raises ConflictError and writes nothing. Different trends text
    hashes differently, so it is stored as a new row next to the old one.
    """
    noc = required_str(noc, "noc")
    economic_region_code = required_str(economic_region_code, "economic_region_code")
    title = required_str(title, "title")
    outlook = required_str(outlook, "outlook")
    if not isinstance(trends, str):
        raise errors.ValidationError("trends must be a string", entity="outlook")
    province = required_str(province, "province")
    lang = normalize_lang(lang)
    released = as_timestamp(release_date, "release_date")
    if program_nid is not None and (isinstance(program_nid, bool) or not isinstance(program_nid, int)):
        raise errors.ValidationError("program_nid must be an integer", entity="outlook", key=program_nid)
    digest = trends_hash(trends)

    key = (noc, economic_region_code, lang, released.isoformat(), province, title, digest[:12], outlook)
    with atomic(db, entity="outlook", key=key):
        if db.get(UnitGroup, noc) is None:
            raise errors.ReferenceError(f"unit group {noc!r} does not exist", entity="outlook", key=noc)
        if db.get(EconomicRegion, economic_region_code) is None:
            raise errors.ReferenceError(
                f"economic region {economic_region_code!r} does not exist",
                entity="outlook", key=economic_region_code,
            )
        if program_nid is not None and db.get(Program, program_nid) is None:
            raise errors.ReferenceError(f"program {program_nid} does not exist", entity="outlook", key=program_nid)

        existing_id = find_duplicate(
            db,
            noc=noc,
            economic_region_code=economic_region_code,
            lang=lang,
            release_date=released,
            province=province,
            title=title,
            trends_hash=digest,
            outlook=outlook,
        )
        if existing_id is not None:
            raise errors.ConflictError(f"outlook duplicates row {existing_id}", entity="outlook", key=existing_id)

        row = Outlook(
            noc=noc,
            economic_region_code=economic_region_code,
            title=title,
            outlook=outlook,
            trends=trends,
            trends_hash=digest,
            release_date=released,
            province=province,
            lang=lang,
            program_nid=program_nid,
        )
        db.add(row)
        db.flush()
    logger.debug("[store] outlook recorded id=%s noc=%s er=%s", row.id, noc, economic_region_code)
    db.refresh(row)
    return row


def query_outlooks(
    db: Session,
    *,
    noc: Optional[str] = None,
    economic_region_code: Optional[str] = None,
    province: Optional[str] = None,
    lang: Optional[str] = None,
    released_from: Optional[DateLike] = None,
    released_to: Optional[DateLike] = None,
    offset: int = 0,
    limit: Optional[int] = None,
) -> List[Outlook]:
    """
    Outlook rows matching every given filter, oldest release first.
    No implicit limit; pass offset/limit to paginate.
    """
    where = []
    if noc:
        where.append(Outlook.noc == noc.strip())
    if economic_region_code:
        where.append(Outlook.economic_region_code == economic_region_code.strip())
    if province:
        where.append(Outlook.province == province.strip())
    if lang:
        where.append(Outlook.lang == normalize_lang(lang))
    if released_from is not None:
        where.append(Outlook.release_date >= as_timestamp(released_from, "released_from"))
    if released_to is not None:
        where.append(Outlook.release_date <= as_timestamp(released_to, "released_to"))

    stmt = select(Outlook)
    if where:
        stmt = stmt.where(and_(*where))
    stmt = stmt.order_by(Outlook.release_date, Outlook.id)
    if offset:
        stmt = stmt.offset(int(offset))
    if limit is not None:
        stmt = stmt.limit(int(limit))

    with translated(db, entity="outlook"):
        return list(db.execute(stmt).scalars().all())


def delete_outlook(db: Session, outlook_id: int) -> None:
    row = get_outlook(db, outlook_id)
    with atomic(db, entity="outlook", key=row.id):
        db.delete(row)
