# backend/careers/crud/unit_groups.py
import logging
from typing import List, Optional, Sequence

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from careers.core import errors
from careers.crud.common import atomic, required_str, retry_lost_insert, str_list, translated
from careers.models.outlook import Outlook
from careers.models.unit_group import SectionsEntity, UnitGroup

logger = logging.getLogger(__name__)


def get_unit_group(db: Session, noc: str) -> UnitGroup:
    noc = required_str(noc, "noc")
    with translated(db, entity="unit_group", key=noc):
        row = db.get(UnitGroup, noc)
    if row is None:
        raise errors.NotFoundError(f"unit group {noc!r} not found", entity="unit_group", key=noc)
    return row


def list_unit_groups(db: Session, *, offset: int = 0, limit: Optional[int] = None) -> List[UnitGroup]:
    stmt = select(UnitGroup).order_by(UnitGroup.noc).offset(offset)
    if limit is not None:
        stmt = stmt.limit(int(limit))
    with translated(db, entity="unit_group"):
        return list(db.execute(stmt).scalars().all())


@retry_lost_insert
def upsert_unit_group(db: Session, code: str, occupation: str) -> UnitGroup:
    """Create or update by NOC code."""
    code = required_str(code, "noc")
    occupation = required_str(occupation, "occupation")
    with atomic(db, entity="unit_group", key=code):
        row = db.get(UnitGroup, code)
        if row is None:
            row = UnitGroup(noc=code, occupation=occupation)
            db.add(row)
        else:
            row.occupation = occupation
    db.refresh(row)
    return row


def delete_unit_group(db: Session, noc: str) -> None:
    """Sections go with the unit group; outlooks block the delete."""
    row = get_unit_group(db, noc)
    with atomic(db, entity="unit_group", key=row.noc, restrict=True):
        if db.execute(select(exists().where(Outlook.noc == row.noc))).scalar():
            raise errors.ConflictError(
                f"unit group {row.noc!r} still has outlook records", entity="unit_group", key=row.noc
            )
        db.delete(row)
    logger.info("[store] unit_group deleted noc=%s", row.noc)


# ---------- sections ----------

def add_section(db: Session, noc: str, title: str, items: Optional[Sequence[str]] = None) -> SectionsEntity:
    noc = required_str(noc, "noc")
    title = required_str(title, "title")
    items = str_list(items, "items") or []
    with atomic(db, entity="section", key=(noc, title)):
        if db.get(UnitGroup, noc) is None:
            raise errors.ReferenceError(f"unit group {noc!r} does not exist", entity="section", key=noc)
        dup = db.execute(
            select(SectionsEntity.id).where(SectionsEntity.noc == noc, SectionsEntity.title == title)
        ).first()
        if dup:
            raise errors.ConflictError(
                f"section {title!r} already exists for {noc!r}", entity="section", key=(noc, title)
            )
        row = SectionsEntity(noc=noc, title=title, items=items)
        db.add(row)
    db.refresh(row)
    return row


def query_sections(db: Session, noc: str) -> List[SectionsEntity]:
    """Sections of a unit group in insertion order; unknown codes give []."""
    noc = (noc or "").strip()
    if not noc:
        return []
    with translated(db, entity="section", key=noc):
        return list(
            db.execute(
                select(SectionsEntity).where(SectionsEntity.noc == noc).order_by(SectionsEntity.id)
            ).scalars().all()
        )
