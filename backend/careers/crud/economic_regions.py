# backend/careers/crud/economic_regions.py
from typing import List, Optional

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from careers.core import errors
from careers.crud.common import atomic, required_str, retry_lost_insert, translated
from careers.models.economic_region import EconomicRegion
from careers.models.outlook import Outlook


def get_economic_region(db: Session, code: str) -> EconomicRegion:
    code = required_str(code, "economic_region_code")
    with translated(db, entity="economic_region", key=code):
        row = db.get(EconomicRegion, code)
    if row is None:
        raise errors.NotFoundError(f"economic region {code!r} not found", entity="economic_region", key=code)
    return row


def list_economic_regions(db: Session, *, offset: int = 0, limit: Optional[int] = None) -> List[EconomicRegion]:
    stmt = select(EconomicRegion).order_by(EconomicRegion.economic_region_code).offset(offset)
    if limit is not None:
        stmt = stmt.limit(int(limit))
    with translated(db, entity="economic_region"):
        return list(db.execute(stmt).scalars().all())


@retry_lost_insert
def upsert_economic_region(db: Session, code: str, name: str) -> EconomicRegion:
    code = required_str(code, "economic_region_code")
    name = required_str(name, "economic_region_name")
    with atomic(db, entity="economic_region", key=code):
        row = db.get(EconomicRegion, code)
        if row is None:
            row = EconomicRegion(economic_region_code=code, economic_region_name=name)
            db.add(row)
        else:
            row.economic_region_name = name
    db.refresh(row)
    return row


def delete_economic_region(db: Session, code: str) -> None:
    row = get_economic_region(db, code)
    with atomic(db, entity="economic_region", key=row.economic_region_code, restrict=True):
        in_use = db.execute(
            select(exists().where(Outlook.economic_region_code == row.economic_region_code))
        ).scalar()
        if in_use:
            raise errors.ConflictError(
                f"economic region {row.economic_region_code!r} still has outlook records",
                entity="economic_region",
                key=row.economic_region_code,
            )
        db.delete(row)
