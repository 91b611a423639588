# backend/careers/crud/programs.py
import logging
from typing import Any, List, Optional, Sequence

from sqlalchemy import exists, select, text
from sqlalchemy.orm import Session

from careers.core import errors
from careers.crud.common import atomic, optional_str, required_str, retry_lost_insert, str_list, translated
from careers.models.outlook import Outlook
from careers.models.program import Credential, Program, ProgramArea

logger = logging.getLogger(__name__)

CREDENTIALS = tuple(c.value for c in Credential)


def parse_credential(value: Any) -> Credential:
    """Exact match against the closed set; no case folding or aliases."""
    if isinstance(value, Credential):
        return value
    if isinstance(value, str) and value in CREDENTIALS:
        return Credential(value)
    raise errors.ValidationError(
        f"credential must be one of {', '.join(CREDENTIALS)}; got {value!r}", entity="program", key=value
    )


def _int_id(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise errors.ValidationError(f"{field} must be an integer", entity=field, key=value)
    return value


# ---------- program areas ----------

def get_program_area(db: Session, area_id: int) -> ProgramArea:
    area_id = _int_id(area_id, "program_area_id")
    with translated(db, entity="program_area", key=area_id):
        row = db.get(ProgramArea, area_id)
    if row is None:
        raise errors.NotFoundError(f"program area {area_id} not found", entity="program_area", key=area_id)
    return row


def list_program_areas(db: Session) -> List[ProgramArea]:
    with translated(db, entity="program_area"):
        return list(db.execute(select(ProgramArea).order_by(ProgramArea.title)).scalars().all())


def sync_area_sequence(db: Session) -> None:
    """Move the PostgreSQL id sequence past ids that were inserted explicitly."""
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(
        text(
            "SELECT setval(pg_get_serial_sequence('program_areas', 'id'), "
            "(SELECT COALESCE(MAX(id), 1) FROM program_areas))"
        )
    )


@retry_lost_insert
def upsert_program_area(db: Session, title: str, area_id: Optional[int] = None) -> int:
    """
    Return the id of the area titled `title`, creating it when absent.
    An explicit `area_id` must agree with what is already stored.
    """
    title = required_str(title, "title")
    if area_id is not None:
        area_id = _int_id(area_id, "program_area_id")

    with atomic(db, entity="program_area", key=title):
        existing = db.execute(select(ProgramArea).where(ProgramArea.title == title)).scalar_one_or_none()
        if existing is not None:
            if area_id is not None and existing.id != area_id:
                raise errors.ConflictError(
                    f"program area {title!r} is id {existing.id}, not {area_id}",
                    entity="program_area", key=title,
                )
            return existing.id

        if area_id is not None:
            taken = db.get(ProgramArea, area_id)
            if taken is not None:
                raise errors.ConflictError(
                    f"program area id {area_id} already belongs to {taken.title!r}",
                    entity="program_area", key=area_id,
                )
        row = ProgramArea(title=title) if area_id is None else ProgramArea(id=area_id, title=title)
        db.add(row)
        db.flush()
        new_id = row.id
        if area_id is not None:
            sync_area_sequence(db)
    logger.info("[store] program_area created id=%s title=%s", new_id, title)
    return new_id


def delete_program_area(db: Session, area_id: int) -> None:
    row = get_program_area(db, area_id)
    with atomic(db, entity="program_area", key=row.id, restrict=True):
        if db.execute(select(exists().where(Program.program_area_id == row.id))).scalar():
            raise errors.ConflictError(
                f"program area {row.id} still has programs", entity="program_area", key=row.id
            )
        db.delete(row)


# ---------- programs ----------

def get_program(db: Session, nid: int) -> Program:
    nid = _int_id(nid, "nid")
    with translated(db, entity="program", key=nid):
        row = db.get(Program, nid)
    if row is None:
        raise errors.NotFoundError(f"program {nid} not found", entity="program", key=nid)
    return row


def list_programs(
    db: Session,
    *,
    program_area_id: Optional[int] = None,
    credential: Optional[str] = None,
    offset: int = 0,
    limit: Optional[int] = None,
) -> List[Program]:
    stmt = select(Program)
    if program_area_id is not None:
        stmt = stmt.where(Program.program_area_id == program_area_id)
    if credential is not None:
        stmt = stmt.where(Program.credential == parse_credential(credential))
    stmt = stmt.order_by(Program.nid).offset(offset)
    if limit is not None:
        stmt = stmt.limit(int(limit))
    with translated(db, entity="program"):
        return list(db.execute(stmt).scalars().all())


@retry_lost_insert
def upsert_program(
    db: Session,
    nid: int,
    title: str,
    credential: Any,
    program_area_id: int,
    *,
    duration: Optional[str] = None,
    keywords: Optional[Sequence[str]] = None,
    noc: Optional[Sequence[str]] = None,
    known_noc_groups: Optional[Sequence[str]] = None,
) -> Program:
    """
    Insert or replace the program with catalog id `nid`.

    Every field is overwritten on update (None clears optional ones), the
    catalog being the source of truth.
    """
    nid = _int_id(nid, "nid")
    title = required_str(title, "title")
    cred = parse_credential(credential)
    program_area_id = _int_id(program_area_id, "program_area_id")
    duration = optional_str(duration, "duration")
    keywords = str_list(keywords, "keywords")
    noc = str_list(noc, "noc") or []
    known_noc_groups = str_list(known_noc_groups, "known_noc_groups") or []

    with atomic(db, entity="program", key=nid):
        if db.get(ProgramArea, program_area_id) is None:
            raise errors.ReferenceError(
                f"program area {program_area_id} does not exist", entity="program", key=program_area_id
            )
        row = db.get(Program, nid)
        if row is None:
            row = Program(nid=nid)
            db.add(row)
        row.title = title
        row.credential = cred
        row.program_area_id = program_area_id
        row.duration = duration
        row.keywords = keywords
        row.noc = noc
        row.known_noc_groups = known_noc_groups
    db.refresh(row)
    return row


def delete_program(db: Session, nid: int) -> None:
    row = get_program(db, nid)
    with atomic(db, entity="program", key=row.nid, restrict=True):
        if db.execute(select(exists().where(Outlook.program_nid == row.nid))).scalar():
            raise errors.ConflictError(f"program {row.nid} still has outlook records", entity="program", key=row.nid)
        db.delete(row)
