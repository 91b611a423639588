# careers/api/routes/unit_groups.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from careers.crud.unit_groups import (
    add_section,
    delete_unit_group,
    get_unit_group,
    list_unit_groups,
    query_sections,
    upsert_unit_group,
)
from careers.db.session import get_db
from careers.schemas.reference import SectionCreate, SectionOut, UnitGroupOut, UnitGroupUpsert

router = APIRouter(prefix="/unit-groups", tags=["unit-groups"])


# GET /api/unit-groups
@router.get("", response_model=List[UnitGroupOut])
def list_groups(
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    return list_unit_groups(db, offset=offset, limit=limit)


# PUT /api/unit-groups/{noc}
@router.put("/{noc}", response_model=UnitGroupOut)
def put_group(noc: str, payload: UnitGroupUpsert, db: Session = Depends(get_db)):
    return upsert_unit_group(db, noc, payload.occupation)


@router.get("/{noc}", response_model=UnitGroupOut)
def get_group(noc: str, db: Session = Depends(get_db)):
    return get_unit_group(db, noc)


# DELETE /api/unit-groups/{noc} (409 while outlooks exist)
@router.delete("/{noc}")
def delete_group(noc: str, db: Session = Depends(get_db)):
    delete_unit_group(db, noc)
    return {"ok": True, "noc": noc}


# ---------- sections ----------

@router.get("/{noc}/sections", response_model=List[SectionOut])
def list_sections(noc: str, db: Session = Depends(get_db)):
    return query_sections(db, noc)


@router.post("/{noc}/sections", response_model=SectionOut, status_code=status.HTTP_201_CREATED)
def create_section(noc: str, payload: SectionCreate, db: Session = Depends(get_db)):
    return add_section(db, noc, payload.title, payload.items)
