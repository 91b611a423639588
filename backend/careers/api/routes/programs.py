# careers/api/routes/programs.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from careers.crud.programs import (
    delete_program,
    delete_program_area,
    get_program,
    get_program_area,
    list_program_areas,
    list_programs,
    upsert_program,
    upsert_program_area,
)
from careers.db.session import get_db
from careers.schemas.programs import ProgramAreaOut, ProgramAreaUpsert, ProgramOut, ProgramUpsert

router = APIRouter(tags=["programs"])


# ---------- program areas ----------

@router.get("/program-areas", response_model=List[ProgramAreaOut])
def list_areas(db: Session = Depends(get_db)):
    return list_program_areas(db)


# POST /api/program-areas -> existing id when the title is already known
@router.post("/program-areas", response_model=ProgramAreaOut)
def post_area(payload: ProgramAreaUpsert, db: Session = Depends(get_db)):
    area_id = upsert_program_area(db, payload.title, payload.id)
    return get_program_area(db, area_id)


@router.get("/program-areas/{area_id}", response_model=ProgramAreaOut)
def get_area(area_id: int, db: Session = Depends(get_db)):
    return get_program_area(db, area_id)


@router.delete("/program-areas/{area_id}")
def delete_area(area_id: int, db: Session = Depends(get_db)):
    delete_program_area(db, area_id)
    return {"ok": True, "id": area_id}


# ---------- programs ----------

@router.get("/programs", response_model=List[ProgramOut])
def list_all_programs(
    program_area_id: Optional[int] = Query(None, alias="programAreaId"),
    credential: Optional[str] = Query(None),
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    return list_programs(db, program_area_id=program_area_id, credential=credential, offset=offset, limit=limit)


# PUT /api/programs/{nid} (nid comes from the program catalog)
@router.put("/programs/{nid}", response_model=ProgramOut)
def put_program(nid: int, payload: ProgramUpsert, db: Session = Depends(get_db)):
    return upsert_program(
        db,
        nid,
        payload.title,
        payload.credential,
        payload.program_area_id,
        duration=payload.duration,
        keywords=payload.keywords,
        noc=payload.noc,
        known_noc_groups=payload.known_noc_groups,
    )


@router.get("/programs/{nid}", response_model=ProgramOut)
def get_one_program(nid: int, db: Session = Depends(get_db)):
    return get_program(db, nid)


@router.delete("/programs/{nid}")
def delete_one_program(nid: int, db: Session = Depends(get_db)):
    delete_program(db, nid)
    return {"ok": True, "nid": nid}
