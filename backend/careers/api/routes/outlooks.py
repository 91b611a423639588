# careers/api/routes/outlooks.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from careers.crud.outlooks import delete_outlook, get_outlook, query_outlooks, record_outlook
from careers.db.session import get_db
from careers.schemas.outlooks import OutlookCreate, OutlookList, OutlookOut

router = APIRouter(prefix="/outlooks", tags=["outlooks"])


# GET /api/outlooks?noc=..&economicRegionCode=..&province=..&lang=..&releasedFrom=..&releasedTo=..
@router.get("", response_model=OutlookList)
def list_outlooks(
    noc: Optional[str] = Query(None),
    economic_region_code: Optional[str] = Query(None, alias="economicRegionCode"),
    province: Optional[str] = Query(None),
    lang: Optional[str] = Query(None),
    released_from: Optional[datetime] = Query(None, alias="releasedFrom"),
    released_to: Optional[datetime] = Query(None, alias="releasedTo"),
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    rows = query_outlooks(
        db,
        noc=noc,
        economic_region_code=economic_region_code,
        province=province,
        lang=lang,
        released_from=released_from,
        released_to=released_to,
        offset=offset,
        limit=limit,
    )
    return {"items": rows, "offset": offset, "limit": limit, "count": len(rows)}


# POST /api/outlooks (409 on duplicate, 422 on unknown noc/region/program)
@router.post("", response_model=OutlookOut, status_code=status.HTTP_201_CREATED)
def create_outlook(payload: OutlookCreate, db: Session = Depends(get_db)):
    return record_outlook(
        db,
        payload.noc,
        payload.economic_region_code,
        payload.title,
        payload.outlook,
        payload.trends,
        payload.release_date,
        payload.province,
        lang=payload.lang,
        program_nid=payload.program_nid,
    )


@router.get("/{outlook_id}", response_model=OutlookOut)
def get_one(outlook_id: int, db: Session = Depends(get_db)):
    return get_outlook(db, outlook_id)


@router.delete("/{outlook_id}")
def delete_one(outlook_id: int, db: Session = Depends(get_db)):
    delete_outlook(db, outlook_id)
    return {"ok": True, "id": outlook_id}
