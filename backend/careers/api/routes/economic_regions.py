# careers/api/routes/economic_regions.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from careers.crud.economic_regions import (
    delete_economic_region,
    get_economic_region,
    list_economic_regions,
    upsert_economic_region,
)
from careers.db.session import get_db
from careers.schemas.reference import EconomicRegionOut, EconomicRegionUpsert

router = APIRouter(prefix="/economic-regions", tags=["economic-regions"])


@router.get("", response_model=List[EconomicRegionOut])
def list_regions(
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    return list_economic_regions(db, offset=offset, limit=limit)


@router.put("/{code}", response_model=EconomicRegionOut)
def put_region(code: str, payload: EconomicRegionUpsert, db: Session = Depends(get_db)):
    return upsert_economic_region(db, code, payload.economic_region_name)


@router.get("/{code}", response_model=EconomicRegionOut)
def get_region(code: str, db: Session = Depends(get_db)):
    return get_economic_region(db, code)


@router.delete("/{code}")
def delete_region(code: str, db: Session = Depends(get_db)):
    delete_economic_region(db, code)
    return {"ok": True, "economic_region_code": code}
