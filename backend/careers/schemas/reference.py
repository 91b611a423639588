from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------- OUT MODELS ----------
class UnitGroupOut(BaseModel):
    noc: str
    occupation: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SectionOut(BaseModel):
    id: int
    noc: str
    title: str
    items: List[str] = []

    class Config:
        from_attributes = True


class EconomicRegionOut(BaseModel):
    economic_region_code: str
    economic_region_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------- IN MODELS ----------
class UnitGroupUpsert(BaseModel):
    occupation: str


class SectionCreate(BaseModel):
    title: str
    items: List[str] = Field(default_factory=list)


class EconomicRegionUpsert(BaseModel):
    economic_region_name: str = Field(alias="name")

    class Config:
        populate_by_name = True  # accept "name" or "economic_region_name"
