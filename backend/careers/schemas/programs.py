from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from careers.models.program import Credential


# ---------- OUT MODELS ----------
class ProgramAreaOut(BaseModel):
    id: int
    title: str

    class Config:
        from_attributes = True


class ProgramOut(BaseModel):
    nid: int
    title: str
    duration: Optional[str] = None
    keywords: Optional[List[str]] = None
    noc: List[str] = []
    known_noc_groups: List[str] = []
    credential: Credential
    program_area_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------- IN MODELS ----------
class ProgramAreaUpsert(BaseModel):
    title: str
    id: Optional[int] = None


# credential stays a plain string here so the store reports bad values itself
class ProgramUpsert(BaseModel):
    title: str
    credential: str
    program_area_id: int = Field(alias="programAreaId")
    duration: Optional[str] = None
    keywords: Optional[List[str]] = None
    noc: Optional[List[str]] = None
    known_noc_groups: Optional[List[str]] = Field(default=None, alias="knownNocGroups")

    class Config:
        populate_by_name = True
        extra = "ignore"
