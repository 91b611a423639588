from typing import Any, Dict, List

from pydantic import BaseModel, Field


class IngestBundle(BaseModel):
    """Upstream data in one document; every key is optional."""
    unit_groups: List[Dict[str, Any]] = Field(default_factory=list)
    sections: List[Dict[str, Any]] = Field(default_factory=list)
    economic_regions: List[Dict[str, Any]] = Field(default_factory=list)
    program_areas: List[Dict[str, Any]] = Field(default_factory=list)
    programs: List[Dict[str, Any]] = Field(default_factory=list)
    outlooks: List[Dict[str, Any]] = Field(default_factory=list)

    class Config:
        extra = "ignore"


class EntityReport(BaseModel):
    written: int = 0
    duplicates: int = 0
    failed: int = 0


class IngestReport(BaseModel):
    source: str
    entities: Dict[str, EntityReport] = Field(default_factory=dict)
    errors: List[Dict[str, Any]] = Field(default_factory=list)
