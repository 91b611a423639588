from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class OutlookOut(BaseModel):
    id: int
    noc: str
    economic_region_code: str
    title: str
    outlook: str
    trends: str
    trends_hash: str
    release_date: datetime
    province: str
    lang: str
    program_nid: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OutlookList(BaseModel):
    items: List[OutlookOut]
    offset: int
    limit: Optional[int] = None
    count: int


class OutlookCreate(BaseModel):
    noc: str
    economic_region_code: str = Field(alias="economicRegionCode")
    title: str
    outlook: str
    trends: str
    release_date: Union[datetime, date] = Field(alias="releaseDate")
    province: str
    lang: Optional[str] = None
    program_nid: Optional[int] = Field(default=None, alias="programNid")

    class Config:
        populate_by_name = True
        extra = "ignore"
