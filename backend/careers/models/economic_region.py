# backend/careers/models/economic_region.py
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from careers.models.base import Base, TimestampMixin


class EconomicRegion(TimestampMixin, Base):
    __tablename__ = "economic_regions"

    economic_region_code = Column(String(16), primary_key=True)
    economic_region_name = Column(String, nullable=False)

    outlooks = relationship("Outlook", back_populates="economic_region", passive_deletes="all")

    def __repr__(self):
        return f"<EconomicRegion(code='{self.economic_region_code}', name='{self.economic_region_name}')>"
