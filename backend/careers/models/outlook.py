# backend/careers/models/outlook.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from careers.models.base import Base, TimestampMixin

# Columns forming the de-duplication key of an outlook row
OUTLOOK_IDENTITY = (
    "noc",
    "economic_region_code",
    "lang",
    "release_date",
    "province",
    "title",
    "trends_hash",
    "outlook",
)


class Outlook(TimestampMixin, Base):
    """Labour-market outlook for one occupation in one region, language and release."""
    __tablename__ = "outlooks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    noc = Column(String(16), ForeignKey("unit_groups.noc", ondelete="RESTRICT"), nullable=False, index=True)
    economic_region_code = Column(
        String(16), ForeignKey("economic_regions.economic_region_code", ondelete="RESTRICT"),
        nullable=False, index=True,
    )
    title = Column(String, nullable=False)
    outlook = Column(String, nullable=False)
    trends = Column(Text, nullable=False)
    trends_hash = Column(String(64), nullable=False)  # sha256 hex of trends
    release_date = Column(DateTime, nullable=False, index=True)
    province = Column(String(8), nullable=False, index=True)
    lang = Column(String(8), nullable=False, default="EN", server_default="EN")
    program_nid = Column(Integer, ForeignKey("programs.nid", ondelete="RESTRICT"), nullable=True, index=True)

    unit_group = relationship("UnitGroup", back_populates="outlooks")
    economic_region = relationship("EconomicRegion", back_populates="outlooks")
    program = relationship("Program", back_populates="outlooks")

    __table_args__ = (UniqueConstraint(*OUTLOOK_IDENTITY, name="uq_outlooks_identity"),)

    def __repr__(self):
        return (
            f"<Outlook(id={self.id}, noc='{self.noc}', er='{self.economic_region_code}', "
            f"lang='{self.lang}', outlook='{self.outlook}')>"
        )
