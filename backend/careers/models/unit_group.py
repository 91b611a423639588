# backend/careers/models/unit_group.py
from sqlalchemy import JSON, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from careers.models.base import Base, TimestampMixin


class UnitGroup(TimestampMixin, Base):
    """An occupation classification, keyed by its NOC code."""
    __tablename__ = "unit_groups"

    noc = Column(String(16), primary_key=True)
    occupation = Column(String, nullable=False)

    sections = relationship(
        "SectionsEntity",
        back_populates="unit_group",
        order_by="SectionsEntity.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    outlooks = relationship("Outlook", back_populates="unit_group", passive_deletes="all")

    def __repr__(self):
        return f"<UnitGroup(noc='{self.noc}', occupation='{self.occupation}')>"


class SectionsEntity(TimestampMixin, Base):
    """A titled list of descriptive text items for one unit group."""
    __tablename__ = "sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    noc = Column(String(16), ForeignKey("unit_groups.noc", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    # ordered list of strings (SQLite-friendly JSON)
    items = Column(JSON, nullable=False, default=list)

    unit_group = relationship("UnitGroup", back_populates="sections")

    __table_args__ = (UniqueConstraint("noc", "title", name="uq_sections_noc_title"),)

    def __repr__(self):
        return f"<SectionsEntity(noc='{self.noc}', title='{self.title}')>"
