# backend/careers/models/program.py
import enum

from sqlalchemy import JSON, Column, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from careers.models.base import Base, TimestampMixin


class Credential(str, enum.Enum):
    """Academic credential a program confers (closed set)."""
    CERTIFICATE = "Certificate"
    DEGREE = "Degree"
    DIPLOMA = "Diploma"


class ProgramArea(TimestampMixin, Base):
    __tablename__ = "program_areas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False, unique=True)

    programs = relationship("Program", back_populates="program_area", passive_deletes="all")

    def __repr__(self):
        return f"<ProgramArea(id={self.id}, title='{self.title}')>"


class Program(TimestampMixin, Base):
    __tablename__ = "programs"

    # Assigned by the upstream program catalog, never generated here
    nid = Column(Integer, primary_key=True, autoincrement=False)
    title = Column(String, nullable=False)
    duration = Column(String, nullable=True)
    keywords = Column(JSON, nullable=True)           # list[str]
    noc = Column(JSON, nullable=False, default=list)  # list[str], associated NOC codes
    known_noc_groups = Column(JSON, nullable=False, default=list)  # list[str]
    credential = Column(
        Enum(Credential, name="credential", values_callable=lambda e: [m.value for m in e],
             validate_strings=True, create_constraint=True),
        nullable=False,
    )
    program_area_id = Column(
        Integer, ForeignKey("program_areas.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    program_area = relationship("ProgramArea", back_populates="programs")
    outlooks = relationship("Outlook", back_populates="program", passive_deletes="all")

    def __repr__(self):
        return f"<Program(nid={self.nid}, title='{self.title}', credential='{self.credential}')>"
