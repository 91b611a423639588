from .base import Base
from .unit_group import UnitGroup, SectionsEntity
from .economic_region import EconomicRegion
from .program import Credential, ProgramArea, Program
from .outlook import Outlook, OUTLOOK_IDENTITY

__all__ = [
    "Base",
    "UnitGroup",
    "SectionsEntity",
    "EconomicRegion",
    "Credential",
    "ProgramArea",
    "Program",
    "Outlook",
    "OUTLOOK_IDENTITY",
]
