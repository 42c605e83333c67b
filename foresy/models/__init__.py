"""SQLAlchemy models for the Foresy schema."""

from foresy.models.base import Base
from foresy.models.company import Company, UserCompany
from foresy.models.cra import Cra, CraMission, UserCra
from foresy.models.cra_entry import CraEntry, CraEntryCra, CraEntryMission
from foresy.models.mission import Mission, MissionCompany, UserMission
from foresy.models.session import UserSession
from foresy.models.user import User

__all__ = [
    "Base",
    "Company",
    "Cra",
    "CraEntry",
    "CraEntryCra",
    "CraEntryMission",
    "CraMission",
    "Mission",
    "MissionCompany",
    "User",
    "UserCompany",
    "UserCra",
    "UserMission",
    "UserSession",
]
