"""Canonical enum values for the Foresy schema."""

from __future__ import annotations

import enum


class OAuthProvider(str, enum.Enum):
    GOOGLE = "google_oauth2"
    GITHUB = "github"


class CompanyRole(str, enum.Enum):
    INDEPENDENT = "independent"
    CLIENT = "client"


class RelationRole(str, enum.Enum):
    CREATOR = "creator"
    CONTRIBUTOR = "contributor"
    REVIEWER = "reviewer"


class MissionType(str, enum.Enum):
    TIME_BASED = "time_based"
    FIXED_PRICE = "fixed_price"


class MissionStatus(str, enum.Enum):
    LEAD = "lead"
    PENDING = "pending"
    WON = "won"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CraStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    LOCKED = "locked"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]
