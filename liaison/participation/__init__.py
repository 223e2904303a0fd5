"""Participation records and privacy-safe reporting."""

from liaison.participation.aggregator import ParticipationAggregator
from liaison.participation.enums import InterventionType, ParticipationStatus
from liaison.participation.models import ParticipationRecord
from liaison.participation.reports import PartnerParticipationStats
from liaison.participation.service import ParticipationReportingService
from liaison.participation.store import ParticipationStore

__all__ = [
    "InterventionType",
    "ParticipationAggregator",
    "ParticipationRecord",
    "ParticipationReportingService",
    "ParticipationStatus",
    "ParticipationStore",
    "PartnerParticipationStats",
]
