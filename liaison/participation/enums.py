"""Enums and label tables for participation records."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType


class ParticipationStatus(str, Enum):
    """Attendance status of one employee at one intervention."""

    REGISTERED = "registered"
    ATTENDED = "attended"
    NO_SHOW = "no_show"
    CANCELLED = "cancelled"


class InterventionType(str, Enum):
    """Where the intervention came from."""

    PARTNER_ENGAGEMENT = "partner_engagement"
    HEALTH_DAY_MODULE = "health_day_module"
    INTERNAL = "internal"


CATEGORY_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "bewegung": "Bewegung",
        "ernaehrung": "Ernährung",
        "mental": "Mentale Gesundheit",
        "sucht": "Suchtprävention",
        "ergonomie": "Ergonomie",
        "allgemein": "Allgemein",
    }
)

MONTH_NAMES: tuple[str, ...] = (
    "Januar",
    "Februar",
    "März",
    "April",
    "Mai",
    "Juni",
    "Juli",
    "August",
    "September",
    "Oktober",
    "November",
    "Dezember",
)


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category[:1].upper() + category[1:])


def month_name(month: int) -> str:
    """German month name for 1-12, empty otherwise."""
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return ""


# Keys partners may see in dietary totals; anything else counts as "other"
DIETARY_REQUIREMENTS: frozenset[str] = frozenset(
    {"vegetarian", "vegan", "gluten_free", "lactose_free", "halal", "kosher"}
)
OTHER_REQUIREMENT = "other"


def dietary_key(requirement: str) -> str:
    """Map a free-text requirement onto the partner-safe vocabulary."""
    key = requirement.strip().lower().replace("-", "_").replace(" ", "_")
    return key if key in DIETARY_REQUIREMENTS else OTHER_REQUIREMENT
