"""Test factories for participation records."""

import random
from datetime import date
from uuid import UUID, uuid4

from liaison.participation.enums import ParticipationStatus
from liaison.participation.models import ParticipationRecord

DEPARTMENTS = ("Vertrieb", "Produktion", "IT", "Personal", "Einkauf")
REQUIREMENTS = ("vegetarian", "vegan", "gluten_free", "lactose_free", "halal")
CATEGORIES = ("bewegung", "ernaehrung", "mental", "sucht", "ergonomie", "allgemein")


class ParticipationFactory:
    """Factory for creating ParticipationRecord instances for testing."""

    @staticmethod
    def create(
        *,
        tenant_id: UUID | None = None,
        engagement_id: UUID | None = None,
        status: ParticipationStatus = ParticipationStatus.ATTENDED,
        employee_id: int | None = None,
        employee_email: str | None = "max.mustermann@firma.example",
        employee_name: str | None = "Max Mustermann",
        department: str | None = "Vertrieb",
        event_date: date | None = date(2025, 3, 14),
        category: str | None = "bewegung",
        rating: int | None = None,
        feedback_comment: str | None = None,
        special_requirements: list[str] | None = None,
    ) -> ParticipationRecord:
        return ParticipationRecord(
            tenant_id=tenant_id or uuid4(),
            engagement_id=engagement_id,
            status=status,
            employee_id=employee_id,
            employee_email=employee_email,
            employee_name=employee_name,
            department=department,
            event_date=event_date,
            category=category,
            rating=rating,
            feedback_comment=feedback_comment,
            special_requirements=special_requirements or [],
        )

    @staticmethod
    def create_many(
        *,
        tenant_id: UUID,
        engagement_id: UUID | None,
        statuses: dict[ParticipationStatus, int],
        year: int = 2025,
    ) -> list[ParticipationRecord]:
        """Create records with the given number of each status, one employee each."""
        records = []
        index = 0
        for status, count in statuses.items():
            for _ in range(count):
                index += 1
                records.append(
                    ParticipationFactory.create(
                        tenant_id=tenant_id,
                        engagement_id=engagement_id,
                        status=status,
                        employee_id=index,
                        employee_email=f"mitarbeiter{index}@firma.example",
                        employee_name=f"Mitarbeiter {index}",
                        event_date=date(year, (index % 12) + 1, 10),
                    )
                )
        return records

    @staticmethod
    def create_random(
        rng: random.Random,
        *,
        tenant_id: UUID,
        engagement_id: UUID | None,
        size: int,
    ) -> list[ParticipationRecord]:
        """Create records with random PII, statuses, ratings and free text."""
        records = []
        for index in range(size):
            first = rng.choice(("Anna", "Ben", "Clara", "David", "Elif", "Finn"))
            last = rng.choice(("Schmidt", "Yilmaz", "Meyer", "Nowak", "Weber"))
            records.append(
                ParticipationFactory.create(
                    tenant_id=tenant_id,
                    engagement_id=engagement_id,
                    status=rng.choice(list(ParticipationStatus)),
                    employee_id=index,
                    employee_email=f"{first}.{last}{index}@firma.example".lower(),
                    employee_name=f"{first} {last}",
                    department=rng.choice(DEPARTMENTS),
                    event_date=date(2025, rng.randint(1, 12), rng.randint(1, 28)),
                    category=rng.choice(CATEGORIES),
                    rating=rng.choice((None, 1, 2, 3, 4, 5)),
                    feedback_comment=rng.choice(
                        (None, f"{first} fand es super", f"Kommentar von {last}")
                    ),
                    special_requirements=rng.sample(REQUIREMENTS, rng.randint(0, 2)),
                )
            )
        return records
