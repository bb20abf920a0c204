"""
DiaryPlus Backend — People (Personal CRM) Service
===================================================

What:  Contacts, their interaction history and upcoming birthdays.

Derived fields:
    days_since_last_contact  today minus the latest interaction date
    days_until_birthday      0 on the birthday itself
    Feb 29 birthdays are observed on Feb 28 in non-leap years.
"""

import calendar
import datetime as dt
import logging
import uuid
from typing import Dict, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import utcnow
from diaryplus.models.person import Interaction, Person
from diaryplus.schemas.person import (
    BirthdayListResponse,
    BirthdayResponse,
    InteractionCreate,
    InteractionListResponse,
    InteractionResponse,
    PersonCreate,
    PersonListResponse,
    PersonResponse,
    PersonUpdate,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)


def birthday_in_year(birthday: dt.date, year: int) -> dt.date:
    if birthday.month == 2 and birthday.day == 29 and not calendar.isleap(year):
        return dt.date(year, 2, 28)
    return birthday.replace(year=year)


def next_birthday(birthday: dt.date, today: dt.date) -> Tuple[dt.date, int, int]:
    """Return (upcoming date, days until it, age turned on it)."""
    upcoming = birthday_in_year(birthday, today.year)
    if upcoming < today:
        upcoming = birthday_in_year(birthday, today.year + 1)
    return upcoming, (upcoming - today).days, upcoming.year - birthday.year


def _person_response(
    person: Person, last_contact: Optional[dt.date], today: dt.date
) -> PersonResponse:
    response = PersonResponse.model_validate(person)
    if last_contact is not None:
        response.last_contact = last_contact
        response.days_since_last_contact = (today - last_contact).days
    if person.birthday is not None:
        response.days_until_birthday = next_birthday(person.birthday, today)[1]
    return response


class PeopleService:
    async def _last_contacts(
        self, db: AsyncSession, person_ids
    ) -> Dict[uuid.UUID, dt.date]:
        ids = list(person_ids)
        if not ids:
            return {}
        result = await db.execute(
            select(Interaction.person_id, func.max(Interaction.date))
            .where(Interaction.person_id.in_(ids))
            .group_by(Interaction.person_id)
        )
        return {person_id: last for person_id, last in result.all()}

    async def list_people(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        search: Optional[str] = None,
        relationship: Optional[str] = None,
    ) -> PersonListResponse:
        await require_membership(db, project_id, user_id)
        query = select(Person).where(Person.project_id == project_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(Person.name.ilike(pattern), Person.aka.ilike(pattern), Person.email.ilike(pattern))
            )
        if relationship:
            query = query.where(Person.relationship_type == relationship)
        result = await db.execute(query.order_by(Person.importance.desc(), Person.name))
        people = list(result.scalars().all())

        last = await self._last_contacts(db, (p.id for p in people))
        today = utcnow().date()
        return PersonListResponse(people=[_person_response(p, last.get(p.id), today) for p in people])

    async def create_person(
        self, db: AsyncSession, user_id: uuid.UUID, body: PersonCreate
    ) -> PersonResponse:
        await require_membership(db, body.project_id, user_id)
        person = Person(
            project_id=body.project_id,
            user_id=user_id,
            name=body.name.strip(),
            aka=body.aka,
            tags=body.tags or [],
            birthday=body.birthday,
            timezone=body.timezone,
            email=body.email,
            phone=body.phone,
            notes_md=body.notes_md,
            relationship_type=body.relationship_type,
            importance=body.importance,
        )
        db.add(person)
        await db.flush()
        return _person_response(person, None, utcnow().date())

    async def get_person(
        self, db: AsyncSession, person_id: uuid.UUID, user_id: uuid.UUID
    ) -> PersonResponse:
        person = await load_scoped(db, Person, person_id, user_id, "person")
        last = await self._last_contacts(db, [person.id])
        return _person_response(person, last.get(person.id), utcnow().date())

    async def update_person(
        self, db: AsyncSession, person_id: uuid.UUID, user_id: uuid.UUID, body: PersonUpdate
    ) -> PersonResponse:
        person = await load_scoped(db, Person, person_id, user_id, "person")
        apply_update(person, body)
        await db.flush()
        last = await self._last_contacts(db, [person.id])
        return _person_response(person, last.get(person.id), utcnow().date())

    async def delete_person(self, db: AsyncSession, person_id: uuid.UUID, user_id: uuid.UUID) -> None:
        person = await load_scoped(db, Person, person_id, user_id, "person")
        await db.delete(person)
        await db.flush()

    # ── Interactions ──────────────────────────────────────────────────────

    async def list_interactions(
        self, db: AsyncSession, person_id: uuid.UUID, user_id: uuid.UUID
    ) -> InteractionListResponse:
        await load_scoped(db, Person, person_id, user_id, "person")
        result = await db.execute(
            select(Interaction)
            .where(Interaction.person_id == person_id)
            .order_by(Interaction.date.desc(), Interaction.created_at.desc())
        )
        return InteractionListResponse(
            interactions=[InteractionResponse.model_validate(i) for i in result.scalars().all()]
        )

    async def add_interaction(
        self, db: AsyncSession, person_id: uuid.UUID, user_id: uuid.UUID, body: InteractionCreate
    ) -> InteractionResponse:
        await load_scoped(db, Person, person_id, user_id, "person")
        interaction = Interaction(
            person_id=person_id,
            user_id=user_id,
            date=body.date,
            type=body.type,
            notes_md=body.notes_md,
            sentiment=body.sentiment,
            duration_minutes=body.duration_minutes,
        )
        db.add(interaction)
        await db.flush()
        return InteractionResponse.model_validate(interaction)

    # ── Birthdays ─────────────────────────────────────────────────────────

    async def upcoming_birthdays(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID, days: int = 30
    ) -> BirthdayListResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(
            select(Person).where(Person.project_id == project_id, Person.birthday.is_not(None))
        )
        today = utcnow().date()
        upcoming = []
        for person in result.scalars().all():
            when, until, age = next_birthday(person.birthday, today)
            if until <= days:
                upcoming.append(
                    BirthdayResponse(
                        id=person.id,
                        name=person.name,
                        birthday=person.birthday,
                        upcoming_birthday=when,
                        days_until_birthday=until,
                        turning_age=age,
                    )
                )
        upcoming.sort(key=lambda b: (b.days_until_birthday, b.name))
        return BirthdayListResponse(birthdays=upcoming)


people_service = PeopleService()
