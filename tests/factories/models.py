# tests/factories/models.py
"""Factories for every registered entity kind."""

import datetime

import factory

from admin_service.infrastructure.database.models import (
    Agenda,
    Announcement,
    Church,
    File,
    MissionField,
    Testimonial,
    Volunteer,
)
from tests.factories.base import AsyncSQLModelFactory


class MissionFieldFactory(AsyncSQLModelFactory):
    class Meta:
        model = MissionField

    continent = "América"
    country = "Brasil"
    state = "Rio de Janeiro"
    abbreviation = factory.Sequence(lambda n: f"AMEBR{n:04d}")
    designation = factory.Faker("city", locale="pt_BR")


class ChurchFactory(AsyncSQLModelFactory):
    class Meta:
        model = Church

    name = factory.Sequence(lambda n: f"Igreja {n}")
    description = factory.Faker("sentence", locale="pt_BR")
    image = None
    field_id = None


class VolunteerFactory(AsyncSQLModelFactory):
    class Meta:
        model = Volunteer

    first_name = factory.Faker("first_name", locale="pt_BR")
    last_name = factory.Faker("last_name", locale="pt_BR")
    email = factory.Sequence(lambda n: f"voluntario{n}@example.com")
    phone = None
    joined_date = None
    field_id = None


class AnnouncementFactory(AsyncSQLModelFactory):
    class Meta:
        model = Announcement

    title = factory.Sequence(lambda n: f"Anúncio {n}")
    message = factory.Faker("paragraph", locale="pt_BR")
    date = None
    fixed = False


class AgendaFactory(AsyncSQLModelFactory):
    class Meta:
        model = Agenda

    title = factory.Sequence(lambda n: f"Evento {n}")
    message = factory.Faker("paragraph", locale="pt_BR")
    date = factory.LazyFunction(datetime.date.today)


class TestimonialFactory(AsyncSQLModelFactory):
    class Meta:
        model = Testimonial

    name = factory.Faker("name", locale="pt_BR")
    email = None
    text = factory.Faker("paragraph", locale="pt_BR")


class FileFactory(AsyncSQLModelFactory):
    class Meta:
        model = File

    name = factory.Sequence(lambda n: f"upload-{n}.png")
    original_name = factory.Sequence(lambda n: f"foto-{n}.png")
    mimetype = "image/png"
    size = 1024
