"""
Database models for the admin service.

Every entity kind listed here is also registered in
``admin_service.infrastructure.database.registry``.
"""

from .field import MissionField, MissionFieldCreate, MissionFieldUpdate
from .church import Church, ChurchCreate, ChurchUpdate
from .volunteer import Volunteer, VolunteerCreate, VolunteerUpdate
from .announcement import Announcement, AnnouncementCreate, AnnouncementUpdate
from .agenda import Agenda, AgendaCreate, AgendaUpdate
from .testimonial import Testimonial, TestimonialCreate, TestimonialUpdate
from .file import File, FileCreate, FileUpdate
from .log import Log, LogCreate, LogUpdate

__all__ = [
    "MissionField",
    "MissionFieldCreate",
    "MissionFieldUpdate",
    "Church",
    "ChurchCreate",
    "ChurchUpdate",
    "Volunteer",
    "VolunteerCreate",
    "VolunteerUpdate",
    "Announcement",
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "Agenda",
    "AgendaCreate",
    "AgendaUpdate",
    "Testimonial",
    "TestimonialCreate",
    "TestimonialUpdate",
    "File",
    "FileCreate",
    "FileUpdate",
    "Log",
    "LogCreate",
    "LogUpdate",
]
