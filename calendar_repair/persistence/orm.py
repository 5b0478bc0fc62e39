"""
Calendar event ORM model.

Only the columns the repair job reads or writes are mapped. The table is
owned by the calendar application; the job never creates rows in it.
"""

from typing import Optional

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import Mapped

from calendar_repair.core.database import Base


class EventModel(Base):
    """Calendar event row."""

    __tablename__ = "event"

    id: Mapped[int] = Column(Integer, primary_key=True, autoincrement=True)

    reference: Mapped[str] = Column(
        String(255),
        nullable=False,
        default="",
        server_default="",
        index=True,
        doc="Legacy '<id>@<instance>' reference, or empty",
    )

    import_source_id: Mapped[Optional[int]] = Column(
        Integer,
        nullable=True,
        index=True,
        doc="Subscription that imported the event; NULL for organic events",
    )

    # Content
    name: Mapped[str] = Column(Text, nullable=False, default="")
    description: Mapped[Optional[str]] = Column(Text, nullable=True)
    description_format: Mapped[int] = Column(Integer, nullable=False, default=0)
    start_time: Mapped[int] = Column(Integer, nullable=False, default=0)
    duration: Mapped[int] = Column(Integer, nullable=False, default=0)
    priority: Mapped[Optional[int]] = Column(Integer, nullable=True)
    location: Mapped[Optional[str]] = Column(Text, nullable=True)

    # Calendar membership
    category_id: Mapped[int] = Column(Integer, nullable=False, default=0)
    course_id: Mapped[int] = Column(Integer, nullable=False, default=0)
    group_id: Mapped[int] = Column(Integer, nullable=False, default=0)
    user_id: Mapped[int] = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<EventModel(id={self.id}, reference='{self.reference}')>"
