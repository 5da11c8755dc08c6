"""
Event record with ticket inventory.

Key design decisions:
- `available_tickets` is stored on the event, so a booking only touches one record
- `0 <= available_tickets <= total_tickets` is validated whenever a record is built
- `version` is bumped on every write; bookings and edits use it for
  optimistic concurrency through RecordStore.compare_and_set
"""

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from eventhub.models.base import Record, as_utc, utcnow


class Event(Record):
    id: str
    title: str
    description: str = ""
    date_time: datetime
    location: str
    category: str = "General"
    total_tickets: int = Field(ge=0)
    available_tickets: int = Field(ge=0)
    price: float = Field(ge=0)
    image_url: str = ""
    status: str = "active"
    version: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("date_time")
    @classmethod
    def _normalise_date_time(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def _check_inventory(self) -> "Event":
        if self.available_tickets > self.total_tickets:
            raise ValueError(
                f"available_tickets ({self.available_tickets}) exceeds "
                f"total_tickets ({self.total_tickets})"
            )
        return self

    @property
    def tickets_sold(self) -> int:
        return self.total_tickets - self.available_tickets

    @property
    def date_time_iso(self) -> str:
        return self.to_record()["date_time"]

    def revise(self, **changes) -> "Event":
        """Return a validated copy with `changes` applied and the version bumped."""
        data = self.model_dump()
        data.update(changes)
        data["version"] = self.version + 1
        data["updated_at"] = utcnow()
        return Event.model_validate(data)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, available={self.available_tickets}/{self.total_tickets})>"
