"""Explicit application state shared by the command surface and the services."""

from pydantic import BaseModel, Field

from glucose_log.domain.reading import Reading


class AppState(BaseModel):
    """
    Everything a session knows about.

    The reading collection is only replaced through ``ReadingStore`` commands;
    filter and statistics functions receive it as an argument.
    """

    readings: list[Reading] = Field(default_factory=list)
    period: str = "1week"
    custom_start: str | None = None
    custom_end: str | None = None
    reminder_chat_id: str = ""
