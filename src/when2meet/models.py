"""Pydantic models for the availability grid and selection results.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Grid models are frozen: they are built once per normalization and only read
afterwards.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

Period = Literal["morning", "afternoon", "evening"]


class RawCell(BaseModel):
    """One 15-minute cell as read from the event's group grid.

    Fields mirror the cell's DOM attributes: data-time, data-col, data-row
    and the label passed to the ShowSlot() mouseover handler.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int  # UTC seconds, multiple of 900
    day: int = Field(ge=0)  # data-col, 0 = first day of the window
    row: int = Field(default=0, ge=0)  # data-row, tiebreak only
    label: str = ""  # e.g. "Monday 09:00:00 AM"


class TimeSlot(RawCell):
    """A raw cell with its chronological slot code, e.g. ``d0t3``."""

    id: str


class TimeBlock(BaseModel):
    """Maximal run of slots in one day spaced exactly 900 seconds apart."""

    model_config = ConfigDict(frozen=True)

    start_timestamp: int
    end_timestamp: int
    start_label: str
    end_label: str
    timestamps: list[int]


class DayGroup(BaseModel):
    """All slots and blocks of one scheduling day (one grid column)."""

    model_config = ConfigDict(frozen=True)

    day_index: int
    weekday_name: str
    full_date_label: str
    slots: list[TimeSlot]
    blocks: list[TimeBlock]


class SlotLookup(RootModel[dict[str, int]]):
    """Slot code to timestamp mapping, case-insensitive on read."""

    root: dict[str, int] = Field(default_factory=dict)

    @field_validator("root")
    @classmethod
    def _lower_keys(cls, value: dict[str, int]) -> dict[str, int]:
        return {key.lower(): ts for key, ts in value.items()}

    def resolve(self, slot_id: str) -> int | None:
        return self.root.get(slot_id.lower())

    def __contains__(self, slot_id: object) -> bool:
        return isinstance(slot_id, str) and slot_id.lower() in self.root

    def __len__(self) -> int:
        return len(self.root)


class SlotRef(BaseModel):
    kind: Literal["slot"] = "slot"
    day: int
    slot_index: int
    code: str = ""  # token as typed, e.g. "D0T01"

    @property
    def slot_id(self) -> str:
        """Lookup key: the typed code lowercased, so "d00t01" is not "d0t1"."""
        return self.code.lower() or f"d{self.day}t{self.slot_index}"


class DayRef(BaseModel):
    kind: Literal["day"] = "day"
    day: int


class PeriodRef(BaseModel):
    kind: Literal["period"] = "period"
    day: int
    period: Period


SelectionToken = Annotated[
    Union[SlotRef, DayRef, PeriodRef], Field(discriminator="kind")
]


class SelectionResult(BaseModel):
    """Parsed selection: unique timestamps in first-seen order.

    ``readable`` holds one ``"{date}: {time}, {time}"`` line per calendar date.
    """

    timestamps: list[int] = Field(default_factory=list)
    readable: list[str] = Field(default_factory=list)
    raw_mode: bool = False


class EventDetails(BaseModel):
    """Everything read from an event page in one visit."""

    name: str
    date_range: str
    url: str
    cells: list[RawCell]
    days: list[DayGroup]
    formatted_availability: list[str] = Field(default_factory=list)


class MarkFailure(BaseModel):
    """One timestamp the submission agent could not mark."""

    timestamp: int
    kind: Literal["target_not_found", "interaction_failed"]
    message: str


class MarkResult(BaseModel):
    marked_count: int = 0
    failures: list[MarkFailure] = Field(default_factory=list)
    result_url: str | None = None


class ToolResult(BaseModel):
    """Structured outcome of a tool operation.

    Failures carry a ``kind`` from the error hierarchy and a message; they
    never carry partial data.
    """

    ok: bool
    kind: str | None = None
    message: str
    data: dict[str, Any] | None = None

    @classmethod
    def success(cls, message: str, **data: Any) -> "ToolResult":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, kind: str, message: str) -> "ToolResult":
        return cls(ok=False, kind=kind, message=message)
