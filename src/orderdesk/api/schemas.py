"""
orderdesk.api.schemas

Request/response models for the resource routers.

Responsibilities:
- camelCase JSON on the wire, snake_case attributes in Python.
- Input normalization: trimmed strings, naive-UTC datetimes, finite numbers.
- Patch models that tell "field absent" apart from "field set to null".
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar, Generic, TypeVar

from pydantic import (
    AfterValidator,
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    StrictBool,
    StringConstraints,
    model_validator,
)
from pydantic.alias_generators import to_camel

from orderdesk.db.models import OrderStatus


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def _iso_utc(value: datetime) -> str:
    return value.replace(tzinfo=UTC).isoformat()


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]
UtcDatetime = Annotated[datetime, AfterValidator(_to_naive_utc)]
UtcOut = Annotated[datetime, PlainSerializer(_iso_utc, return_type=str, when_used="json")]
Money = Annotated[float, AllowInfNan(False)]
# Bounds of the `Integer` column; larger values would overflow the driver.
Position = Annotated[int, Field(ge=-(2**31), le=2**31 - 1)]

T = TypeVar("T")


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PatchModel(ApiModel):
    """
    Only fields present in the body are applied.

    `non_nullable`: present-but-null is rejected (400).
    `null_defaults`: present-but-null is replaced by the given value.
    """

    non_nullable: ClassVar[frozenset[str]] = frozenset()
    null_defaults: ClassVar[dict[str, Any]] = {}

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> PatchModel:
        for name in sorted(self.model_fields_set & self.non_nullable):
            if getattr(self, name) is None:
                raise ValueError(f"Field '{to_camel(name)}' cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        for name, default in self.null_defaults.items():
            if name in data and data[name] is None:
                data[name] = default
        return data


class Items(BaseModel, Generic[T]):
    items: list[T]


class Item(BaseModel, Generic[T]):
    item: T


class Deleted(BaseModel):
    success: bool = True


# --- clients ----------------------------------------------------------------


class ClientIn(ApiModel):
    name: NonEmptyStr
    contact: TrimmedStr | None = None
    source: TrimmedStr | None = None


class ClientPatch(PatchModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"name"})

    name: NonEmptyStr | None = None
    contact: TrimmedStr | None = None
    source: TrimmedStr | None = None


class ClientOut(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    contact: str | None
    source: str | None
    created_at: UtcOut


# --- orders -----------------------------------------------------------------


class OrderIn(ApiModel):
    client_id: uuid.UUID
    title: NonEmptyStr
    budget: Money | None = None
    status: OrderStatus = OrderStatus.new
    deadline: UtcDatetime | None = None


class OrderPatch(PatchModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"client_id", "title", "status"})
    null_defaults: ClassVar[dict[str, Any]] = {"budget": 0.0}

    client_id: uuid.UUID | None = None
    title: NonEmptyStr | None = None
    budget: Money | None = None
    status: OrderStatus | None = None
    deadline: UtcDatetime | None = None


class OrderStatusIn(ApiModel):
    status: OrderStatus


class OrderOut(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    client_id: uuid.UUID
    title: str
    budget: float
    status: OrderStatus
    deadline: UtcOut | None
    created_at: UtcOut
    updated_at: UtcOut
    client: ClientOut


class OrderRefOut(ApiModel):
    id: uuid.UUID
    title: str


# --- tasks & notes ----------------------------------------------------------


class TaskIn(ApiModel):
    title: NonEmptyStr
    position: Position | None = None


class TaskPatch(PatchModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"title"})
    null_defaults: ClassVar[dict[str, Any]] = {"done": False, "position": 0}

    title: NonEmptyStr | None = None
    done: StrictBool | None = None
    position: Position | None = None


class TaskOut(ApiModel):
    id: uuid.UUID
    order_id: uuid.UUID
    title: str
    done: bool
    position: int


class NoteIn(ApiModel):
    text: NonEmptyStr


class NoteOut(ApiModel):
    id: uuid.UUID
    order_id: uuid.UUID
    text: str
    created_at: UtcOut


# --- templates --------------------------------------------------------------


class TemplateIn(ApiModel):
    title: NonEmptyStr
    body: NonEmptyStr


class TemplatePatch(PatchModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"title", "body"})

    title: NonEmptyStr | None = None
    body: NonEmptyStr | None = None


class TemplateOut(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    body: str
    created_at: UtcOut


# --- reminders --------------------------------------------------------------


class ReminderIn(ApiModel):
    order_id: uuid.UUID
    remind_at: UtcDatetime
    sent: StrictBool | None = None
    channel: TrimmedStr | None = None


class ReminderPatch(PatchModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"remind_at"})
    null_defaults: ClassVar[dict[str, Any]] = {"sent": False, "channel": "TELEGRAM"}

    remind_at: UtcDatetime | None = None
    sent: StrictBool | None = None
    channel: TrimmedStr | None = None


class ReminderOut(ApiModel):
    id: uuid.UUID
    order_id: uuid.UUID
    remind_at: UtcOut
    sent: bool
    channel: str
    created_at: UtcOut
    order: OrderRefOut


class OrderDetailOut(OrderOut):
    tasks: list[TaskOut] = Field(default_factory=list)
    notes: list[NoteOut] = Field(default_factory=list)
    reminders: list[ReminderOut] = Field(default_factory=list)


# --- Module Notes -----------------------------------------------------------
# Response models read ORM attributes directly (`from_attributes`); routers must
# eager-load the relationships a model exposes (`client`, `order`).
