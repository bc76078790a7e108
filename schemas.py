from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Schema for registration and login. Presence is checked by the user store so
# that a missing field is reported as 400 rather than a schema error.
class Credentials(BaseModel):
    username: str | None = None
    password: str | None = None


# Body of every non-task response, errors included
class Message(BaseModel):
    message: str


class TaskStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"


# Task fields travel as camelCase JSON (dueDate, assignedTo, ...). Values are
# stored as sent: dueDate is not parsed and numbers are kept as their text.
class TaskBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    title: str | None = None
    description: str | None = None
    due_date: str | None = None
    assigned_to: str | None = None
    category: str | None = None


# Anything else sent on create, status included, is ignored
class TaskCreate(TaskBase):
    pass


# Partial update: only the keys actually sent are merged, unknown keys included
class TaskUpdate(TaskBase):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True, extra="allow"
    )

    status: TaskStatus | None = None

    def changes(self) -> dict:
        data = self.model_dump(by_alias=True, exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class Task(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True, extra="allow"
    )

    id: int
    title: str | None = None
    description: str | None = None
    creation_date: datetime
    due_date: str | None = None
    assigned_to: str | None = None
    category: str | None = None
    status: TaskStatus = TaskStatus.PENDING
