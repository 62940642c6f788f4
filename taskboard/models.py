# PURPOSE: Pydantic schemas for requests, responses and the shared validation rules.
# Wire format is camelCase (dueDate, createdAt, inProgress, ...); input also
# accepts snake_case names.

from datetime import UTC, datetime
from typing import Any, Literal, get_args

from email_validator import EmailNotValidError, validate_email
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

Status = Literal["pending", "in-progress", "completed"]
Priority = Literal["low", "medium", "high"]

STATUSES: tuple[str, ...] = get_args(Status)
PRIORITIES: tuple[str, ...] = get_args(Priority)

TITLE_MAX_LENGTH = 100
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
BIO_MAX_LENGTH = 500
PASSWORD_MIN_LENGTH = 6

DEFAULT_STATUS: Status = "pending"
DEFAULT_PRIORITY: Priority = "medium"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Shared field rules ----------------------------------------------------


def _clean_title(value: Any, *, allow_none: bool = False) -> Any:
    if value is None and allow_none:
        return None
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("title_required", "Title is required")
    if not isinstance(value, str):
        return value  # let str validation report the type error
    value = value.strip()
    if len(value) > TITLE_MAX_LENGTH:
        raise PydanticCustomError(
            "title_too_long",
            "Title cannot exceed {max_length} characters",
            {"max_length": TITLE_MAX_LENGTH},
        )
    return value


def _check_description(value: Any) -> Any:
    if isinstance(value, str) and len(value) > DESCRIPTION_MAX_LENGTH:
        raise PydanticCustomError(
            "description_too_long",
            "Description cannot exceed {max_length} characters",
            {"max_length": DESCRIPTION_MAX_LENGTH},
        )
    return value


def _check_choice(value: Any, choices: tuple[str, ...], field: str, *, allow_none: bool = False) -> Any:
    if value is None and allow_none:
        return None
    if value not in choices:
        raise PydanticCustomError(f"{field}_invalid", f"Invalid {field}")
    return value


def _to_utc_naive(value: datetime | None) -> datetime | None:
    # due_date is stored in a naive column; keep every value as UTC wall time
    if value is not None and value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def _clean_name(value: Any, message: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("name_required", message)
    if not isinstance(value, str):
        return value
    value = value.strip()
    if len(value) > NAME_MAX_LENGTH:
        raise PydanticCustomError(
            "name_too_long",
            "Name cannot exceed {max_length} characters",
            {"max_length": NAME_MAX_LENGTH},
        )
    return value


def normalize_email(value: Any) -> Any:
    """Validate the email shape and return its canonical (trimmed, lower-case) form."""
    if not isinstance(value, str):
        return value
    try:
        result = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError as err:
        raise PydanticCustomError("email_invalid", "Please provide a valid email") from err
    return result.normalized.lower()


# --- Task schemas ----------------------------------------------------------


class TaskCreate(CamelModel):
    title: str
    description: str | None = None
    status: Status = DEFAULT_STATUS
    priority: Priority = DEFAULT_PRIORITY
    due_date: datetime | None = None
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [
                {"title": "Write report", "priority": "high"},
                {"title": "Plan trip", "status": "in-progress", "dueDate": "2025-12-31T18:00:00Z"},
            ]
        },
    )

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value):
        return _clean_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value):
        return _check_description(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        return _check_choice(value, STATUSES, "status")

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value):
        return _check_choice(value, PRIORITIES, "priority")

    @field_validator("due_date")
    @classmethod
    def _due_date(cls, value):
        return _to_utc_naive(value)


class TaskUpdate(CamelModel):
    """Partial update: only fields present in the request body are applied."""

    title: str | None = None
    description: str | None = None
    status: Status | None = None
    priority: Priority | None = None
    due_date: datetime | None = None
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [
                {"status": "completed"},
                {"priority": "low", "dueDate": None},
                {"title": "New title"},
            ]
        },
    )

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value):
        return _clean_title(value, allow_none=True)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value):
        return _check_description(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        return _check_choice(value, STATUSES, "status", allow_none=True)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value):
        return _check_choice(value, PRIORITIES, "priority", allow_none=True)

    @field_validator("due_date")
    @classmethod
    def _due_date(cls, value):
        return _to_utc_naive(value)


class Task(CamelModel):
    id: int
    user: int = Field(validation_alias=AliasChoices("user_id", "user"), serialization_alias="user")
    title: str
    description: str | None = None
    status: Status
    priority: Priority
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value):
        # stored values are naive UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class TaskStats(CamelModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    high_priority: int = 0
    medium_priority: int = 0
    low_priority: int = 0


# --- User / Auth schemas ---------------------------------------------------


class SignupRequest(BaseModel):
    name: str
    email: str
    password: str
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [{"name": "Ada", "email": "ada@example.com", "password": "secret1"}]
        },
    )

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value):
        return _clean_name(value, "Name is required")

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value):
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {min_length} characters",
                {"min_length": PASSWORD_MIN_LENGTH},
            )
        return value


class LoginRequest(BaseModel):
    email: str
    password: str
    model_config = ConfigDict(extra="ignore")

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value):
        return normalize_email(value)

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, value):
        if value is None or value == "":
            raise PydanticCustomError("password_required", "Password is required")
        return value


class ProfileUpdate(BaseModel):
    # email and password are not updatable through the profile
    name: str | None = None
    bio: str | None = None
    avatar: str | None = None
    model_config = ConfigDict(extra="ignore")

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value):
        if value is None:
            return None
        return _clean_name(value, "Name cannot be empty")

    @field_validator("bio", mode="before")
    @classmethod
    def _bio(cls, value):
        if isinstance(value, str) and len(value) > BIO_MAX_LENGTH:
            raise PydanticCustomError(
                "bio_too_long",
                "Bio cannot exceed {max_length} characters",
                {"max_length": BIO_MAX_LENGTH},
            )
        return value


class UserPublic(CamelModel):
    id: int
    name: str
    email: str
    bio: str | None = None
    avatar: str | None = None
    created_at: datetime


# --- Response envelopes ----------------------------------------------------


class Envelope(BaseModel):
    success: bool = True


class MessageResponse(Envelope):
    message: str


class TaskResponse(Envelope):
    task: Task


class TaskMutationResponse(TaskResponse):
    message: str


class TaskListResponse(Envelope):
    count: int
    tasks: list[Task]


class TaskDeleteResponse(MessageResponse):
    data: dict = Field(default_factory=dict)


class StatsResponse(Envelope):
    stats: TaskStats


class UserResponse(Envelope):
    user: UserPublic


class ProfileResponse(UserResponse):
    message: str


class AuthResponse(UserResponse):
    token: str
    model_config = ConfigDict(
        json_schema_extra={"examples": [{"success": True, "token": "<jwt>", "user": {"id": 1}}]}
    )
