from datetime import datetime
from typing import Any, Generic, TypeVar, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

T = TypeVar("T")


class CredlyModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # the API sends null for unset optional fields
        if value is None and info.field_name is not None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


class BadgeTemplate(CredlyModel):
    id: str = ""
    name: str = ""
    skills: list[str] = Field(default_factory=list)
    url: str = ""
    image_url: str = ""
    vanity_slug: str = ""

    def __str__(self):
        return f"BadgeTemplate(id={self.id}, name={self.name})"


class BadgeImage(CredlyModel):
    url: str = ""


class BadgeRecipient(CredlyModel):
    id: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    url: str = ""


class BadgeInfo(CredlyModel):
    id: str = ""
    image_url: str = ""
    url: str = Field(default="", alias="badge_url")
    issued_at: datetime | None = None
    # free-form, e.g. "pending", "accepted", "issued"
    state: str = ""
    image: BadgeImage = Field(default_factory=BadgeImage)
    # snapshot of the template at issuance time
    template: BadgeTemplate = Field(default_factory=BadgeTemplate, alias="badge_template")
    user: BadgeRecipient = Field(default_factory=BadgeRecipient)

    def __str__(self):
        return f"<Badge: {self.id} {self.state} template={self.template.id}>"


class Envelope(CredlyModel, Generic[T]):
    """Every Credly response wraps its payload as ``{"data": ...}``."""

    data: T

    @field_validator("data", mode="before")
    @classmethod
    def null_data(cls, value: Any) -> Any:
        if value is None:
            return [] if get_origin(cls.model_fields["data"].annotation) is list else {}
        return value


class IssueBadgeRequest(CredlyModel):
    badge_template_id: str
    recipient_email: str
    issued_to_first_name: str
    issued_to_last_name: str
    # "YYYY-MM-DD HH:MM:SS +ZZZZ"
    issued_at: str
