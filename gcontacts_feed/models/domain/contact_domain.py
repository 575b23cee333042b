# models/domain/contact_domain.py
"""
Contact Domain Models
Application-facing view of a contact, flattened from the GData entry format.

Every field is optional and absence is modeled as None, so the translator can
tell "not supplied" apart from "supplied as empty". Payload keys are accepted
in the camelCase form used on the wire (fileAs, orgName, phoneNumber) as well
as in snake_case.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ContactModel(BaseModel):
    """Shared configuration for contact payload models."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Name(ContactModel):
    """Structured name. The three parts are independent; none overwrites another."""

    full_name: str | None = None
    given_name: str | None = None
    family_name: str | None = None

    def has_value(self) -> bool:
        return any([self.full_name, self.given_name, self.family_name])


class Email(ContactModel):
    address: str | None = None
    type: str | None = None
    rel: str | None = None
    primary: bool | None = None
    label: str | None = None


class PhoneNumber(ContactModel):
    number: str | None = Field(None, validation_alias=AliasChoices("number", "phoneNumber"))
    type: str | None = None
    rel: str | None = None
    label: str | None = None


class Organization(ContactModel):
    org_name: str | None = None
    org_title: str | None = None
    type: str | None = None
    rel: str | None = None


class StructuredPostalAddress(ContactModel):
    formatted_address: str | None = None
    type: str | None = None
    rel: str | None = None
    label: str | None = None


class UserDefinedField(ContactModel):
    key: str | None = None
    value: str | None = None


class Event(ContactModel):
    when: str | None = None
    type: str | None = None
    rel: str | None = None
    label: str | None = None


class Relation(ContactModel):
    value: str | None = Field(None, validation_alias=AliasChoices("value", "relation"))
    type: str | None = None
    rel: str | None = None
    label: str | None = None


class Website(ContactModel):
    href: str | None = None
    type: str | None = None
    rel: str | None = None
    primary: bool | None = None
    label: str | None = None


class Im(ContactModel):
    address: str | None = None
    protocol: str | None = None
    type: str | None = None
    rel: str | None = None
    label: str | None = None


class GroupMembershipInfo(ContactModel):
    href: str | None = None
    deleted: bool | None = None


REPEATABLE_FIELDS = (
    "email",
    "phone_number",
    "organization",
    "structured_postal_address",
    "user_defined_field",
    "event",
    "relation",
    "website",
    "im",
    "group_membership_info",
)


class Contact(ContactModel):
    """A contact as supplied by callers of create/update."""

    id: str | None = None
    name: Name | None = None

    email: list[Email] | None = None
    phone_number: list[PhoneNumber] | None = None
    organization: list[Organization] | None = None
    structured_postal_address: list[StructuredPostalAddress] | None = None
    user_defined_field: list[UserDefinedField] | None = None
    event: list[Event] | None = None
    relation: list[Relation] | None = None
    website: list[Website] | None = None
    im: list[Im] | None = None
    group_membership_info: list[GroupMembershipInfo] | None = None

    title: str | None = None
    content: str | None = None
    nickname: str | None = None
    file_as: str | None = None
    birthday: str | None = None

    @field_validator(*REPEATABLE_FIELDS, mode="before")
    @classmethod
    def _wrap_single_entry(cls, value: Any) -> Any:
        # A lone object is shorthand for a one-element list.
        if value is None or isinstance(value, (list, tuple)):
            return value
        return [value]

    def has_name(self) -> bool:
        return self.name is not None and self.name.has_value()

    def has_id(self) -> bool:
        return bool(self.id)
