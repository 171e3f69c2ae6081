"""Pydantic models for records moving between Nango, Airtable and n8n."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FetchedContact(BaseModel):
    """A contact record returned by the Nango records endpoint.

    Providers populate different subsets of these keys; everything else is
    kept as extra data.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    mobile_phone_number: str | None = None
    phone_type: str | None = None
    company: str | None = None
    company_id: str | None = None
    owner: str | None = None
    lead_type: str | None = None
    lead_status: str | None = None
    created_date: str | None = None
    custom_field_1: Any = None
    custom_field_2: Any = None
    custom_field_3: Any = None
    first_call_id: str | None = None
    first_call_url: str | None = None
    report_call_id: str | None = None
    last_contacted: Any = None
    user_ids: Any = None


class StoredRecord(BaseModel):
    """A row as returned by the Airtable REST API."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    fields: dict[str, Any] = Field(default_factory=dict)
    created_time: str | None = Field(None, alias="createdTime")


class ForwardedLead(BaseModel):
    """Normalized lead pushed to the automation webhook.

    Serialized with the key names the n8n workflow expects.
    """

    model_config = ConfigDict(populate_by_name=True)

    record_id: str = Field(..., serialization_alias="Chaser ID")
    source: str = Field("", serialization_alias="Lead Source")
    name: str = Field(..., serialization_alias="Lead Name")
    email: str = Field("", serialization_alias="Lead Email")
    phone: str = Field("", serialization_alias="Lead Phone")
    source_id: str = Field("", serialization_alias="Lead ID")

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class Tool(BaseModel):
    """An integration offered to end users, reduced from the Nango catalog."""

    key: str
    provider: str | None = None
    name: str | None = None
    logo: str | None = None


class CreateSessionRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    clientId: str | None = None
    toolKey: str | None = None
    clientName: str | None = None
    memberEmail: str | None = None
