"""Pydantic models for inbound Nango webhook events."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class EndUser(BaseModel):
    """End-user identity attached to a connection."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: str | None = Field(None, validation_alias=AliasChoices("id", "endUserId"))
    email: str | None = Field(None, validation_alias=AliasChoices("email", "endUserEmail"))
    display_name: str | None = Field(None, validation_alias=AliasChoices("display_name", "displayName"))


class SyncResults(BaseModel):
    model_config = ConfigDict(extra="allow")

    added: int = 0
    updated: int = 0
    deleted: int = 0


class WebhookEnvelope(BaseModel):
    """The routing keys of a notification posted to ``/webhook``.

    Values are kept as sent; a payload whose discriminators have the wrong
    type simply matches no route.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    from_: Any = Field(None, alias="from")
    type: Any = None
    model: Any = None
    success: Any = None


class WebhookEvent(WebhookEnvelope):
    """A sync or auth notification, validated once its route is known.

    Unknown keys are kept.
    """

    connection_id: Any = Field(None, alias="connectionId")
    provider_config_key: Any = Field(None, alias="providerConfigKey")
    provider: str | None = None
    environment: str | None = None
    operation: str | None = None
    end_user: EndUser | None = Field(None, alias="endUser")
    response_results: SyncResults | None = Field(None, alias="responseResults")
    data: Any = None

    @property
    def added_count(self) -> int:
        if self.response_results is None:
            return 0
        return self.response_results.added
