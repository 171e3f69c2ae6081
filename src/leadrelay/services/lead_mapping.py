"""Pure mapping from fetched contacts to Airtable rows and n8n payloads."""

from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any

from leadrelay.integrations.field_maps import LEADS
from leadrelay.models.records import FetchedContact, ForwardedLead, StoredRecord

UNKNOWN_LEAD_NAME = "Unknown Lead"


def _as_contact(contact: FetchedContact | Mapping[str, Any]) -> FetchedContact:
    if isinstance(contact, FetchedContact):
        return contact
    return FetchedContact.model_validate(dict(contact))


def derive_lead_name(contact: FetchedContact | Mapping[str, Any]) -> str:
    """``first last`` when either part is present, else the email, else a placeholder."""
    contact = _as_contact(contact)
    if contact.first_name or contact.last_name:
        return f"{contact.first_name or ''} {contact.last_name or ''}".strip()
    return contact.email or UNKNOWN_LEAD_NAME


def derive_phone(contact: FetchedContact | Mapping[str, Any]) -> str:
    contact = _as_contact(contact)
    return contact.mobile_phone_number or contact.phone or ""


def _parse_date(value: str | None) -> str | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def _optional_columns(contact: FetchedContact) -> dict[str, Any]:
    """Provider-specific columns, written only when the contact carries a value."""
    candidates = {
        LEADS.business_id: contact.company_id,
        LEADS.chaser: contact.owner,
        LEADS.lead_type: contact.lead_type,
        LEADS.lead_field_1: contact.custom_field_1,
        LEADS.lead_field_2: contact.custom_field_2,
        LEADS.lead_field_3: contact.custom_field_3,
        LEADS.first_call_recording: contact.first_call_id,
        LEADS.first_call_recording_url: contact.first_call_url,
        LEADS.report_call_recording: contact.report_call_id,
        LEADS.last_call: contact.last_contacted,
        LEADS.user_fields: contact.user_ids,
    }
    return {column: value for column, value in candidates.items() if value not in (None, "", [])}


def build_lead_fields(
    contact: FetchedContact,
    provider_config_key: str,
    connection_record_id: str,
    today: date | None = None,
) -> dict[str, Any]:
    """Build the Leads row for one contact, linked to its connection record."""
    today = today or datetime.now(timezone.utc).date()
    fields: dict[str, Any] = {
        LEADS.imported: True,
        LEADS.business: contact.company or "",
        LEADS.status: contact.lead_status or "Active",
        LEADS.phone_type: contact.phone_type or "Mobile",
        LEADS.source: provider_config_key,
        LEADS.source_id: contact.id or "",
        LEADS.name: derive_lead_name(contact),
        LEADS.email: contact.email or "",
        LEADS.phone: derive_phone(contact),
        LEADS.status_changed: today.isoformat(),
        LEADS.connection: [connection_record_id],
    }
    fields.update(_optional_columns(contact))
    connected = _parse_date(contact.created_date)
    if connected:
        fields[LEADS.connected] = connected
    return fields


def build_forwarded_lead(
    contact: FetchedContact,
    stored: StoredRecord,
    provider_config_key: str,
) -> ForwardedLead:
    return ForwardedLead(
        record_id=stored.id,
        source=provider_config_key,
        name=derive_lead_name(contact),
        email=contact.email or "",
        phone=derive_phone(contact),
        source_id=contact.id or "",
    )
