"""Column names for each Airtable table the relay reads or writes.

The Airtable base is shared with other tools, so its column names are an
external contract. Every remote column the relay touches is named here and
nowhere else.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LeadsFields:
    imported: str = "Imported"
    business: str = "Business"
    business_id: str = "BusinessId"
    status: str = "Status"
    phone_type: str = "Phone Type"
    chaser: str = "Chaser"
    source: str = "Source"
    source_id: str = "SourceID"
    lead_type: str = "LeadType"
    name: str = "LeadName"
    email: str = "LeadEmail"
    phone: str = "LeadPhone"
    lead_field_1: str = "LeadField1"
    lead_field_2: str = "LeadField2"
    lead_field_3: str = "LeadField3"
    status_changed: str = "status Change"
    connected: str = "Connected"
    first_call_recording: str = "1st Call Recording"
    first_call_recording_url: str = "1st Call Recording Url"
    report_call_recording: str = "Report Call Recording"
    last_call: str = "Last Call"
    user_fields: str = "User fields"
    connection: str = "Connecters"


@dataclass(frozen=True)
class ConnectionFields:
    connection_id: str = "ConnectionID"
    provider: str = "Provider"
    provider_config_key: str = "ProviderConfigKey"
    client_id: str = "ClientID"
    status: str = "Status"
    environment: str = "Environment"
    operation: str = "Operation"
    created: str = "Created"
    name: str = "Name"
    user: str = "User"
    user_id: str = "UserID"
    chaser: str = "Chaser"
    chaser_id: str = "ChaserID"
    leads: str = "Leads"


@dataclass(frozen=True)
class UserFields:
    email: str = "Email"
    name: str = "Name"
    user_id: str = "UserID"
    chaser: str = "Chaser"
    chaser_id: str = "ChaserID"
    leads: str = "Leads"


LEADS = LeadsFields()
CONNECTIONS = ConnectionFields()
USERS = UserFields()

# Airtable rejects writes of more than 10 records per request
BATCH_LIMIT = 10
