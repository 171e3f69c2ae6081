"""Webhook relay: connector platform -> Airtable -> automation webhook."""
