"""Connect-session and integration catalog endpoints used by the front end."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from leadrelay.dependencies import Proxy
from leadrelay.errors.exceptions import RelayError, UnhandledError, ValidationError
from leadrelay.models.records import CreateSessionRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sessions"])


@router.post("/create-session")
async def create_session(proxy: Proxy, body: CreateSessionRequest | None = None) -> JSONResponse:
    """Create a Nango connect session limited to one integration.

    Nango's status code and body are passed through unchanged.
    """
    body = body or CreateSessionRequest()
    if not body.clientId or not body.toolKey:
        raise ValidationError("Missing clientId or toolKey")

    end_user: dict[str, str] = {"id": body.clientId}
    if body.clientName:
        end_user["display_name"] = body.clientName
    if body.memberEmail:
        end_user["email"] = body.memberEmail

    try:
        status, payload = await proxy.create_connect_session(end_user, [body.toolKey])
    except RelayError:
        raise
    except Exception as exc:
        logger.exception("Error in /create-session")
        raise UnhandledError(exc) from exc
    return JSONResponse(status_code=status, content=payload)


@router.get("/tools")
async def list_tools(proxy: Proxy) -> list[dict]:
    """List the integrations end users can connect."""
    try:
        tools = await proxy.list_integrations()
    except RelayError:
        raise
    except Exception as exc:
        logger.exception("Error fetching tools")
        raise UnhandledError(exc) from exc
    return [tool.model_dump() for tool in tools]
