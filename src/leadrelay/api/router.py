"""Master API router mounted at the application root."""

from fastapi import APIRouter

from leadrelay.api.routes import health, sessions, webhook

api_router = APIRouter()
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(webhook.router)
api_router.include_router(sessions.router)
