"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from foresy.api.v1 import auth, companies, cra_entries, cras, health, missions, oauth, users
from foresy.core.config import get_config


def get_api_router() -> APIRouter:
    api_router = APIRouter(prefix=get_config().API_PREFIX)
    api_router.include_router(health.router)
    api_router.include_router(users.router)
    api_router.include_router(auth.router)
    api_router.include_router(oauth.router)
    api_router.include_router(companies.router)
    api_router.include_router(missions.router)
    api_router.include_router(cras.router)
    api_router.include_router(cra_entries.router)
    return api_router
