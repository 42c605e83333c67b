"""OAuth callback endpoint for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from foresy.api.v1._authz import render_result, request_origin
from foresy.auth.oauth import OAuthPayload
from foresy.core.dependencies import get_db_session, get_metrics
from foresy.core.metrics import MetricsSink
from foresy.schemas.auth import OAuthCallbackRequest, TokenResponse
from foresy.services.oauth_service import OAuthService

router = APIRouter(prefix="/auth", tags=["oauth"])


@router.post("/{provider}/callback", response_model=TokenResponse)
def callback(
    provider: str,
    request: Request,
    payload: OAuthCallbackRequest | None = None,
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    body = payload.model_dump(exclude_none=True) if payload is not None else None
    oauth_payload = OAuthPayload.from_callback(provider, body)
    ip_address, user_agent = request_origin(request)
    return render_result(OAuthService(db, metrics=metrics).callback(oauth_payload, ip_address=ip_address, user_agent=user_agent))
