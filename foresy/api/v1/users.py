"""Signup endpoint for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from foresy.api.v1._authz import enforce_rate_limit, render_result, request_origin
from foresy.core.dependencies import get_db_session, get_metrics
from foresy.core.metrics import MetricsSink
from foresy.schemas.auth import SignupRequest, TokenResponse
from foresy.services.auth_service import AuthenticationService

router = APIRouter(tags=["users"])


@router.post("/signup", response_model=TokenResponse, status_code=201)
def signup(
    payload: SignupRequest,
    request: Request,
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    enforce_rate_limit(request, "signup")
    ip_address, user_agent = request_origin(request)
    result = AuthenticationService(db, metrics=metrics).signup(
        payload.email,
        payload.password,
        payload.password_confirmation,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    return render_result(result)
