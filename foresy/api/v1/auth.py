"""Auth endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from foresy.api.v1._authz import authorize, enforce_rate_limit, render_result, request_origin
from foresy.auth.gateway import AuthContext
from foresy.core.dependencies import get_db_session, get_metrics
from foresy.core.metrics import MetricsSink
from foresy.schemas.auth import LoginRequest, RefreshRequest, RevokeAllResponse, SessionListResponse, TokenResponse
from foresy.schemas.common import MessageResponse
from foresy.services.auth_service import AuthenticationService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    enforce_rate_limit(request, "auth.login")
    ip_address, user_agent = request_origin(request)
    result = AuthenticationService(db, metrics=metrics).login(
        payload.email, payload.password, ip_address=ip_address, user_agent=user_agent
    )
    return render_result(result)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    payload: RefreshRequest,
    request: Request,
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    ip_address, user_agent = request_origin(request)
    result = AuthenticationService(db, metrics=metrics).refresh(
        payload.refresh_token, ip_address=ip_address, user_agent=user_agent
    )
    return render_result(result)


@router.delete("/logout", response_model=MessageResponse)
def logout(
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(AuthenticationService(db, metrics=metrics).logout(auth.session))


@router.delete("/revoke", response_model=MessageResponse)
def revoke(
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(AuthenticationService(db, metrics=metrics).revoke(auth.session))


@router.delete("/revoke_all", response_model=RevokeAllResponse)
def revoke_all(
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(AuthenticationService(db, metrics=metrics).revoke_all(auth.user))


@router.get("/sessions", response_model=SessionListResponse)
def sessions(
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(AuthenticationService(db, metrics=metrics).list_sessions(auth.user))
