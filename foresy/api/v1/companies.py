"""Company endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foresy.api.v1._authz import authorize, render_result
from foresy.auth.gateway import AuthContext
from foresy.core.dependencies import get_db_session, get_metrics
from foresy.core.metrics import MetricsSink
from foresy.schemas.companies import CompanyCreateRequest, CompanyListResponse, CompanyResponse
from foresy.services.company_service import CompanyService

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("", response_model=CompanyListResponse)
def list_companies(
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(CompanyService(db, metrics=metrics).list_for_user(auth.user))


@router.post("", response_model=CompanyResponse, status_code=201)
def create_company(
    payload: CompanyCreateRequest,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    attributes = payload.model_dump(exclude_unset=True)
    return render_result(CompanyService(db, metrics=metrics).create(auth.user, attributes))
