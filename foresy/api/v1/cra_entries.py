"""CRA entry endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from foresy.api.v1._authz import authorize, render_result
from foresy.auth.gateway import AuthContext
from foresy.core.dependencies import get_db_session, get_metrics
from foresy.core.metrics import MetricsSink
from foresy.schemas.cra_entries import CraEntryDeleteResponse, CraEntryListResponse, CraEntryResponse, CraEntryWriteRequest
from foresy.services.cra_entry_service import CraEntryService

router = APIRouter(prefix="/cras/{cra_id}/entries", tags=["cra_entries"])


@router.get("", response_model=CraEntryListResponse)
def list_entries(
    cra_id: int,
    page: str | None = Query(default=None),
    per_page: str | None = Query(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(CraEntryService(db, metrics=metrics).list(auth.user, cra_id, page=page, per_page=per_page))


@router.post("", response_model=CraEntryResponse, status_code=201)
def create_entry(
    cra_id: int,
    payload: CraEntryWriteRequest | None = Body(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    attributes = payload.model_dump(exclude_unset=True) if payload is not None else None
    return render_result(CraEntryService(db, metrics=metrics).create(auth.user, cra_id, attributes))


@router.get("/{entry_id}", response_model=CraEntryResponse)
def get_entry(
    cra_id: int,
    entry_id: int,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(CraEntryService(db, metrics=metrics).get(auth.user, cra_id, entry_id))


@router.patch("/{entry_id}", response_model=CraEntryResponse)
def update_entry(
    cra_id: int,
    entry_id: int,
    payload: CraEntryWriteRequest | None = Body(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    attributes = payload.model_dump(exclude_unset=True) if payload is not None else None
    return render_result(CraEntryService(db, metrics=metrics).update(auth.user, cra_id, entry_id, attributes))


@router.delete("/{entry_id}", response_model=CraEntryDeleteResponse)
def delete_entry(
    cra_id: int,
    entry_id: int,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(CraEntryService(db, metrics=metrics).destroy(auth.user, cra_id, entry_id))
