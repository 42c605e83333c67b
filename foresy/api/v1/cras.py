"""CRA endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from foresy.api.v1._authz import authorize, render_result
from foresy.auth.gateway import AuthContext
from foresy.core.dependencies import get_db_session, get_metrics
from foresy.core.metrics import MetricsSink
from foresy.schemas.common import MessageResponse
from foresy.schemas.cras import CraListResponse, CraResponse, CraWriteRequest
from foresy.services.cra_export_service import CraExportService
from foresy.services.cra_service import CraService

router = APIRouter(prefix="/cras", tags=["cras"])


@router.get("", response_model=CraListResponse)
def list_cras(
    year: str | None = Query(default=None),
    month: str | None = Query(default=None),
    status: str | None = Query(default=None),
    currency: str | None = Query(default=None),
    page: str | None = Query(default=None),
    per_page: str | None = Query(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    result = CraService(db, metrics=metrics).list(
        auth.user,
        year=year,
        month=month,
        status=status,
        currency=currency,
        page=page,
        per_page=per_page,
    )
    return render_result(result)


@router.post("", response_model=CraResponse, status_code=201)
def create_cra(
    payload: CraWriteRequest | None = Body(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    attributes = payload.model_dump(exclude_unset=True) if payload is not None else None
    return render_result(CraService(db, metrics=metrics).create(auth.user, attributes))


@router.get("/{cra_id}", response_model=CraResponse)
def get_cra(
    cra_id: int,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(CraService(db, metrics=metrics).get(auth.user, cra_id))


@router.patch("/{cra_id}", response_model=CraResponse)
def update_cra(
    cra_id: int,
    payload: CraWriteRequest | None = Body(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    attributes = payload.model_dump(exclude_unset=True) if payload is not None else None
    return render_result(CraService(db, metrics=metrics).update(auth.user, cra_id, attributes))


@router.delete("/{cra_id}", response_model=MessageResponse)
def delete_cra(
    cra_id: int,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(CraService(db, metrics=metrics).destroy(auth.user, cra_id))


@router.post("/{cra_id}/submit", response_model=CraResponse)
def submit_cra(
    cra_id: int,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(CraService(db, metrics=metrics).submit(auth.user, cra_id))


@router.post("/{cra_id}/lock", response_model=CraResponse)
def lock_cra(
    cra_id: int,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(CraService(db, metrics=metrics).lock(auth.user, cra_id))


@router.get("/{cra_id}/export")
def export_cra(
    cra_id: int,
    export_format: str = Query(default="csv"),
    include_entries: bool = Query(default=True),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    result = CraExportService(db, metrics=metrics).export(
        auth.user, cra_id, export_format=export_format, include_entries=include_entries
    )
    if result.failure:
        return render_result(result)
    return Response(
        content=result.value("content"),
        media_type=result.value("media_type"),
        headers={"Content-Disposition": f'attachment; filename="{result.value("filename")}"'},
    )
