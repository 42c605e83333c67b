"""Mission endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from foresy.api.v1._authz import authorize, render_result
from foresy.auth.gateway import AuthContext
from foresy.core.dependencies import get_db_session, get_metrics
from foresy.core.metrics import MetricsSink
from foresy.schemas.common import MessageResponse
from foresy.schemas.missions import MissionListResponse, MissionResponse, MissionWriteRequest
from foresy.services.mission_service import MissionService

router = APIRouter(prefix="/missions", tags=["missions"])


@router.get("", response_model=MissionListResponse)
def list_missions(
    page: str | None = Query(default=None),
    per_page: str | None = Query(default=None),
    status: str | None = Query(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    result = MissionService(db, metrics=metrics).list(auth.user, page=page, per_page=per_page, status=status)
    return render_result(result)


@router.post("", response_model=MissionResponse, status_code=201)
def create_mission(
    payload: MissionWriteRequest | None = Body(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    attributes = payload.model_dump(exclude_unset=True) if payload is not None else None
    return render_result(MissionService(db, metrics=metrics).create(auth.user, attributes))


@router.get("/{mission_id}", response_model=MissionResponse)
def get_mission(
    mission_id: int,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(MissionService(db, metrics=metrics).get(auth.user, mission_id))


@router.patch("/{mission_id}", response_model=MissionResponse)
def update_mission(
    mission_id: int,
    payload: MissionWriteRequest | None = Body(default=None),
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    attributes = payload.model_dump(exclude_unset=True) if payload is not None else None
    return render_result(MissionService(db, metrics=metrics).update(auth.user, mission_id, attributes))


@router.delete("/{mission_id}", response_model=MessageResponse)
def archive_mission(
    mission_id: int,
    auth: AuthContext = Depends(authorize),
    db: Session = Depends(get_db_session),
    metrics: MetricsSink = Depends(get_metrics),
):
    return render_result(MissionService(db, metrics=metrics).archive(auth.user, mission_id))
