# backend/caras/api/join.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from caras.api.notices import notice
from caras.db import get_db
from caras.dependencies import get_query_cache
from caras.schemas.join import AgePreview, JoinResult, JoinSubmission
from caras.services import join as svc
from caras.services.query_cache import APPLICATIONS_KEY, STATS_KEY, QueryCache

router = APIRouter(prefix="/join", tags=["Join"])


@router.post("", response_model=JoinResult, status_code=status.HTTP_201_CREATED)
def submit(
    payload: JoinSubmission,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> JoinResult:
    try:
        result = svc.submit_application(db, payload)
    except svc.JoinValidationError as err:
        raise notice(status.HTTP_422_UNPROCESSABLE_ENTITY, err.title, err.description)
    cache.invalidate(APPLICATIONS_KEY, STATS_KEY)
    return result


@router.get("/age", response_model=AgePreview)
def age_preview(birthday: str = Query(..., description="YYYY-MM-DD")) -> AgePreview:
    parsed = svc.parse_birthday(birthday)
    return AgePreview(birthday=birthday, age=svc.compute_age(parsed) if parsed else None)
