from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from shopgo.api.deps import get_current_user_id, get_get_me_use_case
from shopgo.api.schemas.me import MeResponse
from shopgo.application.use_cases.get_me import GetMeUseCase
from shopgo.domain.exceptions import NotFoundError


router = APIRouter()


@router.get("/v1/me", response_model=MeResponse)
def get_me(
    user_id: str = Depends(get_current_user_id),
    use_case: GetMeUseCase = Depends(get_get_me_use_case),
):
    try:
        output = use_case.execute(user_id=user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MeResponse(user=asdict(output))
