from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.scenario import UserScenarioCreate, UserScenarioOut, UserScenarioUpdate
from services.auth import require_user_id
from services.scenarios.errors import ScenarioNotFoundError
from services.scenarios.user_scenario_service import (
    delete_user_scenario,
    list_user_scenarios,
    save_user_scenario,
    update_user_scenario,
)

router = APIRouter()


@router.get("", response_model=List[UserScenarioOut])
def get_saved_scenarios(
    db: Session = Depends(get_db),
    user_id: int = Depends(require_user_id),
):
    return list_user_scenarios(db, user_id)


@router.post("", response_model=UserScenarioOut, status_code=status.HTTP_201_CREATED)
def save_scenario(
    payload: UserScenarioCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_user_id),
):
    try:
        return save_user_scenario(
            db,
            user_id,
            scenario_id=payload.scenario_id,
            notes=payload.notes,
            is_favorite=payload.is_favorite,
            custom_parameters=payload.custom_parameters,
        )
    except ScenarioNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.patch("/{user_scenario_id}", response_model=UserScenarioOut)
def update_saved_scenario(
    user_scenario_id: int,
    payload: UserScenarioUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_user_id),
):
    try:
        return update_user_scenario(
            db,
            user_id,
            user_scenario_id,
            notes=payload.notes,
            is_favorite=payload.is_favorite,
            custom_parameters=payload.custom_parameters,
        )
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.delete("/{user_scenario_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_scenario(
    user_scenario_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_user_id),
):
    try:
        delete_user_scenario(db, user_id, user_scenario_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
