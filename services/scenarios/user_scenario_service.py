from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from models.scenario import Scenario, UserScenario
from services.scenarios.errors import ScenarioNotFoundError


def list_user_scenarios(db: Session, user_id: int) -> List[UserScenario]:
    return (
        db.query(UserScenario)
        .options(selectinload(UserScenario.scenario))
        .filter(UserScenario.user_id == user_id)
        .order_by(UserScenario.is_favorite.desc(), UserScenario.created_at.asc(), UserScenario.id.asc())
        .all()
    )


def get_user_scenario(db: Session, user_id: int, user_scenario_id: int) -> UserScenario | None:
    return (
        db.query(UserScenario)
        .options(selectinload(UserScenario.scenario))
        .filter(UserScenario.user_id == user_id, UserScenario.id == user_scenario_id)
        .first()
    )


def _find_bookmark(db: Session, user_id: int, scenario_id: int) -> UserScenario | None:
    return (
        db.query(UserScenario)
        .filter(UserScenario.user_id == user_id, UserScenario.scenario_id == scenario_id)
        .first()
    )


def save_user_scenario(
    db: Session,
    user_id: int,
    *,
    scenario_id: int,
    notes: str | None = None,
    is_favorite: bool = False,
    custom_parameters: Dict[str, Any] | None = None,
) -> UserScenario:
    if db.get(Scenario, scenario_id) is None:
        raise ScenarioNotFoundError(scenario_id)

    if _find_bookmark(db, user_id, scenario_id) is not None:
        raise ValueError("Scenario already saved")

    saved = UserScenario(
        user_id=user_id,
        scenario_id=scenario_id,
        notes=notes,
        is_favorite=is_favorite,
        custom_parameters=custom_parameters,
    )
    db.add(saved)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent save won the unique (user_id, scenario_id) slot
        db.rollback()
        raise ValueError("Scenario already saved")
    return get_user_scenario(db, user_id, saved.id)  # type: ignore[return-value]


def update_user_scenario(
    db: Session,
    user_id: int,
    user_scenario_id: int,
    *,
    notes: str | None = None,
    is_favorite: bool | None = None,
    custom_parameters: Dict[str, Any] | None = None,
) -> UserScenario:
    saved = get_user_scenario(db, user_id, user_scenario_id)
    if not saved:
        raise ValueError("Saved scenario not found")

    if notes is not None:
        saved.notes = notes
    if is_favorite is not None:
        saved.is_favorite = is_favorite
    if custom_parameters is not None:
        saved.custom_parameters = custom_parameters

    db.commit()
    return get_user_scenario(db, user_id, user_scenario_id)  # type: ignore[return-value]


def delete_user_scenario(db: Session, user_id: int, user_scenario_id: int) -> None:
    """Remove the bookmark only; the catalog scenario is untouched."""
    saved = get_user_scenario(db, user_id, user_scenario_id)
    if not saved:
        raise ValueError("Saved scenario not found")
    db.delete(saved)
    db.commit()
