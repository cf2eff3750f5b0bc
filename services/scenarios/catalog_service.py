# services/scenarios/catalog_service.py
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import update
from sqlalchemy.orm import Session

from models.scenario import Scenario
from schemas.scenario import ScenarioCreate
from services.scenarios.errors import InvalidInputError, ScenarioNotFoundError, SchemaViolationError
from services.scenarios.validation import validate_impact_assessment

logger = logging.getLogger(__name__)


def list_scenarios(db: Session) -> List[Scenario]:
    return db.query(Scenario).order_by(Scenario.id.asc()).all()


def get_scenario(db: Session, scenario_id: int) -> Scenario | None:
    return db.get(Scenario, scenario_id)


def list_scenarios_by_category(db: Session, category: str) -> List[Scenario]:
    # Exact, case-sensitive match
    return (
        db.query(Scenario)
        .filter(Scenario.category == category)
        .order_by(Scenario.id.asc())
        .all()
    )


def list_popular_scenarios(db: Session, limit: int = 5) -> List[Scenario]:
    if limit < 0:
        raise InvalidInputError("limit must not be negative")
    return (
        db.query(Scenario)
        .order_by(Scenario.popularity.desc(), Scenario.id.asc())
        .limit(limit)
        .all()
    )


def record_view(db: Session, scenario_id: int) -> Scenario:
    """Increment popularity by one in a single UPDATE, then return the fresh row."""
    result = db.execute(
        update(Scenario)
        .where(Scenario.id == scenario_id)
        .values(popularity=Scenario.popularity + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise ScenarioNotFoundError(scenario_id)
    db.commit()

    scenario = db.get(Scenario, scenario_id)
    if scenario is None:
        raise ScenarioNotFoundError(scenario_id)
    db.refresh(scenario)
    return scenario


def create_scenario(db: Session, payload: ScenarioCreate) -> Scenario:
    try:
        validate_impact_assessment(payload.impacts)
    except SchemaViolationError as exc:
        raise InvalidInputError(f"impacts.{exc}") from exc

    scenario = Scenario(
        title=payload.title,
        description=payload.description,
        category=payload.category,
        difficulty=payload.difficulty,
        details=payload.details.model_dump(mode="json"),
        impacts=payload.impacts.model_dump(mode="json", by_alias=True),
        popularity=0,
        related_topic_ids=list(payload.related_topic_ids),
    )
    db.add(scenario)
    db.commit()
    db.refresh(scenario)
    logger.info("Scenario created id=%s category=%s", scenario.id, scenario.category)
    return scenario
