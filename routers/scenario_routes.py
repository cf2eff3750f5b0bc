from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from middleware.rate_limit import ANALYZE_RATE_LIMIT, limiter
from schemas.scenario import (
    CustomScenarioRequest,
    CustomScenarioResponse,
    ScenarioCreate,
    ScenarioDetailOut,
    ScenarioOut,
    TopicSummary,
)
from services.ai.llm_service import get_llm_client, get_llm_config
from services.auth import require_user_id
from services.scenarios.analysis_service import ScenarioAnalyzer
from services.scenarios.catalog_service import (
    create_scenario,
    get_scenario,
    list_popular_scenarios,
    list_scenarios,
    list_scenarios_by_category,
    record_view,
)
from services.scenarios.errors import InvalidInputError, ScenarioNotFoundError
from services.topic_service import get_topics_by_ids

router = APIRouter()


def get_scenario_analyzer() -> ScenarioAnalyzer:
    return ScenarioAnalyzer(get_llm_client(), timeout_s=get_llm_config().timeout_s)


@router.get("", response_model=List[ScenarioOut])
def get_all_scenarios(db: Session = Depends(get_db)):
    return list_scenarios(db)


@router.get("/popular", response_model=List[ScenarioOut])
def get_popular_scenarios(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return list_popular_scenarios(db, limit=limit)


@router.get("/category/{category}", response_model=List[ScenarioOut])
def get_scenarios_by_category(category: str, db: Session = Depends(get_db)):
    return list_scenarios_by_category(db, category)


@router.post("/analyze", response_model=CustomScenarioResponse)
@limiter.limit(ANALYZE_RATE_LIMIT)
async def analyze_custom_scenario_endpoint(
    request: Request,
    payload: CustomScenarioRequest,
    analyzer: ScenarioAnalyzer = Depends(get_scenario_analyzer),
):
    try:
        result = await analyzer.analyze_custom_scenario(
            payload.scenario_type,
            payload.value,
            payload.direction,
            payload.custom_details,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return CustomScenarioResponse(
        details=result.details,
        impacts=result.impacts,
        ai_enabled=analyzer.ai_enabled,
    )


@router.post("", response_model=ScenarioOut, status_code=status.HTTP_201_CREATED)
def create_catalog_scenario(
    payload: ScenarioCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_user_id),
):
    try:
        return create_scenario(db, payload)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/{scenario_id}", response_model=ScenarioDetailOut)
def get_catalog_scenario(scenario_id: int, db: Session = Depends(get_db)):
    scenario = get_scenario(db, scenario_id)
    if not scenario:
        raise HTTPException(status_code=404, detail="Scenario not found")

    data = ScenarioOut.model_validate(scenario).model_dump(by_alias=True)
    related = get_topics_by_ids(db, scenario.related_topic_ids or [])
    return ScenarioDetailOut(
        **data,
        related_topics=[TopicSummary.model_validate(t) for t in related],
    )


@router.post("/{scenario_id}/view", response_model=ScenarioOut)
def record_scenario_view(scenario_id: int, db: Session = Depends(get_db)):
    try:
        return record_view(db, scenario_id)
    except ScenarioNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
