"""
Scenario API Routes
Expose the scenario catalog and transition table
"""

from fastapi import APIRouter, HTTPException
from typing import Dict, List

from capital_flow.domain.models import ScenarioNotFound
from capital_flow.domain.schemas.flow import ScenarioRecord

router = APIRouter()


def _catalog():
    from capital_flow.main import config_engine

    if config_engine is None:
        raise HTTPException(status_code=500, detail="Configuration not loaded")
    return config_engine.catalog


@router.get("", response_model=List[ScenarioRecord])
async def list_scenarios():
    """
    Get all scenarios in catalog order
    """
    return [ScenarioRecord.from_domain(s) for s in _catalog().all()]


@router.get("/transitions", response_model=Dict[int, List[int]])
async def get_transitions():
    """
    Get transitional scenario ids and their likely next scenarios
    """
    return {k: list(v) for k, v in _catalog().transition_table.items()}


@router.get("/{scenario_id}", response_model=ScenarioRecord)
async def get_scenario(scenario_id: int):
    """
    Get a single scenario by id
    """
    try:
        return ScenarioRecord.from_domain(_catalog().by_id(scenario_id))
    except ScenarioNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
