"""
Roasting API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends

from src.app_layer.dependencies import get_pipeline
from src.app_layer.schemas import PhaseSchema, RoastRequest, RoastResponse
from src.chemistry_layer.pipeline import RoastPipeline
from src.chemistry_layer.quality import active_compounds, phase_table

router = APIRouter()


@router.post("/simulate", response_model=RoastResponse)
def simulate_roast(request: RoastRequest, pipeline: RoastPipeline = Depends(get_pipeline)):
    """Roast at a fixed setpoint and cup the result."""
    result = pipeline.roast(
        request.temperature,
        request.time_seconds,
        request.archetype,
        request.moisture,
        request.defects,
    )
    body = result.to_dict()
    body["compounds"] = [vars(reading) for reading in active_compounds(result.concentrations)]
    if request.include_analysis:
        body["analysis"] = result.analysis()
    return body


@router.get("/phases", response_model=List[PhaseSchema])
def list_phases():
    return phase_table()
