"""
Customer learning API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from src.app_layer.dependencies import get_learning_manager
from src.app_layer.schemas import (
    CustomerResponse,
    InsightsResponse,
    InteractionRequest,
    InteractionResponse,
)
from src.chemistry_layer.flavor import FlavorProfile
from src.simulation_layer.learning_manager import CustomerLearningManager
from src.simulation_layer.models import GameContext, InteractionEvent, ServedCoffee

router = APIRouter()


@router.get("/insights", response_model=InsightsResponse)
def get_insights(manager: CustomerLearningManager = Depends(get_learning_manager)):
    insights = manager.generate_player_insights()
    insights["metrics"] = manager.get_global_metrics()
    return insights


@router.post("/{customer_id}/interactions", response_model=InteractionResponse)
def record_interaction(
    customer_id: str,
    request: InteractionRequest,
    manager: CustomerLearningManager = Depends(get_learning_manager),
):
    """Feed one service interaction into the customer's learning loop."""
    event = InteractionEvent(
        type=request.type,
        customer_id=customer_id,
        coffee_quality=request.coffee_quality,
        response_time=request.response_time,
        served=ServedCoffee(**request.served.model_dump()) if request.served else None,
        flavor_profile=FlavorProfile(**request.flavor_profile.model_dump()) if request.flavor_profile else None,
        recommended_flavor=request.recommended_flavor,
        remembered_order=request.remembered_order,
        context=GameContext(shop_busyness=request.shop_busyness),
    )
    outcome = manager.process_interaction(event)
    return vars(outcome)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: str, manager: CustomerLearningManager = Depends(get_learning_manager)):
    if not manager.customer_exists(customer_id):
        raise HTTPException(status_code=404, detail=f"Customer {customer_id} not found")
    customer = manager.get_customer(customer_id)
    analytics = customer.get_analytics()
    analytics["traits"] = {
        name: round(value, 3)
        for name, value in customer.personality.effective_intensities().items()
    }
    return analytics
