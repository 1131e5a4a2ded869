"""
Pydantic models for API request/response.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional


class RoastRequest(BaseModel):
    temperature: float
    time_seconds: float
    archetype: Optional[str] = None
    moisture: Optional[float] = None
    defects: List[str] = Field(default_factory=list)
    include_analysis: bool = False


class FlavorProfileSchema(BaseModel):
    acidity: float = Field(ge=0, le=10)
    sweetness: float = Field(ge=0, le=10)
    body: float = Field(ge=0, le=10)
    bitterness: float = Field(ge=0, le=10)
    aroma: float = Field(ge=0, le=10)
    aftertaste: float = Field(ge=0, le=10)
    balance: float = Field(default=0.0, ge=0, le=10)
    complexity: float = Field(default=0.0, ge=0, le=10)


class CompoundSchema(BaseModel):
    key: str
    name: str
    concentration: float
    active: bool


class RoastResponse(BaseModel):
    temperature: float
    time_seconds: float
    archetype: str
    moisture: float
    flavor_profile: FlavorProfileSchema
    quality_score: int
    grade: str
    phase_name: Optional[str]
    roast_level: str
    compounds: List[CompoundSchema]
    analysis: Optional[str] = None


class PhaseSchema(BaseModel):
    name: str
    temperature_range: List[float]
    duration_range: List[float]
    dominant_reactions: List[str]
    key_compounds_formed: List[str]


class ServedCoffeeSchema(BaseModel):
    roast: Literal["light", "medium", "dark"]
    flavor: Literal["fruity", "floral", "spicy", "bitter", "sweet"]
    quality: float = Field(ge=0, le=100)


class InteractionRequest(BaseModel):
    type: Literal["coffee_served", "order_taken", "customer_ignored", "recommendation_given"]
    coffee_quality: Optional[float] = Field(default=None, ge=0, le=100)
    response_time: Optional[float] = Field(default=None, ge=0)
    served: Optional[ServedCoffeeSchema] = None
    flavor_profile: Optional[FlavorProfileSchema] = None
    recommended_flavor: Optional[str] = None
    remembered_order: bool = False
    shop_busyness: float = Field(default=0.5, ge=0, le=1)


class InteractionResponse(BaseModel):
    customer_id: str
    event_type: str
    satisfaction: float
    mood: str
    triggers: List[str]
    loyalty: float


class CustomerResponse(BaseModel):
    customer_id: str
    visit_count: int
    loyalty: float
    average_satisfaction: float
    preferred_roast: str
    preferred_flavor: str
    strength: float
    sweetness: float
    acidity: float
    evolution_rate: float
    traits: Dict[str, float]
    adaptations: int


class InsightsResponse(BaseModel):
    strengths: List[str]
    improvements: List[str]
    loyal_customers: List[str]
    recommendations: List[str]
    metrics: Dict[str, float]
