# app/schemas/diagnosis/diagnosis.py
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

class EstimateRequestBody(BaseModel):
    category: str
    issue: str = Field(min_length=1)
    brand: Optional[str] = Field(default=None, max_length=100)
    model: Optional[str] = Field(default=None, max_length=100)
    custom_issue: Optional[str] = Field(default=None, max_length=1000)

class EstimateResponse(BaseModel):
    diagnosis: str
    estimated_cost: int
    currency: str
    source: str  # static | ai | heuristic
    is_custom_issue: bool
    provider: Optional[str] = None
    diagnosis_id: Optional[str] = None

class CatalogResponse(BaseModel):
    categories: List[str]
    issues: Dict[str, List[str]]
    custom_issue: str
    service_types: List[str]
    rejection_reasons: List[str]
    cancellation_reasons: List[str]
