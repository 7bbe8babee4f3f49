from typing import Dict, Optional, List
from pydantic import BaseModel, Field


class MeasurementInput(BaseModel):
    chest: float = Field(..., gt=0, allow_inf_nan=False)
    waist: float = Field(..., gt=0, allow_inf_nan=False)
    hips: float = Field(..., gt=0, allow_inf_nan=False)
    height: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    weight: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    shoulders: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    inseam: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    sleeve_length: Optional[float] = Field(None, gt=0, allow_inf_nan=False)


class RecommendRequest(BaseModel):
    measurements: MeasurementInput
    brand: str = Field(..., min_length=1)
    product_type: Optional[str] = None
    save_history: bool = False


class RecommendResponse(BaseModel):
    recommended_size: Optional[str]
    confidence: Optional[int]
    body_type: str
    body_type_description: str
    brand_fit_style: str
    advice: List[str]
    alternative_sizes: List[str]
    fit_prediction: Dict[str, str]
    history_saved: Optional[bool] = None


class BrandInfo(BaseModel):
    name: str
    runs_small: bool
    size_adjustment: int
    fit_style: str
    size_chart: Dict[str, Dict[str, List[float]]]


class StorageResult(BaseModel):
    success: bool
    error: Optional[str] = None
