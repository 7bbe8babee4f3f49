from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class ProfileInput(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class MeasurementsInput(BaseModel):
    chest: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    waist: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    hips: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    height: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    weight: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    inseam: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    shoulders: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    sleeve_length: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    unit: str = "cm"


class MeasurementUpdate(BaseModel):
    value: float = Field(..., gt=0, allow_inf_nan=False)


class AvatarInput(BaseModel):
    mesh_data: Any = None
    skin_tone: Optional[str] = None
    hair_style: Optional[str] = None
    body_type: Optional[str] = None


class ScanImageInput(BaseModel):
    image_data: str  # base64 payload or file path


class FavoriteInput(BaseModel):
    id: Optional[str] = None
    brand: Optional[str] = None
    product: Optional[str] = None
    size: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None
    url: Optional[str] = None


class OutfitInput(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total_cost: Optional[float] = None


class PreferencesInput(BaseModel):
    measurement_unit: str = "cm"
    currency: str = "USD"
    notifications: bool = True
    dark_mode: bool = False
    language: str = "en"
    privacy_mode: bool = True


class SubscriptionInput(BaseModel):
    plan: Literal["free", "student", "pro"]
    expires_at: Optional[str] = None
    features: List[str] = Field(default_factory=list)
