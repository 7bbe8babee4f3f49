from typing import Any, Dict, List, Mapping
import structlog

from .classifier import InvalidMeasurementError, classify
from .matcher import find_best_size
from .reference_data import (
    DEFAULT_BODY_TYPES,
    DEFAULT_BRANDS,
    SIZE_ORDER,
    SIZING_DIMENSIONS,
    BodyTypeProfile,
    Brand,
    MeasurementRange,
)


logger = structlog.get_logger("sizefit")

# Below this confidence the user is told to try several sizes
LOW_CONFIDENCE = 70

# Distance from the range midpoint still counted as a perfect fit
PERFECT_FIT_TOLERANCE = 2


def describe_fit(value: float, size_range: MeasurementRange) -> str:
    if value < size_range.min:
        return "Loose fit"
    if value > size_range.max:
        return "Snug fit"
    if abs(value - size_range.midpoint) < PERFECT_FIT_TOLERANCE:
        return "Perfect fit"
    return "Good fit"


def fit_prediction(measurements: Mapping[str, float], ranges: Mapping[str, MeasurementRange] | None) -> Dict[str, str]:
    if not ranges:
        return {}
    return {dim: describe_fit(float(measurements[dim]), ranges[dim]) for dim in SIZING_DIMENSIONS}


def alternative_sizes(size: str | None) -> List[str]:
    if size not in SIZE_ORDER:
        return []
    index = SIZE_ORDER.index(size)
    alternatives = []
    if index > 0:
        alternatives.append(SIZE_ORDER[index - 1])
    if index < len(SIZE_ORDER) - 1:
        alternatives.append(SIZE_ORDER[index + 1])
    return alternatives


class Recommender:
    """Scores a user's measurements against one brand's size chart.

    Holds no mutable state: the brand and body-type tables are injected once
    and only read, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        brands: Mapping[str, Brand] | None = None,
        body_types: Mapping[str, BodyTypeProfile] | None = None,
        default_product_type: str = "shirt",
    ) -> None:
        self.brands = dict(brands if brands is not None else DEFAULT_BRANDS)
        self.body_types = dict(body_types if body_types is not None else DEFAULT_BODY_TYPES)
        self.default_product_type = default_product_type

    def supported_brands(self) -> List[str]:
        return list(self.brands)

    def get_brand(self, name: str) -> Brand | None:
        return self.brands.get(name)

    def recommend(
        self,
        measurements: Mapping[str, Any] | None,
        brand_name: str | None,
        product_type: str | None = None,
    ) -> Dict[str, Any]:
        if not measurements or not brand_name:
            return {"error": "Missing required parameters"}

        brand = self.brands.get(brand_name)
        if brand is None:
            return {"error": f'Brand "{brand_name}" not found in database'}

        try:
            body_type = classify(measurements)
            match = find_best_size(measurements, brand.size_chart)
        except InvalidMeasurementError as e:
            logger.info("recommendation_rejected", brand=brand_name, error=str(e))
            return {"error": str(e)}

        profile = self.body_types[body_type]
        fit_style_compatible = brand.fit_style not in profile.avoid

        advice: List[str] = []
        if brand.runs_small:
            advice.append(f"{brand.name} tends to run small. Consider sizing up.")
        if not fit_style_compatible:
            advice.append(f"This brand's {brand.fit_style} fit may not be ideal for your {body_type} body type.")
        if match.confidence is not None and match.confidence < LOW_CONFIDENCE:
            advice.append("Consider trying multiple sizes for best fit.")

        logger.debug(
            "recommendation_created",
            brand=brand.name,
            product_type=product_type or self.default_product_type,
            body_type=body_type,
            size=match.size,
            error=match.error,
            confidence=match.confidence,
        )

        return {
            "recommended_size": match.size,
            "confidence": match.confidence,
            "body_type": body_type,
            "body_type_description": profile.description,
            "brand_fit_style": brand.fit_style,
            "advice": advice,
            "alternative_sizes": alternative_sizes(match.size),
            "fit_prediction": fit_prediction(measurements, brand.size_chart.get(match.size)),
        }
