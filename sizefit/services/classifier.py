"""
Body type classification from chest/waist/hip ratios.

Rules are checked in priority order and the first one that matches wins, so an
athletic chest-to-waist ratio takes precedence over wide hips or a full
midsection even when those ratios would also qualify.
"""
import math
from typing import Callable, List, Mapping, Tuple


class InvalidMeasurementError(ValueError):
    pass


BodyTypeRule = Tuple[Callable[[float, float, float], bool], str]

BODY_TYPE_RULES: List[BodyTypeRule] = [
    (lambda chest, waist, hips: chest / waist >= 1.25, "athletic"),
    (lambda chest, waist, hips: hips / chest > 1.05, "triangle"),
    (lambda chest, waist, hips: waist / chest > 0.9, "oval"),
]

DEFAULT_BODY_TYPE = "rectangle"


def required_measurement(measurements: Mapping[str, float], name: str) -> float:
    value = measurements.get(name)
    if value is None:
        raise InvalidMeasurementError(f'Measurement "{name}" is required')
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidMeasurementError(f'Measurement "{name}" must be a number') from None
    if not math.isfinite(value):
        raise InvalidMeasurementError(f'Measurement "{name}" must be a finite number')
    if value <= 0:
        raise InvalidMeasurementError(f'Measurement "{name}" must be a positive number')
    return value


def classify(measurements: Mapping[str, float], rules: List[BodyTypeRule] = BODY_TYPE_RULES) -> str:
    chest = required_measurement(measurements, "chest")
    waist = required_measurement(measurements, "waist")
    hips = required_measurement(measurements, "hips")

    for predicate, label in rules:
        if predicate(chest, waist, hips):
            return label
    return DEFAULT_BODY_TYPE
