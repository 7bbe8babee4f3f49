from dataclasses import dataclass
from typing import List, Mapping, Tuple

from .classifier import required_measurement
from .reference_data import SIZING_DIMENSIONS, MeasurementRange, SizeChart


# (upper bound on total error, confidence); anything past the last bound gets FLOOR_CONFIDENCE
CONFIDENCE_STEPS: List[Tuple[float, int]] = [
    (0.05, 95),
    (0.10, 85),
    (0.15, 75),
    (0.20, 65),
]
FLOOR_CONFIDENCE = 50


@dataclass(frozen=True)
class SizeMatch:
    size: str | None
    confidence: int | None
    error: float | None = None


def fit_error(value: float, size_range: MeasurementRange) -> float:
    """Relative distance of a body measurement from a size range, 0 when inside it."""
    if size_range.contains(value):
        return 0.0
    if value < size_range.min:
        return (size_range.min - value) / size_range.min
    return (value - size_range.max) / size_range.max


def confidence_for_error(error: float) -> int:
    for bound, confidence in CONFIDENCE_STEPS:
        if error < bound:
            return confidence
    return FLOOR_CONFIDENCE


def score_size(body: Mapping[str, float], ranges: Mapping[str, MeasurementRange]) -> float:
    return sum(fit_error(body[dim], ranges[dim]) for dim in SIZING_DIMENSIONS)


def find_best_size(measurements: Mapping[str, float], chart: SizeChart) -> SizeMatch:
    body = {dim: required_measurement(measurements, dim) for dim in SIZING_DIMENSIONS}

    best_size = None
    best_error = float("inf")

    for size, ranges in chart:
        error = score_size(body, ranges)
        if error < best_error:
            best_error = error
            best_size = size

    if best_size is None:
        return SizeMatch(size=None, confidence=None)

    return SizeMatch(size=best_size, confidence=confidence_for_error(best_error), error=best_error)
