"""
Brand size charts and body-type profiles.

Everything here is static reference data: frozen dataclasses built once at
import (or from a JSON file at startup) and only ever read afterwards.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple


SIZE_ORDER: List[str] = ["XS", "S", "M", "L", "XL", "XXL"]

SIZING_DIMENSIONS: Tuple[str, ...] = ("chest", "waist", "hips")

FIT_STYLES = {"athletic", "regular", "slim", "very_slim", "relaxed"}


@dataclass(frozen=True)
class MeasurementRange:
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class SizeChart:
    # Declared order is kept; it decides ties in the matcher.
    sizes: Tuple[Tuple[str, Dict[str, MeasurementRange]], ...] = ()

    def labels(self) -> List[str]:
        return [label for label, _ in self.sizes]

    def get(self, label: str | None) -> Dict[str, MeasurementRange] | None:
        for name, ranges in self.sizes:
            if name == label:
                return ranges
        return None

    def __iter__(self):
        return iter(self.sizes)

    def __len__(self) -> int:
        return len(self.sizes)


@dataclass(frozen=True)
class Brand:
    name: str
    runs_small: bool
    size_adjustment: int
    fit_style: str
    size_chart: SizeChart

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "runs_small": self.runs_small,
            "size_adjustment": self.size_adjustment,
            "fit_style": self.fit_style,
            "size_chart": {
                label: {dim: [r.min, r.max] for dim, r in ranges.items()}
                for label, ranges in self.size_chart
            },
        }


@dataclass(frozen=True)
class BodyTypeProfile:
    label: str
    description: str
    avoid: Tuple[str, ...] = ()
    prefer: Tuple[str, ...] = ()


def _chart(raw: Mapping[str, Mapping[str, Any]]) -> SizeChart:
    sizes = []
    for label, dims in raw.items():
        if label not in SIZE_ORDER:
            raise ValueError(f"Unknown size label: {label}")
        ranges = {}
        for dim in SIZING_DIMENSIONS:
            low, high = dims[dim]
            ranges[dim] = MeasurementRange(float(low), float(high))
        sizes.append((label, ranges))
    return SizeChart(tuple(sizes))


def brands_from_dict(raw: Mapping[str, Mapping[str, Any]]) -> Dict[str, Brand]:
    """Build a brand table from plain data, e.g. a parsed JSON document.

    Expected shape::

        {"Nike": {"runs_small": true, "size_adjustment": 1, "fit_style": "athletic",
                  "size_chart": {"S": {"chest": [86, 91], "waist": [71, 76], "hips": [86, 91]}}}}
    """
    brands: Dict[str, Brand] = {}
    for name, info in raw.items():
        fit_style = info.get("fit_style", "regular")
        if fit_style not in FIT_STYLES:
            raise ValueError(f"Unknown fit style for {name}: {fit_style}")
        brands[name] = Brand(
            name=name,
            runs_small=bool(info.get("runs_small", False)),
            size_adjustment=int(info.get("size_adjustment", 0)),
            fit_style=fit_style,
            size_chart=_chart(info.get("size_chart", {})),
        )
    return brands


def load_brands(path: str) -> Dict[str, Brand]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Brand data must be a JSON object keyed by brand name")
    return brands_from_dict(raw)


DEFAULT_BRAND_DATA: Dict[str, Dict[str, Any]] = {
    "Nike": {
        "runs_small": True,
        "size_adjustment": 1,
        "fit_style": "athletic",
        "size_chart": {
            "S": {"chest": (86, 91), "waist": (71, 76), "hips": (86, 91)},
            "M": {"chest": (91, 97), "waist": (76, 81), "hips": (91, 97)},
            "L": {"chest": (97, 104), "waist": (81, 89), "hips": (97, 104)},
            "XL": {"chest": (104, 114), "waist": (89, 99), "hips": (104, 114)},
        },
    },
    "Adidas": {
        "runs_small": False,
        "size_adjustment": 0,
        "fit_style": "regular",
        "size_chart": {
            "S": {"chest": (88, 93), "waist": (73, 78), "hips": (88, 93)},
            "M": {"chest": (93, 99), "waist": (78, 84), "hips": (93, 99)},
            "L": {"chest": (99, 106), "waist": (84, 92), "hips": (99, 106)},
            "XL": {"chest": (106, 116), "waist": (92, 102), "hips": (106, 116)},
        },
    },
    "H&M": {
        "runs_small": True,
        "size_adjustment": 1,
        "fit_style": "slim",
        "size_chart": {
            "S": {"chest": (84, 89), "waist": (70, 75), "hips": (88, 93)},
            "M": {"chest": (89, 94), "waist": (75, 80), "hips": (93, 98)},
            "L": {"chest": (94, 101), "waist": (80, 87), "hips": (98, 105)},
            "XL": {"chest": (101, 110), "waist": (87, 96), "hips": (105, 114)},
        },
    },
    "Zara": {
        "runs_small": True,
        "size_adjustment": 2,  # runs very small
        "fit_style": "very_slim",
        "size_chart": {
            "S": {"chest": (82, 87), "waist": (68, 73), "hips": (86, 91)},
            "M": {"chest": (87, 92), "waist": (73, 78), "hips": (91, 96)},
            "L": {"chest": (92, 99), "waist": (78, 85), "hips": (96, 103)},
            "XL": {"chest": (99, 108), "waist": (85, 94), "hips": (103, 112)},
        },
    },
    "Levi's": {
        "runs_small": False,
        "size_adjustment": 0,
        "fit_style": "relaxed",
        "size_chart": {
            "S": {"chest": (89, 94), "waist": (74, 79), "hips": (89, 94)},
            "M": {"chest": (94, 102), "waist": (79, 87), "hips": (94, 102)},
            "L": {"chest": (102, 112), "waist": (87, 97), "hips": (102, 112)},
            "XL": {"chest": (112, 122), "waist": (97, 107), "hips": (112, 122)},
        },
    },
    "Uniqlo": {
        "runs_small": False,
        "size_adjustment": 0,
        "fit_style": "regular",
        "size_chart": {
            "S": {"chest": (88, 94), "waist": (76, 82), "hips": (91, 97)},
            "M": {"chest": (94, 100), "waist": (82, 88), "hips": (97, 103)},
            "L": {"chest": (100, 108), "waist": (88, 96), "hips": (103, 111)},
            "XL": {"chest": (108, 118), "waist": (96, 106), "hips": (111, 121)},
        },
    },
}

DEFAULT_BRANDS: Dict[str, Brand] = brands_from_dict(DEFAULT_BRAND_DATA)

DEFAULT_BODY_TYPES: Dict[str, BodyTypeProfile] = {
    "athletic": BodyTypeProfile(
        label="athletic",
        description="Broad shoulders, defined chest, narrow waist",
        avoid=("very_slim",),
        prefer=("athletic", "regular"),
    ),
    "rectangle": BodyTypeProfile(
        label="rectangle",
        description="Similar measurements throughout",
        avoid=(),
        prefer=("regular", "relaxed"),
    ),
    "triangle": BodyTypeProfile(
        label="triangle",
        description="Wider hips than chest",
        avoid=("slim", "very_slim"),
        prefer=("regular", "relaxed"),
    ),
    "oval": BodyTypeProfile(
        label="oval",
        description="Fuller midsection",
        avoid=("slim", "very_slim"),
        prefer=("relaxed", "regular"),
    ),
}
