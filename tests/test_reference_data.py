import json
import pytest
from sizefit.services.reference_data import DEFAULT_BODY_TYPES, DEFAULT_BRANDS, SIZE_ORDER, brands_from_dict, load_brands


def test_default_tables():
    assert list(DEFAULT_BRANDS) == ["Nike", "Adidas", "H&M", "Zara", "Levi's", "Uniqlo"]
    assert set(DEFAULT_BODY_TYPES) == {"athletic", "rectangle", "triangle", "oval"}
    for brand in DEFAULT_BRANDS.values():
        assert set(brand.size_chart.labels()) <= set(SIZE_ORDER)


def test_chart_keeps_declared_order():
    assert DEFAULT_BRANDS["Nike"].size_chart.labels() == ["S", "M", "L", "XL"]
    chest = DEFAULT_BRANDS["Nike"].size_chart.get("S")["chest"]
    assert (chest.min, chest.max) == (86.0, 91.0)


def test_load_brands_from_json(tmp_path):
    path = tmp_path / "brands.json"
    path.write_text(json.dumps({
        "Acme": {
            "runs_small": True,
            "size_adjustment": 1,
            "fit_style": "slim",
            "size_chart": {"M": {"chest": [90, 96], "waist": [76, 82], "hips": [90, 96]}},
        }
    }))
    brands = load_brands(str(path))
    assert brands["Acme"].runs_small is True
    assert brands["Acme"].size_chart.get("M")["waist"].max == 82.0
    assert brands["Acme"].to_dict()["size_chart"]["M"]["chest"] == [90.0, 96.0]


def test_unknown_size_label_rejected():
    with pytest.raises(ValueError, match="XXXL"):
        brands_from_dict({"Acme": {"size_chart": {"XXXL": {"chest": [1, 2], "waist": [1, 2], "hips": [1, 2]}}}})


def test_unknown_fit_style_rejected():
    with pytest.raises(ValueError, match="baggy"):
        brands_from_dict({"Acme": {"fit_style": "baggy", "size_chart": {}}})
