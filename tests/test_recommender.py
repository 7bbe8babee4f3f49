import pytest
from sizefit.services.recommender import Recommender, alternative_sizes, describe_fit, fit_prediction
from sizefit.services.reference_data import MeasurementRange, brands_from_dict


RECTANGLE = {"chest": 95.0, "waist": 80.0, "hips": 96.0}
TRIANGLE = {"chest": 90.0, "waist": 80.0, "hips": 100.0}


def test_adidas_end_to_end():
    res = Recommender().recommend(RECTANGLE, "Adidas")
    assert res == {
        "recommended_size": "M",
        "confidence": 95,
        "body_type": "rectangle",
        "body_type_description": "Similar measurements throughout",
        "brand_fit_style": "regular",
        "advice": [],
        "alternative_sizes": ["S", "L"],
        "fit_prediction": {"chest": "Perfect fit", "waist": "Perfect fit", "hips": "Perfect fit"},
    }


def test_runs_small_and_incompatible_fit_advice_order():
    res = Recommender().recommend(TRIANGLE, "Zara")
    # L: chest 2/92 below, waist and hips inside -> beats M (waist and hips over)
    assert res["recommended_size"] == "L"
    assert res["confidence"] == 95
    assert res["body_type"] == "triangle"
    assert res["advice"] == [
        "Zara tends to run small. Consider sizing up.",
        "This brand's very_slim fit may not be ideal for your triangle body type.",
    ]
    assert res["fit_prediction"] == {"chest": "Loose fit", "waist": "Perfect fit", "hips": "Perfect fit"}


def test_low_confidence_advice():
    res = Recommender().recommend({"chest": 140.0, "waist": 80.0, "hips": 96.0}, "Adidas")
    assert res["body_type"] == "athletic"
    assert res["confidence"] == 50
    assert res["advice"] == ["Consider trying multiple sizes for best fit."]
    assert res["alternative_sizes"] == ["M", "XL"]


def test_extra_measurements_are_ignored():
    res = Recommender().recommend({**RECTANGLE, "height": 180.0, "sleeve_length": 62.0}, "Adidas")
    assert res["recommended_size"] == "M"


@pytest.mark.parametrize("measurements,brand", [(None, "Adidas"), ({}, "Adidas"), (RECTANGLE, ""), (RECTANGLE, None)])
def test_missing_parameters(measurements, brand):
    assert Recommender().recommend(measurements, brand) == {"error": "Missing required parameters"}


def test_unknown_brand():
    assert Recommender().recommend(RECTANGLE, "Gucci") == {"error": 'Brand "Gucci" not found in database'}


def test_zero_waist_is_an_error_result():
    res = Recommender().recommend({"chest": 95.0, "waist": 0, "hips": 96.0}, "Adidas")
    assert res == {"error": 'Measurement "waist" must be a positive number'}


def test_injected_brand_table_with_empty_chart():
    rec = Recommender(brands=brands_from_dict({"Blank": {"fit_style": "regular", "size_chart": {}}}))
    assert rec.supported_brands() == ["Blank"]
    res = rec.recommend(RECTANGLE, "Blank")
    assert res["recommended_size"] is None
    assert res["confidence"] is None
    assert res["advice"] == []
    assert res["alternative_sizes"] == []
    assert res["fit_prediction"] == {}


def test_supported_brands_default():
    rec = Recommender()
    assert "Levi's" in rec.supported_brands()
    assert rec.get_brand("Zara").size_adjustment == 2
    assert rec.get_brand("Gucci") is None


def test_alternative_sizes():
    assert alternative_sizes("XS") == ["S"]
    assert alternative_sizes("XXL") == ["XL"]
    assert alternative_sizes("M") == ["S", "L"]
    assert alternative_sizes("3XL") == []
    assert alternative_sizes(None) == []


def test_describe_fit():
    r = MeasurementRange(93.0, 99.0)  # midpoint 96
    assert describe_fit(90.0, r) == "Loose fit"
    assert describe_fit(100.0, r) == "Snug fit"
    assert describe_fit(97.9, r) == "Perfect fit"
    assert describe_fit(98.0, r) == "Good fit"
    assert describe_fit(93.5, r) == "Good fit"


def test_fit_prediction_without_chart_entry():
    assert fit_prediction(RECTANGLE, None) == {}


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_measurement_is_an_error_result(value):
    res = Recommender().recommend({"chest": value, "waist": 80.0, "hips": 96.0}, "Adidas")
    assert res == {"error": 'Measurement "chest" must be a finite number'}
