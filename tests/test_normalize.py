from listing_pipeline.domain.normalize import normalize_city, normalize_property_type
from listing_pipeline.domain.parsing import is_blank, to_float, to_int, to_str


def test_property_type_maps_onto_listing_types():
    assert normalize_property_type("Villa") == "Villa"
    assert normalize_property_type("Luxury_villa") == "Villa"
    assert normalize_property_type("Independent House") == "Independent House"
    assert normalize_property_type("independent-floor") == "Independent House"
    assert normalize_property_type("Flat") == "Apartment"
    assert normalize_property_type(None) == "Apartment"


def test_city_comparison_key():
    assert normalize_city("  Hyderabad ") == "hyderabad"
    assert normalize_city(None) == ""


def test_spreadsheet_cell_coercion():
    assert is_blank(float("nan"))
    assert is_blank("  ")
    assert to_int("1,850") == 1850
    assert to_int("n/a") is None
    assert to_float("1,50,00,000") == 15000000.0
    assert to_float("inf") is None
    assert to_float("-Infinity") is None
    assert to_float("nan") is None
    assert to_str(9.0) == "9"
    assert to_str(" East ") == "East"
    assert to_str(None) == ""
