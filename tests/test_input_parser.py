import pytest
from app.schemas.sizing import UserMeasurements
from app.services.input_parser import merge_measurements, parse_user_input
from app.services.schema_builder import schema_for_general
from app.services.size_systems import SizeSystem


@pytest.fixture
def waist_schema():
    return schema_for_general("trouser", "male").model_copy(
        update={"system": SizeSystem.WAIST_INCH, "required": ("height_cm", "weight_kg", "waist_inch")}
    )


def test_units_and_eu_phrase(mens_eu_schema):
    out = parse_user_input("178cm 75kg EU 48", mens_eu_schema)
    assert out.height_cm == 178
    assert out.weight_kg == 75
    assert out.usual_size_eu == 48
    assert out.alpha_size is None
    assert out.ambiguous_numbers == []


def test_bare_numbers_height_claims_first(mens_eu_schema):
    out = parse_user_input("I'm 180, 82, size 50", mens_eu_schema)
    assert out.height_cm == 180
    assert out.weight_kg == 82
    assert out.usual_size_eu == 50
    # the "m" in "I'm" is not a size
    assert out.alpha_size is None


def test_slash_separated(mens_eu_schema):
    out = parse_user_input("165/55/36", mens_eu_schema)
    assert out.height_cm == 165
    assert out.usual_size_eu == 55
    assert out.weight_kg is None
    assert out.ambiguous_numbers == [36]


def test_explicit_values_consume_their_bare_occurrence(mens_eu_schema):
    out = parse_user_input("180 cm", mens_eu_schema)
    assert out.height_cm == 180
    assert out.ambiguous_numbers == []


@pytest.mark.parametrize("text,expected", [
    ("M", "M"),
    ("usually a medium", "M"),
    ("Extra Large please", "XL"),
    ("2XL", "XXL"),
    ("xs", "XS"),
])
def test_alpha_tokens(text, expected):
    assert parse_user_input(text, None).alpha_size == expected


@pytest.mark.parametrize("text", ["W32", "w32", "32W", "32 w"])
def test_waist_tokens(text):
    assert parse_user_input(text, None).waist_inch == 32


def test_shirt_phrase(collar_schema):
    out = parse_user_input("shirt 40", collar_schema)
    assert out.shirt_size_eu == 40
    assert out.usual_size_eu is None


def test_collar_schema_claims_bare_numbers(collar_schema):
    out = parse_user_input("182 41", collar_schema)
    assert out.height_cm == 182
    assert out.shirt_size_eu == 41


def test_collar_reconciliation_moves_eu_value(collar_schema):
    out = parse_user_input("EU 41", collar_schema)
    assert out.shirt_size_eu == 41
    assert out.usual_size_eu is None


def test_collar_reconciliation_leaves_out_of_band_values(collar_schema):
    out = parse_user_input("EU 50", collar_schema)
    assert out.usual_size_eu == 50
    assert out.shirt_size_eu is None


def test_waist_schema_directs_bare_numbers(waist_schema):
    out = parse_user_input("180 80 32", waist_schema)
    assert out.height_cm == 180
    assert out.weight_kg == 80
    assert out.waist_inch == 32


def test_without_schema_bare_numbers_go_to_height_and_weight():
    out = parse_user_input("175 70 99 12", None)
    assert out.height_cm == 175
    assert out.weight_kg == 70
    assert out.usual_size_eu is None
    assert out.ambiguous_numbers == [99, 12]


@pytest.mark.parametrize("text", ["", "   ", None, "hello there"])
def test_nothing_to_parse(text, mens_eu_schema):
    out = parse_user_input(text, mens_eu_schema)
    assert out.height_cm is None
    assert out.weight_kg is None
    assert out.usual_size_eu is None
    assert out.ambiguous_numbers == []


def test_merge_keeps_existing_values():
    current = UserMeasurements(height_cm=178, weight_kg=75)
    merged = merge_measurements(current, parse_user_input("EU 48", None))
    assert merged.height_cm == 178
    assert merged.weight_kg == 75
    assert merged.usual_size_eu == 48
    assert current.usual_size_eu is None
