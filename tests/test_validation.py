import pytest
from app.services.schema_builder import schema_for_general
from app.services.size_systems import SizeSystem
from app.services.validation import get_missing_inputs, validate_atomic


def test_missing_inputs_in_required_order(mens_eu_schema):
    assert get_missing_inputs(mens_eu_schema, {}) == ["height_cm", "weight_kg", "usual_size_eu"]
    assert get_missing_inputs(mens_eu_schema, {"height_cm": 178}) == ["weight_kg", "usual_size_eu"]


def test_missing_inputs_empty_when_complete(mens_eu_schema):
    user = {"height_cm": 178, "weight_kg": 75, "usual_size_eu": 48}
    assert get_missing_inputs(mens_eu_schema, user) == []


def test_missing_inputs_only_reports_required_fields(collar_schema):
    missing = get_missing_inputs(collar_schema, {"usual_size_eu": 48})
    assert missing == ["height_cm", "weight_kg", "shirt_size_eu"]
    assert set(missing) <= set(collar_schema.required)


def test_missing_inputs_treat_zero_and_blank_as_absent(mens_eu_schema):
    assert get_missing_inputs(mens_eu_schema, {"height_cm": 0, "weight_kg": "", "usual_size_eu": 48}) == [
        "height_cm",
        "weight_kg",
    ]


def test_missing_inputs_without_schema():
    assert get_missing_inputs(None, None) == ["height_cm", "weight_kg", "usual_size_eu"]


def test_validate_clean_profile(mens_eu_schema):
    assert validate_atomic(mens_eu_schema, {"height_cm": 178, "weight_kg": 75, "usual_size_eu": 48}) == []


def test_validate_height_and_weight_ranges(mens_eu_schema):
    assert validate_atomic(mens_eu_schema, {"height_cm": 140}) == ["height_cm"]
    assert validate_atomic(mens_eu_schema, {"weight_kg": 200}) == ["weight_kg"]


def test_validate_bmi_mismatch(mens_eu_schema):
    issues = validate_atomic(mens_eu_schema, {"height_cm": 180, "weight_kg": 30})
    assert issues == ["weight_kg", "height_weight_mismatch"]


@pytest.mark.parametrize("gender,size,flagged", [
    ("female", 52, True),
    ("female", 38, False),
    ("male", 40, True),
    ("male", 50, False),
    (None, 40, False),
    (None, 62, True),
])
def test_validate_eu_size_by_gender(gender, size, flagged):
    schema = schema_for_general("top", gender)
    assert ("usual_size_eu" in validate_atomic(schema, {"usual_size_eu": size})) is flagged


def test_validate_collar_waist_alpha(collar_schema):
    assert validate_atomic(collar_schema, {"shirt_size_eu": 48}) == ["shirt_size_eu"]

    waist = collar_schema.model_copy(update={"system": SizeSystem.WAIST_INCH})
    assert validate_atomic(waist, {"waist_inch": 50}) == ["waist_inch"]

    alpha = collar_schema.model_copy(update={"system": SizeSystem.ALPHA})
    assert validate_atomic(alpha, {"alpha_size": "huge"}) == ["alpha_size"]
    assert validate_atomic(alpha, {"alpha_size": "Large"}) == []


def test_validate_ignores_size_fields_of_other_systems(collar_schema):
    assert validate_atomic(collar_schema, {"usual_size_eu": 99}) == []


def test_out_of_float_range_integers_count_as_absent(mens_eu_schema):
    user = {"height_cm": 10**400, "weight_kg": 75, "usual_size_eu": 48}
    assert get_missing_inputs(mens_eu_schema, user) == ["height_cm"]
    assert validate_atomic(mens_eu_schema, user) == []
