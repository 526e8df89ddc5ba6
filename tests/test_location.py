import pytest

from paint_rewards.core.location import (
    MIN_LOCATION_LENGTH,
    LocationReason,
    normalize_text,
    validate_location,
)


def test_normalize_text_strips_accents_and_case():
    assert normalize_text("  Ciudad de  MÉXICO ") == "ciudad de mexico"
    assert normalize_text(None) == ""


@pytest.mark.parametrize("location", ["", "   ", "CDMX", "ab  "])
def test_too_short(location):
    result = validate_location(location, "MX", "MX_CDMX")
    assert not result.valid
    assert result.reason is LocationReason.TOO_SHORT
    assert result.expected == MIN_LOCATION_LENGTH


def test_cdmx_contractor_inside_sub_region():
    assert validate_location("Av. Reforma 123, CDMX", "MX", "MX_CDMX").valid


def test_cdmx_contractor_outside_sub_region():
    result = validate_location("Av. Reforma 123, Monterrey", "MX", "MX_CDMX")
    assert not result.valid
    assert result.reason is LocationReason.WRONG_SUB_REGION
    assert result.expected == "CDMX"


def test_sub_region_alias_without_accents():
    assert validate_location("Insurgentes Sur 1000, Ciudad de Mexico", "MX", "MX_CDMX").valid
    assert validate_location("Centro, Minatitlan, Veracruz", "MX", "MX_MINATITLAN").valid


def test_other_sub_region_rejected_for_assigned_contractor():
    result = validate_location("Costera 12, Acapulco, Guerrero", "MX", "MX_CDMX")
    assert result.reason is LocationReason.WRONG_SUB_REGION


def test_region_only_location_rejected_without_sub_region():
    result = validate_location("Calle 5, Monterrey, Nuevo León, México", "MX", None)
    assert not result.valid
    assert result.reason is LocationReason.WRONG_REGION_CITIES
    assert "CDMX" in result.expected
    assert "Coatzacoalcos" in result.expected


def test_any_allowed_city_accepted_without_sub_region():
    assert validate_location("Costera 12, Acapulco, Guerrero, México", "MX", None).valid
    assert validate_location("Col. Centro, Coatza", "MX", None).valid


def test_unknown_sub_region_is_treated_as_unassigned():
    assert validate_location("Costera 12, Acapulco", "MX", "MX_MONTERREY").valid
    result = validate_location("Centro, Monterrey", "MX", "MX_MONTERREY")
    assert result.reason is LocationReason.WRONG_REGION_CITIES


def test_honduras_aliases():
    assert validate_location("Tegucigalpa, Honduras", "HN").valid
    assert validate_location("Barrio Guamilito, San Pedro Sula", "HN").valid


def test_honduras_wrong_country():
    result = validate_location("Managua, Nicaragua", "HN")
    assert not result.valid
    assert result.reason is LocationReason.WRONG_REGION
    assert result.expected == "Honduras"


def test_region_without_sub_regions_ignores_sub_region():
    assert validate_location("Colonia Escalón, San Salvador", "SV", "MX_CDMX").valid
    assert validate_location("Belmopan, Cayo District", "BZ", "ANY").valid


def test_unscoped_contractor_accepts_any_location():
    assert validate_location("Managua, Nicaragua", None).valid
    assert validate_location("Managua, Nicaragua", "").valid


def test_unscoped_contractor_still_checks_length():
    assert validate_location("abc", None).reason is LocationReason.TOO_SHORT


def test_region_missing_from_catalog_is_unscoped():
    assert validate_location("Ciudad de Guatemala", "GT").valid
    assert validate_location("Gt", "GT").reason is LocationReason.TOO_SHORT
