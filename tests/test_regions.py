import pytest

from paint_rewards.core.errors import UnknownRegion
from paint_rewards.core.regions import (
    all_regions,
    find_region,
    get_region,
    region_codes,
    region_for_sub_region,
    sub_region_name,
)


def test_catalog_has_the_four_regions():
    assert set(region_codes()) == {"MX", "HN", "SV", "BZ"}
    assert len(all_regions()) == 4


def test_only_mexico_requires_identifier_and_has_sub_regions():
    mx = get_region("MX")
    assert mx.requires_identifier
    assert mx.identifier_label == "RFC"
    assert mx.has_sub_regions
    for code in ("HN", "SV", "BZ"):
        region = get_region(code)
        assert not region.requires_identifier
        assert not region.has_sub_regions


def test_phone_lengths_per_region():
    assert (get_region("MX").phone_min_length, get_region("MX").phone_max_length) == (10, 10)
    assert get_region("HN").phone_max_length == 8
    assert get_region("SV").phone_max_length == 8
    assert get_region("BZ").phone_max_length == 7


def test_rfc_pattern():
    pattern = get_region("MX").identifier_pattern
    assert pattern.match("PEPJ800101AB1")
    assert pattern.match("ABC800101XY9")
    assert not pattern.match("PEPJ80010AB1")


def test_unknown_region_lookup():
    assert find_region("GT") is None
    assert find_region(None) is None
    with pytest.raises(UnknownRegion):
        get_region("GT")


def test_sub_region_helpers():
    assert region_for_sub_region("MX_CDMX").code == "MX"
    assert region_for_sub_region("XX") is None
    assert sub_region_name("MX_GUERRERO") == "Guerrero"
    assert sub_region_name(None) is None


def test_region_synonyms_include_sub_regions():
    synonyms = get_region("MX").synonyms
    assert "México" in synonyms
    assert "Acapulco" in synonyms
    assert "Coatzacoalcos" in synonyms


def test_region_to_dict_lists_sub_regions():
    data = get_region("MX").to_dict()
    assert data["code"] == "MX"
    assert {"code": "MX_CDMX", "name": "CDMX"} in data["sub_regions"]
    assert get_region("BZ").to_dict()["sub_regions"] == []
