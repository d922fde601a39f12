from __future__ import annotations

import json

import pytest

from afritable.utils.keywords import (
    DEFAULT_KEYWORDS_PATH,
    KeywordConfigError,
    KeywordSets,
    load_keyword_sets,
)


def _document(**overrides):
    doc = {
        "version": "test-1",
        "mobile": ["food truck"],
        "non_african": ["Pizza"],
        "african": ["Ethiopian"],
        "african_cuisines": ["african"],
        "african_countries": ["Nigeria"],
        "african_country_codes": ["ng"],
        "us_states": ["Texas"],
        "us_state_codes": ["tx"],
    }
    doc.update(overrides)
    return doc


def test_packaged_policy_loads():
    keywords = load_keyword_sets()
    assert DEFAULT_KEYWORDS_PATH.is_file()
    assert keywords.version
    assert keywords.default_keep is True
    assert "food truck" in keywords.mobile
    assert "caribbean" in keywords.african
    assert "NG" in keywords.african_country_codes
    assert "TX" in keywords.us_state_codes


def test_custom_policy_is_normalised(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(_document(default_keep=False)), encoding="utf-8")

    keywords = load_keyword_sets(path)

    assert keywords.version == "test-1"
    assert keywords.default_keep is False
    assert keywords.non_african == ("pizza",)
    assert keywords.african_country_codes == frozenset({"NG"})
    assert keywords.us_state_codes == frozenset({"TX"})


def test_duplicates_and_blanks_are_dropped():
    keywords = KeywordSets.from_dict(_document(african=["Ethiopian", "ethiopian ", "", "Somali"]))
    assert keywords.african == ("ethiopian", "somali")


def test_missing_file_raises(tmp_path):
    with pytest.raises(KeywordConfigError, match="not found"):
        load_keyword_sets(tmp_path / "nope.json")


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(KeywordConfigError):
        load_keyword_sets(path)


def test_missing_keys_raise():
    doc = _document()
    del doc["mobile"]
    with pytest.raises(KeywordConfigError, match="mobile"):
        KeywordSets.from_dict(doc)


def test_non_list_value_raises():
    with pytest.raises(KeywordConfigError, match="african"):
        KeywordSets.from_dict(_document(african="ethiopian"))


def test_top_level_must_be_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(KeywordConfigError, match="JSON object"):
        load_keyword_sets(path)


def test_us_countries_default_when_absent():
    keywords = KeywordSets.from_dict(_document())
    assert "usa" in keywords.us_countries
    assert "united states" in keywords.us_countries


def test_us_countries_must_be_a_list():
    with pytest.raises(KeywordConfigError, match="us_countries"):
        KeywordSets.from_dict(_document(us_countries="usa"))
