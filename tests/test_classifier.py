from __future__ import annotations

import dataclasses

import pytest

from afritable.services.classifier import (
    Axis,
    Decision,
    Rule,
    classify,
    classify_content,
    classify_location,
)


def _classify(keywords, name, cuisine="", description=None, city="Houston", state="TX", country="US"):
    return classify(name, description, cuisine, city, state, country, keywords)


# ── Reference restaurants ────────────────────────────────────────────────


def test_pizza_place_is_rejected(keywords):
    decision = _classify(keywords, "Mario's Pizza", "Italian")
    assert decision.keep is False
    assert decision.rule is Rule.NON_AFRICAN_KEYWORD
    assert decision.matched in ("pizza", "italian")


def test_ethiopian_restaurant_is_kept(keywords):
    decision = _classify(
        keywords, "Merkato Ethiopian Cuisine", "Ethiopian", city="Washington", state="DC"
    )
    assert decision.keep is True


def test_restaurant_in_lagos_is_rejected_on_location(keywords):
    content = classify_content("Taste of Lagos", None, "Nigerian", keywords)
    assert content.keep is True
    assert content.rule is Rule.AFRICAN_KEYWORD

    decision = _classify(keywords, "Taste of Lagos", "Nigerian", city="Lagos", state="", country="NG")
    assert decision.keep is False
    assert decision.axis is Axis.LOCATION
    assert decision.rule is Rule.LOCATED_IN_AFRICA
    assert decision.matched == "NG"


def test_caribbean_restaurant_is_kept(keywords):
    decision = _classify(keywords, "Island Pot", "Jamaican, Caribbean", city="Miami", state="FL")
    assert decision.keep is True
    assert decision.rule is Rule.IN_US


# ── Content axis ─────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "cuisine",
    ["Italian", "Chinese", "Mexican", "Japanese", "Thai", "Indian", "Korean", "Greek", "French", "Vietnamese"],
)
def test_non_qualifying_cuisine_is_always_rejected(keywords, cuisine):
    decision = _classify(keywords, "Corner Kitchen", cuisine)
    assert decision.keep is False
    assert decision.rule is Rule.NON_AFRICAN_KEYWORD


@pytest.mark.parametrize(
    "name,description",
    [
        ("Addis Food Truck", "Ethiopian street food"),
        ("Jollof Trailer", None),
        ("Suya Cart", "Nigerian food cart downtown"),
    ],
)
def test_food_truck_is_rejected_regardless_of_content(keywords, name, description):
    decision = classify_content(name, description, "Ethiopian, African", keywords)
    assert decision.keep is False
    assert decision.rule is Rule.MOBILE_FORMAT


def test_food_truck_beats_non_african_rule(keywords):
    decision = classify_content("Pizza Truck", None, "Italian", keywords)
    assert decision.rule is Rule.MOBILE_FORMAT


def test_non_african_beats_african_keyword(keywords):
    decision = classify_content("Afro-Italian Fusion", "African and Italian plates", "", keywords)
    assert decision.keep is False
    assert decision.rule is Rule.NON_AFRICAN_KEYWORD


def test_no_signal_defaults_to_keep(keywords):
    content = classify_content("Blue Door", None, "", keywords)
    assert content.keep is True
    assert content.rule is Rule.DEFAULT
    assert content.matched is None

    assert _classify(keywords, "Blue Door").keep is True


def test_default_keep_is_configurable(keywords):
    strict = dataclasses.replace(keywords, default_keep=False)
    decision = classify_content("Blue Door", None, "", strict)
    assert decision.keep is False
    assert decision.rule is Rule.DEFAULT


def test_cuisine_field_alone_is_affirmative(keywords):
    strict = dataclasses.replace(keywords, african=(), default_keep=False)
    decision = classify_content("Blue Door", None, "Senegalese", strict)
    assert decision.keep is True
    assert decision.rule is Rule.AFRICAN_CUISINE
    assert decision.matched == "senegalese"


def test_matching_is_case_insensitive(keywords):
    assert classify_content("MERKATO", "ETHIOPIAN DISHES", "", keywords).rule is Rule.AFRICAN_KEYWORD
    assert classify_content("mario's", None, "ITALIAN", keywords).rule is Rule.NON_AFRICAN_KEYWORD


def test_missing_fields_do_not_raise(keywords):
    decision = classify(None, None, None, None, None, None, keywords)
    assert decision.keep is False
    assert decision.rule is Rule.OUTSIDE_US


# ── Location axis ────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "city,state,country",
    [
        ("Houston", "TX", "US"),
        ("Atlanta", "Georgia", None),
        ("Omaha", "NE", "US"),
        ("Silver Spring", "Maryland", "USA"),
        ("Malibu", "CA", "US"),
        ("San Juan", "PR", None),
        ("Portland", "OR", "US"),
        ("Dover", "DE", "United States"),
    ],
)
def test_us_locations_are_kept(keywords, city, state, country):
    decision = classify_location(city, state, country, keywords)
    assert decision.keep is True
    assert decision.rule is Rule.IN_US


@pytest.mark.parametrize(
    "city,state,country",
    [
        ("Nairobi", "", "KE"),
        ("Accra", "Greater Accra", "Ghana"),
        ("Niamey", "", "Niger"),
        ("Casablanca", "", "Morocco"),
    ],
)
def test_african_locations_are_rejected(keywords, city, state, country):
    decision = classify_location(city, state, country, keywords)
    assert decision.keep is False
    assert decision.rule is Rule.LOCATED_IN_AFRICA


@pytest.mark.parametrize(
    "city,state,country",
    [
        ("Toronto", "ON", "Canada"),
        ("Rio de Janeiro", "Rio de Janeiro", "BR"),
        ("Paris", "Ile-de-France", "FR"),
        ("Tijuana", "Baja California", "MX"),
        ("Vancouver", "BC", "CA"),
        ("London", "", "GB"),
        ("", "", None),
    ],
)
def test_unplaceable_locations_are_rejected(keywords, city, state, country):
    decision = classify_location(city, state, country, keywords)
    assert decision.keep is False
    assert decision.rule is Rule.OUTSIDE_US


def test_state_code_in_city_does_not_count(keywords):
    decision = classify_location("Ca Mau", "", None, keywords)
    assert decision.keep is False


def test_state_code_must_be_the_whole_state_field(keywords):
    decision = classify_location("Rio de Janeiro", "Rio de Janeiro", None, keywords)
    assert decision.keep is False
    assert decision.rule is Rule.OUTSIDE_US


def test_foreign_country_wins_over_state_name(keywords):
    decision = classify_location("Tijuana", "Baja California", "MX", keywords)
    assert decision.rule is Rule.OUTSIDE_US
    assert decision.matched == "MX"


# ── Decision ─────────────────────────────────────────────────────────────


def test_decision_reason_includes_match():
    assert Decision(False, Rule.NON_AFRICAN_KEYWORD, Axis.CONTENT, "pizza").reason == "non_african_keyword: pizza"
    assert Decision(True, Rule.DEFAULT, Axis.CONTENT).reason == "default"
