"""
Classifier — decides whether a restaurant belongs in the directory.

Two independent axes, both must pass for a restaurant to be kept:

  content   name + description + cuisine, case-folded substring matching
  location  city / state / country against African and US place names

Every decision carries the rule that fired and the keyword it matched so a
cleanup run can be audited afterwards. Nothing here touches the database.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from afritable.utils.keywords import KeywordSets


class Axis(str, enum.Enum):
    CONTENT = "content"
    LOCATION = "location"


class Rule(str, enum.Enum):
    # content axis, evaluated in this order
    MOBILE_FORMAT = "mobile_format"
    NON_AFRICAN_KEYWORD = "non_african_keyword"
    AFRICAN_KEYWORD = "african_keyword"
    AFRICAN_CUISINE = "african_cuisine"
    DEFAULT = "default"
    # location axis
    LOCATED_IN_AFRICA = "located_in_africa"
    IN_US = "in_us"
    OUTSIDE_US = "outside_us"


@dataclass(frozen=True)
class Decision:
    keep: bool
    rule: Rule
    axis: Axis
    matched: Optional[str] = None

    @property
    def reason(self) -> str:
        if self.matched:
            return f"{self.rule.value}: {self.matched}"
        return self.rule.value


def _first_substring(text: str, keywords: Iterable[str]) -> Optional[str]:
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None


def _first_word(text: str, phrases: Iterable[str]) -> Optional[str]:
    """Whole-word match; 'mali' must not fire on 'Malibu'."""
    for phrase in phrases:
        if re.search(rf"(?<![a-z]){re.escape(phrase)}(?![a-z])", text):
            return phrase
    return None


def classify_content(
    name: Optional[str],
    description: Optional[str],
    cuisine_text: Optional[str],
    keywords: KeywordSets,
) -> Decision:
    """
    Content axis. First match wins:
      1. mobile / food-truck keyword      → reject
      2. non-African keyword              → reject
      3. African / Caribbean keyword      → keep
      4. cuisine field alone affirmative  → keep
      5. no signal                        → keywords.default_keep
    """
    text = f"{name or ''} {description or ''} {cuisine_text or ''}".lower()

    hit = _first_substring(text, keywords.mobile)
    if hit:
        return Decision(False, Rule.MOBILE_FORMAT, Axis.CONTENT, hit)

    hit = _first_substring(text, keywords.non_african)
    if hit:
        return Decision(False, Rule.NON_AFRICAN_KEYWORD, Axis.CONTENT, hit)

    hit = _first_substring(text, keywords.african)
    if hit:
        return Decision(True, Rule.AFRICAN_KEYWORD, Axis.CONTENT, hit)

    hit = _first_substring((cuisine_text or "").lower(), keywords.african_cuisines)
    if hit:
        return Decision(True, Rule.AFRICAN_CUISINE, Axis.CONTENT, hit)

    return Decision(keywords.default_keep, Rule.DEFAULT, Axis.CONTENT)


def classify_location(
    city: Optional[str],
    state: Optional[str],
    country: Optional[str],
    keywords: KeywordSets,
) -> Decision:
    """
    Location axis. Rejects restaurants physically in Africa, anything with
    a non-US country, then anything that cannot be placed in a US state or
    territory.
    """
    country_code = (country or "").strip().upper()
    if country_code in keywords.african_country_codes:
        return Decision(False, Rule.LOCATED_IN_AFRICA, Axis.LOCATION, country_code)

    place = f"{city or ''} {state or ''} {country or ''}".lower()
    hit = _first_word(place, keywords.african_countries)
    if hit:
        return Decision(False, Rule.LOCATED_IN_AFRICA, Axis.LOCATION, hit)

    # 'Baja California, MX' names a US state but is not in the US
    if country_code and country_code.lower() not in keywords.us_countries:
        return Decision(False, Rule.OUTSIDE_US, Axis.LOCATION, country_code)

    # A code only counts as the whole state field; 'DE' inside
    # 'Ile-de-France' or 'Rio de Janeiro' is not Delaware.
    state_code = (state or "").strip().upper()
    if state_code in keywords.us_state_codes:
        return Decision(True, Rule.IN_US, Axis.LOCATION, state_code)

    hit = _first_word(f"{city or ''} {state or ''}".lower(), keywords.us_states)
    if hit:
        return Decision(True, Rule.IN_US, Axis.LOCATION, hit)

    return Decision(False, Rule.OUTSIDE_US, Axis.LOCATION)


def classify(
    name: Optional[str],
    description: Optional[str],
    cuisine_text: Optional[str],
    city: Optional[str],
    state: Optional[str],
    country: Optional[str],
    keywords: KeywordSets,
) -> Decision:
    """
    Canonical cleanup policy: keep only if both axes keep.

    Returns the content decision when it rejects, otherwise the location
    decision (which then determines the outcome).
    """
    content = classify_content(name, description, cuisine_text, keywords)
    if not content.keep:
        return content
    return classify_location(city, state, country, keywords)
