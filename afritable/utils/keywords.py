"""
Classification keyword sets — single source of truth for the cleanup policy.

The default policy ships as data/classification_keywords.json. Operators
tune it without code changes by pointing CLASSIFICATION_KEYWORDS_PATH (or
the --keywords flag) at a replacement document with the same keys.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS_PATH = Path(__file__).resolve().parent.parent / "data" / "classification_keywords.json"

_LIST_KEYS = (
    "mobile",
    "non_african",
    "african",
    "african_cuisines",
    "african_countries",
    "african_country_codes",
    "us_states",
    "us_state_codes",
)


# Country values accepted as the US when a country is given at all
_DEFAULT_US_COUNTRIES = ("us", "usa", "united states", "united states of america")


class KeywordConfigError(Exception):
    """Raised when a keyword document is missing, unreadable or malformed."""


@dataclass(frozen=True)
class KeywordSets:
    """
    Immutable, normalised keyword tables consumed by the classifier.

    Text keywords are lower-cased; country and state codes are upper-cased.
    Order is preserved so the first matching keyword is reported.
    """

    version: str
    default_keep: bool
    mobile: tuple[str, ...]
    non_african: tuple[str, ...]
    african: tuple[str, ...]
    african_cuisines: tuple[str, ...]
    african_countries: tuple[str, ...]
    african_country_codes: frozenset[str]
    us_states: tuple[str, ...]
    us_state_codes: frozenset[str]
    us_countries: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeywordSets":
        missing = [key for key in _LIST_KEYS if key not in data]
        if missing:
            raise KeywordConfigError(f"Keyword document missing keys: {', '.join(missing)}")
        for key in _LIST_KEYS:
            if not isinstance(data[key], list):
                raise KeywordConfigError(f"Keyword key '{key}' must be a list")
        if "us_countries" in data and not isinstance(data["us_countries"], list):
            raise KeywordConfigError("Keyword key 'us_countries' must be a list")

        def _lower(key: str) -> tuple[str, ...]:
            return tuple(
                dict.fromkeys(str(k).strip().lower() for k in data[key] if str(k).strip())
            )

        def _codes(key: str) -> frozenset[str]:
            return frozenset(str(k).strip().upper() for k in data[key] if str(k).strip())

        return cls(
            version=str(data.get("version", "unversioned")),
            default_keep=bool(data.get("default_keep", True)),
            mobile=_lower("mobile"),
            non_african=_lower("non_african"),
            african=_lower("african"),
            african_cuisines=_lower("african_cuisines"),
            african_countries=_lower("african_countries"),
            african_country_codes=_codes("african_country_codes"),
            us_states=_lower("us_states"),
            us_state_codes=_codes("us_state_codes"),
            us_countries=_lower("us_countries") if "us_countries" in data else _DEFAULT_US_COUNTRIES,
        )


def load_keyword_sets(path: Optional[Path] = None) -> KeywordSets:
    """Load keyword sets from `path`, or from the packaged default."""
    source = Path(path) if path else DEFAULT_KEYWORDS_PATH
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise KeywordConfigError(f"Keyword file not found: {source}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise KeywordConfigError(f"Cannot read keyword file {source}: {exc}") from exc

    if not isinstance(raw, dict):
        raise KeywordConfigError(f"Keyword file {source} must contain a JSON object")

    keywords = KeywordSets.from_dict(raw)
    logger.debug("Loaded classification keywords v%s from %s", keywords.version, source)
    return keywords
