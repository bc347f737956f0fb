# mhclassifier/domain/keywords.py
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Optional

from mhclassifier.domain.models import Category, HeuristicConfig, KeywordProfile, KeywordSet
from mhclassifier.exceptions import KeywordProfileError
from mhclassifier.infra.paths import KEYWORD_PROFILES_PATH
from mhclassifier.infra.yaml_io import load_yaml

logger = logging.getLogger(__name__)

_HEURISTIC_FIELDS = {
    "long_text_threshold": int,
    "long_text_increment": float,
    "question_mark_threshold": int,
    "question_mark_increment": float,
    "exclamation_threshold": int,
    "exclamation_increment": float,
}


def _parse_keyword_set(name: str, raw: Any) -> KeywordSet:
    if not isinstance(raw, dict):
        raise KeywordProfileError(f"category '{name}' must be a mapping")

    keywords = raw.get("keywords") or []
    if not isinstance(keywords, list):
        raise KeywordProfileError(f"category '{name}': keywords must be a list")

    # lowercase + dedup, order kept
    seen = set()
    uniq: List[str] = []
    for kw in keywords:
        kw = str(kw).strip().lower()
        if kw and kw not in seen:
            seen.add(kw)
            uniq.append(kw)

    try:
        weight = float(raw.get("weight", 0.0))
        base_score = float(raw.get("base_score", 0.0))
    except (TypeError, ValueError) as e:
        raise KeywordProfileError(f"category '{name}': weight/base_score must be numbers") from e

    return KeywordSet(keywords=tuple(uniq), weight=weight, base_score=base_score)


def _parse_heuristics(raw: Any) -> HeuristicConfig:
    if raw is None:
        return HeuristicConfig()
    if not isinstance(raw, dict):
        raise KeywordProfileError("heuristics must be a mapping")

    values: Dict[str, Any] = {}
    for key, cast in _HEURISTIC_FIELDS.items():
        if key in raw:
            try:
                values[key] = cast(raw[key])
            except (TypeError, ValueError) as e:
                raise KeywordProfileError(f"heuristics.{key} is not a valid number") from e
    return HeuristicConfig(**values)


def parse_profile(name: str, raw: Any) -> KeywordProfile:
    """Turn one `profiles.<name>` YAML block into a KeywordProfile."""
    if not isinstance(raw, dict):
        raise KeywordProfileError(f"profile '{name}' must be a mapping")

    categories = raw.get("categories") or {}
    if not isinstance(categories, dict):
        raise KeywordProfileError(f"profile '{name}': categories must be a mapping")

    keyword_sets: Dict[Category, KeywordSet] = {}
    for cat_name, cat_raw in categories.items():
        try:
            category = Category(cat_name)
        except ValueError as e:
            raise KeywordProfileError(f"profile '{name}': unknown category '{cat_name}'") from e
        keyword_sets[category] = _parse_keyword_set(cat_name, cat_raw)

    return KeywordProfile(
        name=name,
        keyword_sets=MappingProxyType(keyword_sets),
        heuristics=_parse_heuristics(raw.get("heuristics")),
    )


@lru_cache(maxsize=8)
def _load_profiles(path: Path) -> Dict[str, Any]:
    data = load_yaml(path)
    if not isinstance(data, dict) or not isinstance(data.get("profiles"), dict):
        raise KeywordProfileError(f"'profiles' mapping missing in {path}")
    return data


def available_profiles(path: Path = KEYWORD_PROFILES_PATH) -> List[str]:
    return list(_load_profiles(path)["profiles"].keys())


@lru_cache(maxsize=32)
def load_keyword_profile(
    name: Optional[str] = None,
    path: Path = KEYWORD_PROFILES_PATH,
) -> KeywordProfile:
    """
    Load a keyword profile by name.

    name=None uses the file's `default_profile`. Results are cached; the
    returned profile is immutable and safe to share between requests.
    """
    data = _load_profiles(path)
    profile_name = name or data.get("default_profile") or "smart"

    raw = data["profiles"].get(profile_name)
    if raw is None:
        raise KeywordProfileError(
            f"unknown keyword profile '{profile_name}' "
            f"(available: {', '.join(data['profiles'].keys())})"
        )

    profile = parse_profile(profile_name, raw)
    logger.info(
        "keyword profile loaded: name=%s, keywords=%d",
        profile.name,
        sum(len(ks.keywords) for ks in profile.keyword_sets.values()),
    )
    return profile
