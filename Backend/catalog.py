"""
LiftLog Exercise Catalog
Load the reference exercise catalog from a local JSON file and search it.
"""
import json
import logging
import os
from typing import Iterable, Optional

from pydantic import ValidationError

from models import Exercise

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


class CatalogError(Exception):
    """The catalog file is missing or is not a JSON array of exercises."""


def parse_catalog(
        records: Iterable[dict],
        excluded_categories: Optional[Iterable[str]] = None,
) -> list[Exercise]:
    """Build catalog entries from raw records, skipping unusable ones."""
    excluded = set(excluded_categories or [])
    catalog = []
    skipped = 0

    for record in records:
        if not isinstance(record, dict):
            skipped += 1
            continue
        try:
            exercise = Exercise.model_validate(record)
        except ValidationError as e:
            logger.warning("Skipping catalog entry %r: %s", record.get("name"), e)
            skipped += 1
            continue
        if exercise.category in excluded:
            continue
        catalog.append(exercise)

    if skipped:
        logger.warning("Skipped %d malformed catalog entries", skipped)
    return catalog


def load_catalog(path: str, excluded_categories: Optional[Iterable[str]] = None) -> list[Exercise]:
    """Read the exercise catalog from a JSON file."""
    if not os.path.exists(path):
        raise CatalogError(f"Exercise catalog not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"Exercise catalog is not valid JSON: {path}") from e

    if not isinstance(data, list):
        raise CatalogError(f"Exercise catalog must be a JSON array: {path}")

    catalog = parse_catalog(data, excluded_categories)
    logger.info("Loaded %d exercises from %s", len(catalog), path)
    return catalog


def list_categories(catalog: list[Exercise]) -> list[str]:
    """Distinct categories in first-seen order, led by the catch-all."""
    categories = [ALL_CATEGORIES]
    for exercise in catalog:
        if exercise.category and exercise.category not in categories:
            categories.append(exercise.category)
    return categories


def filter_exercises(
        catalog: list[Exercise],
        search: str = "",
        category: str = ALL_CATEGORIES,
) -> list[Exercise]:
    """Exercises whose name contains `search` (any case) within `category`."""
    term = search.lower()
    return [
        ex for ex in catalog
        if term in ex.name.lower()
        and (category == ALL_CATEGORIES or ex.category == category)
    ]


def find_exercise(catalog: list[Exercise], name: str) -> Optional[Exercise]:
    """Catalog entry with exactly this name, compared case-insensitively."""
    wanted = name.strip().lower()
    for exercise in catalog:
        if exercise.name.lower() == wanted:
            return exercise
    return None
