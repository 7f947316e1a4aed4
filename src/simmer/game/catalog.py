from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import yaml
from jsonschema import Draft7Validator

from ..errors import CatalogError, UnknownRecipeError

logger = logging.getLogger(__name__)

DATA_PACKAGE = "simmer.data"
DEFAULT_CATALOG_FILE = "recipes.yaml"
SCHEMA_FILE = "schemas/recipe_catalog.schema.json"

DEFAULT_REQUIRED_TIME = 10.0
DEFAULT_STAR_COUNT = 1


@dataclass(frozen=True)
class IngredientCost:
    item_id: str
    amount: int


@dataclass(frozen=True)
class RecipeDefinition:
    """Static, read-only description of something that can be cooked."""

    id: str
    name: str
    star_count: int = DEFAULT_STAR_COUNT
    required_time: float = DEFAULT_REQUIRED_TIME
    ingredient_costs: Tuple[IngredientCost, ...] = ()

    def __post_init__(self) -> None:
        if not math.isfinite(self.required_time) or self.required_time <= 0:
            raise CatalogError(f"Recipe {self.id!r} must have a finite, positive required_time")
        seen = set()
        for cost in self.ingredient_costs:
            if cost.amount <= 0:
                raise CatalogError(f"Recipe {self.id!r} has a non-positive cost for {cost.item_id!r}")
            if cost.item_id in seen:
                raise CatalogError(f"Recipe {self.id!r} lists {cost.item_id!r} more than once")
            seen.add(cost.item_id)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "RecipeDefinition":
        costs = tuple(IngredientCost(item_id=c["item"], amount=int(c["amount"])) for c in data.get("ingredients", []))
        return RecipeDefinition(
            id=data["id"],
            name=data["name"],
            star_count=int(data.get("star_count", DEFAULT_STAR_COUNT)),
            required_time=float(data.get("required_time", DEFAULT_REQUIRED_TIME)),
            ingredient_costs=costs,
        )


@lru_cache(maxsize=1)
def _load_catalog_schema() -> Dict[str, Any]:
    with resources.files(DATA_PACKAGE).joinpath(SCHEMA_FILE).open("r", encoding="utf-8") as f:
        logger.debug("Loading recipe catalog schema from package data")
        return json.load(f)


def validate_catalog_dict(data: Any) -> None:
    """Validate raw catalog data against the bundled JSON schema.

    Raises:
        CatalogError listing every schema violation.
    """
    validator = Draft7Validator(_load_catalog_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        for err in errors:
            logger.error("Recipe catalog validation error at %s: %s", list(err.path), err.message)
        details = "; ".join(f"{'/'.join(str(p) for p in e.path) or '<root>'}: {e.message}" for e in errors)
        raise CatalogError(f"Invalid recipe catalog: {details}")


class RecipeCatalog:
    """Lookup table of recipes keyed by id, in catalog order."""

    def __init__(self, recipes: Iterable[RecipeDefinition] = ()) -> None:
        self._recipes: Dict[str, RecipeDefinition] = {}
        for recipe in recipes:
            if recipe.id in self._recipes:
                raise CatalogError(f"Duplicate recipe id: {recipe.id!r}")
            self._recipes[recipe.id] = recipe

    @classmethod
    def from_dict(cls, data: Any) -> "RecipeCatalog":
        validate_catalog_dict(data)
        return cls(RecipeDefinition.from_dict(r) for r in data["recipes"])

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "RecipeCatalog":
        """Load a catalog from a YAML file, or the bundled one when no path is given."""
        try:
            if path is None:
                with resources.files(DATA_PACKAGE).joinpath(DEFAULT_CATALOG_FILE).open("r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            else:
                with Path(path).open("r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CatalogError(f"Unable to read recipe catalog {path or DEFAULT_CATALOG_FILE}: {e}") from e
        catalog = cls.from_dict(data)
        logger.info("Loaded %d recipes from %s", len(catalog), path or DEFAULT_CATALOG_FILE)
        return catalog

    def __len__(self) -> int:
        return len(self._recipes)

    def __iter__(self) -> Iterator[RecipeDefinition]:
        return iter(self._recipes.values())

    def __contains__(self, recipe_id: object) -> bool:
        return recipe_id in self._recipes

    def get(self, recipe_id: str) -> Optional[RecipeDefinition]:
        return self._recipes.get(recipe_id)

    def require(self, recipe_id: str) -> RecipeDefinition:
        recipe = self._recipes.get(recipe_id)
        if recipe is None:
            raise UnknownRecipeError(f"Unknown recipe id: {recipe_id!r}")
        return recipe

    def search(self, query: str = "", stars: int = 0) -> List[RecipeDefinition]:
        """Filter by case-insensitive name substring and exact star count (0 = any).

        Results are ordered by star count; ties keep catalog order.
        """
        needle = query.strip().lower()
        found = [
            r
            for r in self._recipes.values()
            if (not needle or needle in r.name.lower()) and (stars <= 0 or r.star_count == stars)
        ]
        return sorted(found, key=lambda r: r.star_count)
