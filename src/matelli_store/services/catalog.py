"""Catalog management and the cached catalog snapshot."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from matelli_store.domain.errors import (
    MealNotFoundError,
    PersistenceError,
    ValidationError,
)
from matelli_store.domain.meals import Meal, MealCategory
from matelli_store.services.feeds import SnapshotFeed, Subscription

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for catalog entries."""

    def list_meals(self) -> list[Meal]:
        """Return all meals ordered by name."""

    def get_meal(self, meal_id: str) -> Meal | None:
        """Return a meal by id, if present."""

    def save_meal(self, meal: Meal) -> None:
        """Write the full meal document, replacing any existing one."""

    def delete_meal(self, meal_id: str) -> None:
        """Delete a meal by id."""


@dataclass
class CatalogService:
    """Application service for catalog reads and admin edits."""

    repository: MealRepository
    feed: SnapshotFeed[Meal] = field(default_factory=lambda: SnapshotFeed("meals"))

    def list_meals(self, category: MealCategory | None = None) -> list[Meal]:
        """Return meals ordered by name, optionally filtered by category."""
        meals = self.repository.list_meals()
        if category is None:
            return meals
        return [meal for meal in meals if meal.category == category]

    def get_meal(self, meal_id: str) -> Meal:
        """Return a meal or raise when it is not in the catalog."""
        meal = self.repository.get_meal(meal_id)
        if meal is None:
            raise MealNotFoundError(f"Meal {meal_id} not found")
        return meal

    def save_meal(self, meal: Meal) -> Meal:
        """Create or overwrite a meal and publish the new catalog."""
        self.repository.save_meal(meal)
        _logger.info("Saved meal %s (%s)", meal.id, meal.name)
        self.refresh()
        return meal

    def delete_meal(self, meal_id: str) -> None:
        """Delete a meal and publish the new catalog."""
        self.get_meal(meal_id)
        self.repository.delete_meal(meal_id)
        _logger.info("Deleted meal %s", meal_id)
        self.refresh()

    def refresh(self) -> list[Meal]:
        """Re-read the catalog and push it to subscribers."""
        meals = self.repository.list_meals()
        self.feed.publish(meals)
        return meals

    def snapshot(self) -> dict[str, Meal]:
        """Return the latest catalog keyed by id, loading it on first use."""
        meals = self.feed.latest
        if meals is None:
            meals = self.refresh()
        return {meal.id: meal for meal in meals}

    def subscribe(self, callback: Callable[[list[Meal]], None]) -> Subscription:
        """Receive the full catalog on every change."""
        return self.feed.subscribe(callback)

    async def seed(self, meals: list[Meal], timeout_seconds: float = 10.0) -> int:
        """Write the initial menu, bounding each write by a timeout.

        A failure on the first item means the store is unreachable and is
        raised; later failures are logged and skipped.
        """
        if not meals:
            raise ValidationError("No initial meals to sync")
        _logger.info("Syncing %s catalog items", len(meals))
        saved = 0
        for index, meal in enumerate(meals):
            try:
                await asyncio.wait_for(
                    asyncio.to_thread(self.repository.save_meal, meal),
                    timeout=timeout_seconds,
                )
            except (TimeoutError, PersistenceError) as exc:
                if index == 0:
                    raise PersistenceError(
                        f"Catalog sync failed on {meal.id}: store unreachable"
                    ) from exc
                _logger.warning("Catalog sync skipped %s: %s", meal.id, exc)
                continue
            saved += 1
        self.refresh()
        _logger.info("Catalog sync finished: %s/%s saved", saved, len(meals))
        return saved


def new_meal_id() -> str:
    """Return a fresh id for an admin-created meal."""
    return f"m{int(time.time() * 1000)}"
