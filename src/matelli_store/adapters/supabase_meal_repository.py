"""Supabase implementation of the catalog store."""

from dataclasses import dataclass

from supabase import Client

from matelli_store.adapters.supabase_rows import execute, meal_row, parse_meal
from matelli_store.domain.meals import Meal
from matelli_store.services.catalog import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase-backed repository for catalog entries."""

    client: Client

    def list_meals(self) -> list[Meal]:
        """Return all meals ordered by name."""
        response = execute(
            self.client.table("meals").select("*").order("name", desc=False),
            "list meals",
        )
        return [parse_meal(row) for row in response.data or []]

    def get_meal(self, meal_id: str) -> Meal | None:
        """Return a meal by id, if present."""
        response = execute(
            self.client.table("meals").select("*").eq("id", meal_id).limit(1),
            f"read meal {meal_id}",
        )
        if not response.data:
            return None
        return parse_meal(response.data[0])

    def save_meal(self, meal: Meal) -> None:
        """Write the full meal document, replacing any existing one."""
        execute(
            self.client.table("meals").upsert(meal_row(meal), on_conflict="id"),
            f"save meal {meal.id}",
        )

    def delete_meal(self, meal_id: str) -> None:
        """Delete a meal by id."""
        execute(
            self.client.table("meals").delete().eq("id", meal_id),
            f"delete meal {meal_id}",
        )
