"""Supabase source for catalog rows."""

from dataclasses import dataclass

from supabase import Client

from diet_planner.services.catalog import FoodSource


@dataclass
class SupabaseFoodSource(FoodSource):
    """Reads catalog rows from a Supabase table."""

    client: Client
    table: str = "foods"

    def fetch_foods(self) -> list[dict[str, object]]:
        """Return every row of the foods table ordered by id."""
        response = self.client.table(self.table).select("*").order("id").execute()
        return list(response.data or [])
