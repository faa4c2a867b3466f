"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and recognising PostgREST "no rows" errors.
"""

from typing import TypeVar, Generic

from postgrest.exceptions import APIError
from supabase import Client


T = TypeVar("T")

# PostgREST code for ".single()" queries that matched zero rows
NO_ROWS_CODE = "PGRST116"


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _is_missing_row() to tell "no row yet" apart from a real failure

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class ProfileRepository(BaseRepository[Profile]):
            async def get_by_user_id(self, user_id: str) -> Optional[Profile]:
                result = self._db.table("profiles").select("*").eq("id", user_id).execute()
                if not result.data:
                    return None
                return self._map_to_profile(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _is_missing_row(error: APIError) -> bool:
        """Whether a PostgREST error only means the row does not exist."""
        return error.code == NO_ROWS_CODE
