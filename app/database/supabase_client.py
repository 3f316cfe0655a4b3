from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client
from app.config import settings

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        """Client used by the repositories. Prefers the service_role key, which bypasses RLS."""
        if cls._client is None:
            key = settings.supabase_service_role_key or settings.supabase_key
            cls._client = create_client(
                settings.supabase_url,
                key,
                options=ClientOptions(postgrest_client_timeout=settings.supabase_timeout_seconds),
            )
        return cls._client

    @classmethod
    def reset_client(cls):
        cls._client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def is_unique_violation(error: Exception) -> bool:
    if isinstance(error, APIError) and error.code == UNIQUE_VIOLATION:
        return True
    message = str(error).lower()
    return UNIQUE_VIOLATION in message or "duplicate key" in message


def is_foreign_key_violation(error: Exception) -> bool:
    return isinstance(error, APIError) and error.code == FOREIGN_KEY_VIOLATION
