from supabase import Client, create_client

from .config import settings
from .errors import ServiceUnavailableError

def get_supabase(access_token: str | None = None) -> Client:
    """New client per call: auth calls store the session on the client."""
    if not settings.supabase_configured():
        raise ServiceUnavailableError("Supabase is not configured")
    client = create_client(settings.supabase_url, settings.supabase_anon_key)
    if access_token:
        client.postgrest.auth(access_token)
    return client
