from supabase import Client, create_client

from vidshare.config import Settings


def create_supabase_client(settings: Settings) -> Client:
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "Supabase credentials not found in environment. "
            "Checked SUPABASE_URL/SUPABASE_KEY and NEXT_PUBLIC_SUPABASE_URL/NEXT_PUBLIC_SUPABASE_ANON_KEY."
        )
    return create_client(settings.supabase_url, settings.supabase_key)
