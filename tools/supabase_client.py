"""Construction of the hosted Supabase client."""

from __future__ import annotations

from supabase import Client, create_client

from fitroom_app.errors import MissingCredentialError


def build_supabase_client(url: str | None, key: str | None) -> Client:
    if not url or not key:
        raise MissingCredentialError("Supabase configuration missing")
    return create_client(url, key)


__all__ = ["build_supabase_client"]
