"""
SupaNotes - server-rendered notes app on FastAPI.

Accounts and sign-in are delegated to Supabase Auth; notes live in the
Supabase Postgres database and are scoped to their owner.
"""

__version__ = "1.0.0"
