# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in repository.py

"""
Expected Supabase table structure:

users:
- id: uuid (primary key)
- email: text (unique, not null) - compared case-sensitively, as stored
- password_hash: text (not null) - werkzeug hash, never the plaintext
- created_at: timestamptz (not null)
- updated_at: timestamptz (not null)

Deleting a user cascades to user_groups (see groups/models.py).
"""

USERS_TABLE = "users"
