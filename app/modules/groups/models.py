# Supabase tables: groups, user_groups
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in repository.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- created_by: uuid (foreign key to users.id, not null) - creator, first admin
- created_at: timestamptz (not null)

user_groups:
- user_id: uuid (foreign key to users.id, on delete cascade)
- group_id: uuid (foreign key to groups.id, on delete cascade)
- role: text (not null, check in ('admin', 'member'))
- joined_at: timestamptz (not null)
- primary key (user_id, group_id) - at most one role per user per group

The composite key is what makes concurrent add-member calls for the same
(user, group) resolve to one winner; the loser gets a 23505 violation.
"""

GROUPS_TABLE = "groups"
MEMBERSHIPS_TABLE = "user_groups"
