# Supabase table: files
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in repository.py
# File content lives in S3 under s3_key (see storage.py)

"""
Expected Supabase table structure:

files:
- id: uuid (primary key)
- name: text (not null) - display name as uploaded
- s3_key: text (not null) - groups/{group_id}/{file_id}/{name}, never returned to clients
- size_bytes: bigint (not null)
- content_type: text (not null)
- group_id: uuid (foreign key to groups.id, on delete cascade, not null)
- uploaded_by: uuid (foreign key to users.id, not null)
- created_at: timestamptz (not null)
- index on (group_id, created_at desc)
"""

FILES_TABLE = "files"
