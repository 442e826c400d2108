# Supabase table: memberships
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- invited_email: text (not null) - stored lower-case
- user_id: uuid (foreign key to auth.users.id, nullable) - bound when the invite is claimed
- status: text (not null, default: 'invited') - values: invited, accepted, declined
- role: text (not null, default: 'guest')
- invite_token: text (not null, unique) - 64 hex chars, reissued on every resend
- invited_at: timestamp (default: now())
- accepted_at: timestamp (nullable)
- unique constraint on (trip_id, invited_email)

Rows are never deleted.
"""
