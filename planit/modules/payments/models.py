# Supabase table: payments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- user_id: uuid (foreign key to auth.users.id, not null)
- type: text (not null, default: 'deposit')
- amount_cents: integer (not null, > 0) - minor currency units, never fractional
- method: text (not null) - values: venmo, zelle, cashapp, other
- identifier: text (nullable) - handle or confirmation number the guest paid from
- memo: text (nullable)
- verified_at: timestamp (nullable) - set once by the trip's organizer, never cleared
- verified_by: uuid (foreign key to auth.users.id, nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (trip_id, user_id, type) - writes upsert on it
"""
