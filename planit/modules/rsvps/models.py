# Supabase table: rsvps
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- user_id: uuid (foreign key to auth.users.id, not null)
- status: text (not null) - values: yes, no, maybe
- arrival_at: timestamptz (nullable)
- departure_at: timestamptz (nullable)
- walking_pref: text (nullable) - values: walk, ride, either
- notes: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (trip_id, user_id) - writes upsert on it
"""
