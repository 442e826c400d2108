# Supabase table: trips
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- slug: text (not null, unique) - URL-safe, lower-case
- title: text (not null)
- location_name: text (nullable)
- start_date: date (nullable)
- end_date: date (nullable)
- overview: text (nullable)
- itinerary: jsonb (nullable) - ordered list of tagged items:
    {"kind": "day", "day": "...", "title": "...", "details": "..."}
    {"kind": "game", "title": "...", "day": "...", "details": "...", "prize_fund_cents": 0}
  items written before tagging carry no "kind" and are read as days
- deposit_amount_cents: integer (not null, default: 0)
- deposit_due_date: date (nullable)
- venmo_handle: text (nullable)
- venmo_qr_url: text (nullable)
- zelle_recipient: text (nullable)
- required_memo_template: text (nullable)
- created_by: uuid (foreign key to auth.users.id, not null) - the organizer
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
