# Supabase Auth
# This module uses Supabase's built-in passwordless authentication
# No custom tables are required - Supabase Auth handles:
# - Account auto-provisioning on first passcode request (auth.users table)
# - One-time passcode and magic link issue/verification
# - JWT access and refresh token generation

"""
Supabase Auth calls used here:
- auth.sign_in_with_otp() - Email a one-time passcode (and a magic link)
- auth.verify_otp() - Exchange email + code for a session (type "email" or "magiclink")
- auth.get_user() - Resolve the current user from an access token

A public "users" table (id, email) mirrors auth.users so the roster can show
which address an accepted membership is bound to.
"""
