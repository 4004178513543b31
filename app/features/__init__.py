"""
Features Module - Self-contained feature units.

Each feature is a modular unit with its own logic:
- analysis: journal text -> stress score + supportive note, written back
- database: journal repository over a user-scoped Supabase client
- journaling: client-side edit / re-analysis coordination
"""
