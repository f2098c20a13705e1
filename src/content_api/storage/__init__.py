"""
Storage layer for the content API.

Resolves where the service collection lives (mounted disk or local fallback)
and reads/writes it with seed-on-first-read semantics.
"""
