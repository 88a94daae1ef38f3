"""Core domain package for chatreel.

Core contains normalization, link extraction, deduplication, reconciliation
and commit logic without any Signal, WhatsApp or YouTube-specific code,
keeping the business logic portable.
"""
