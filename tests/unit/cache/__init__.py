"""Tests for the cache protocol package.

Contains unit tests for:
- Response classification (rate limiting vs. transport errors)
- Lookup and download
- The reserve/upload/finalize store transaction
- The CacheClient façade end to end against the fake service
"""
