"""Integration adapters for Xero.

Keep these modules small and testable:
- No FastAPI request/response objects
- Pure IO + parsing helpers
"""
