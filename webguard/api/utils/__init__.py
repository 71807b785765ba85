"""Utility modules for API-specific functionality.

- **responses**: orjson-backed JSON response class used for fault responses
- **log_context**: log context enrichment passed to the fault handler
"""
