"""Pydantic schema models for API responses.

- **errors**: Body of the JSON fault response sent to XHR clients
"""
