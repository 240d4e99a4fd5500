"""
Pydantic schema definitions for API payloads.

Request bodies (which carry validation) are kept separate from the
stored record returned by the API.
"""
