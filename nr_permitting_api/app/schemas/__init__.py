"""
Pydantic schema definitions for record payloads.

Schemas are separated from the storage layer to decouple the
request/response representation from persistence.
"""
