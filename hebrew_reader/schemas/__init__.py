"""
Hebrew Reader Backend — API Schemas
===================================

Pydantic models defining the API contract. They are kept apart from the ORM
models: the wire format is camelCase and never exposes internal columns.
"""
