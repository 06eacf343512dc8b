"""
Pydantic schema definitions for API payloads.

Schemas use the camelCase field names the forum UI sends and expects
(``courseSection``, ``lecturerName`` ...) as aliases, while Python code
works with snake_case attributes.
"""
