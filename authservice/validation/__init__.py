"""
Request validation for the auth service.

This package provides:
- Declarative rule tables for string and object fields
- Signup, login and password-reset schemas
- The FastAPI dependency that gates routes on a schema
"""
