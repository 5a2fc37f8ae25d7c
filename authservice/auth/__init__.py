"""
Authentication for the auth service.

This package provides:
- Password hashing and strength checks
- JWT issuance and verification
- Bearer-token protection for routes
- Signup, login and password-reset endpoints
"""
