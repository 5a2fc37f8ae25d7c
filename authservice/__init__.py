"""
Authentication service: request validation, JWT issuance and verification,
password hashing and a global HTTP error handler.
"""
