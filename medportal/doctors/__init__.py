"""
Doctor profiles and the verification workflow that gates doctor logins.
"""
