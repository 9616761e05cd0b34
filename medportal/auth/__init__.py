"""
Authentication module for the healthcare portal.

This module provides authentication and authorization functionality including:
- Credential login with an optional role check
- Self-service signup for patients and doctors
- Session resolution from the session cookie or a bearer header
- Role-based access control dependencies
"""
