"""
Administrator tools for managing users and reviewing doctors.
"""
