"""
Healthcare portal backend.

Authentication, role-based authorization and transactional account
provisioning for patients, doctors and administrators.
"""
