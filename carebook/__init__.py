"""
CareBook

A FastAPI-based appointment booking service for customers, doctors and
admins, with doctor approval, role-based access control and simulated
payments.
"""

__version__ = "1.0.0"
