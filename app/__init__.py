"""
Clinic Scheduling API

A FastAPI-based service for a small clinic: user accounts, appointment
booking between patients and doctors, and prescriptions issued against
appointments, with role-based access control.
"""

__version__ = "1.0.0"
