"""
ClinicSync

Role-scoped session and data-synchronization layer for an appointment
booking system, together with the FastAPI backend it talks to.
"""

__version__ = "1.0.0"
