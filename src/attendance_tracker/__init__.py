"""Attendance Tracker package.

Feature modules (attendance, reports, users) each carry a thin Flask
controller, a service layer and repositories behind a Protocol.
"""

__version__ = "1.0.0"
