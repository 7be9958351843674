"""Crew Attendance package.

Feature modules (attendance, payroll, reports, users, projects) sit on top of a
thin HTTP layer that talks to the persistence API; Flask controllers stay thin.
"""
