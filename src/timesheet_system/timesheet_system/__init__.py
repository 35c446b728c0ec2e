"""Timesheet System package.

This package is organized by feature modules (calendar, periods, submissions,
users, ...) with a thin Flask controller layer and service/repository layers.
"""
