"""Timesheet System package.

This package is organized by feature modules (punches, timesheets, exports, ...)
with a thin Flask JSON controller layer over service/repository layers.
"""
