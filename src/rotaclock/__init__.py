"""RotaClock package.

Multi-tenant shift scheduling and timekeeping API, organized by feature
modules (scheduling, timekeeping, approvals, payroll, ...) with a thin Flask
controller layer over service/repository layers.
"""
