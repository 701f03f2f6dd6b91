"""ULSConnect package.

Feature modules (users, activities, enrollments, attendance, scoring, reports, ...)
each expose a thin Flask controller on top of service and repository layers.
"""
