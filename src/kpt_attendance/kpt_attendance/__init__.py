"""KPT Attendance package.

Feature modules (students, faculty, attendance, promotion, reports, ...)
sit behind a thin Flask controller layer; the business rules live in
service classes that receive the directory store through their constructor.
"""
