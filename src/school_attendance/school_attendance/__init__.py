"""School attendance tracker package.

Organized by feature modules (classes, students, attendance, reports) with a
thin Flask controller layer over service/repository layers.
"""
