"""Time-clock attendance package.

Organized by feature modules (users, attendance, capture, geolocation,
reports, corrections) with a thin Flask controller layer on top of
service/repository layers.
"""
