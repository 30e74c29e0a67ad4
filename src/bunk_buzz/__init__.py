"""Bunk Buzz backend package.

Organized by feature modules (users, subjects, timetable, attendance,
predictor) with a thin Flask route layer over service/repository layers.
"""
