"""Classroom roll-call service package.

This package is organized by feature modules (students, calls, settings, stats)
with a thin Flask controller layer on top of service/repository layers.
"""
