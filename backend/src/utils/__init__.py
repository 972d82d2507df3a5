"""
Utility modules for the dental booking application.

This package contains shared helpers used across the application:
datetime handling and half-open interval arithmetic.
"""
