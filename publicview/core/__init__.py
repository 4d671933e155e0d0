# publicview/core/__init__.py

"""Core domain models and utilities used across publicview.

This package provides domain types, exceptions, constants and the field
policy loader shared by the rest of the application.
"""
