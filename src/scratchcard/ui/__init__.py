"""Arcade presentation layer. Importing this package requires arcade."""
