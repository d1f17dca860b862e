"""
Core package for the holiday card backend.

- config: Application settings loaded from environment variables / .env
"""
