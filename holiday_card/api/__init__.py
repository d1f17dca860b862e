"""
API package for the holiday card backend.

Endpoints are organized by functionality:
- cards: Holiday card generation
- system: Health check and front-end page
"""
