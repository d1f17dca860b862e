"""
API Endpoints Package

Available Endpoints:
- cards: POST /api/generate-card
- system: GET /health, GET /
"""
