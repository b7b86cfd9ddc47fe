"""HTTP API package — FastAPI app for web front ends.

RULES:
- app.py holds routes; models.py holds pydantic schemas
- The server never holds reading sessions; clients play words themselves
"""
