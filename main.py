"""
Entry point for the Client Portal Risk Analytics API.
Run with: uvicorn main:app --reload
"""
from portal.main import app

__all__ = ["app"]
