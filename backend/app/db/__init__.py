"""
Database module for UniRate

Contains seed data and database utilities.
"""
from app.db.seed_data import seed_all, clear_all

__all__ = ["seed_all", "clear_all"]
