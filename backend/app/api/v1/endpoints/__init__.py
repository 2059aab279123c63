# API endpoints
from . import auth, departments, courses, professors, reviews, users, search, health

__all__ = ["auth", "departments", "courses", "professors", "reviews", "users", "search", "health"]
