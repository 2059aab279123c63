from fastapi import APIRouter
from app.api.v1.endpoints import auth, departments, courses, professors, reviews, users, search, health
from app.api.v1.endpoints.admin import admin_router

api_router = APIRouter()

# Deep health checks (/health/live, /health/ready)
api_router.include_router(health.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancers"""
    return {"status": "healthy", "service": "unirate-backend"}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(departments.router, prefix="/departments", tags=["Departments"])
api_router.include_router(courses.router, prefix="/courses", tags=["Courses"])
api_router.include_router(professors.router, prefix="/professors", tags=["Professors"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(search.router, prefix="/search", tags=["Search"])

# Admin console (/admin/...)
api_router.include_router(admin_router)
