from fastapi import APIRouter
from auxia.api.v1.endpoints import auth, admin, student, faculty, club, health

api_router = APIRouter()

# Liveness / readiness probes
api_router.include_router(health.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": "auxia-backend"}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(student.router, prefix="/student", tags=["Student"])
api_router.include_router(faculty.router, prefix="/faculty", tags=["Faculty"])
api_router.include_router(club.router, prefix="/club", tags=["Club"])
