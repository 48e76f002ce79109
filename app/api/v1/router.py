from fastapi import APIRouter
from app.api.v1.endpoints import auth, leads, status_hierarchy, status_engine

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(leads.router, prefix="/leads", tags=["leads"])
api_router.include_router(status_hierarchy.router, prefix="/status-hierarchy", tags=["status-hierarchy"])
api_router.include_router(status_engine.router, prefix="/status-engine", tags=["status-engine"])
