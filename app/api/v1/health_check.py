"""
Health Check API
"""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.database import ping

router = APIRouter()


@router.get("/health_check", response_class=PlainTextResponse)
def health_check():
    """Simple liveness check, no database access"""
    return "OK"


@router.get("/health")
def health():
    """API status plus database reachability (SELECT 1)"""
    return {"status": "ok", "db": "up" if ping() else "down"}
