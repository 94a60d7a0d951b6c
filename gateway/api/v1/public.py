# gateway/api/v1/public.py
from fastapi import APIRouter, Response

from gateway.utils.dt import now_utc

router = APIRouter(tags=["public"])

@router.get("/api/public")
def public():
    return {"message": "public ok", "time": now_utc()}

@router.get("/healthz", status_code=204)
def healthz():
    return Response(status_code=204)
