from datetime import datetime, timezone

from fastapi import APIRouter, Request

from .proxy import GatewayProxy

PROXIED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

public_router = APIRouter()
router = APIRouter()


@public_router.get("/health")
async def health_check():
    return {
        "status": "OK",
        "message": "API Gateway is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Everything else goes to the route table; unmatched paths get a 404 envelope
@router.api_route("/{full_path:path}", methods=PROXIED_METHODS, include_in_schema=False)
async def proxy(full_path: str, request: Request):
    gateway: GatewayProxy = request.app.state.proxy
    return await gateway.handle(request)
