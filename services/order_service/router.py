from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from shared.config.database import get_db
from shared.responses import Envelope
from .orchestrator import OrderOrchestrator
from .schemas import OrderCreate, OrderResponse, StatusUpdate
from .service import OrderService

router = APIRouter(prefix="/api/orders", tags=["Orders"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

OrderEnvelope = Envelope[OrderResponse]
OrderListEnvelope = Envelope[list[OrderResponse]]


def get_orchestrator(request: Request) -> OrderOrchestrator:
    return request.app.state.orchestrator


@public_router.get("/health")
async def health_check():
    return {"status": "OK", "service": "Order Service"}

# Both "/api/orders" and "/api/orders/" are served; no slash redirects
@router.post(
    "/",
    response_model=OrderEnvelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@router.post(
    "",
    response_model=OrderEnvelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    order: OrderCreate,
    db: AsyncSession = Depends(get_db),
    orchestrator: OrderOrchestrator = Depends(get_orchestrator),
):
    created = await OrderService.create_order(db, orchestrator, order)
    return {"success": True, "data": created}

@router.get("/", response_model=OrderListEnvelope, response_model_exclude_none=True, include_in_schema=False)
@router.get("", response_model=OrderListEnvelope, response_model_exclude_none=True)
async def list_orders(db: AsyncSession = Depends(get_db)):
    orders = await OrderService.list_orders(db)
    return {"success": True, "count": len(orders), "data": orders}

@router.get("/user/{user_id}", response_model=OrderListEnvelope, response_model_exclude_none=True)
async def list_user_orders(user_id: str, db: AsyncSession = Depends(get_db)):
    orders = await OrderService.list_user_orders(db, user_id)
    return {"success": True, "count": len(orders), "data": orders}

@router.get("/{order_id}", response_model=OrderEnvelope, response_model_exclude_none=True)
async def get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    return {"success": True, "data": await OrderService.get_order(db, order_id)}

# Administrative: no transition table, any status may be set
@router.api_route(
    "/{order_id}/status",
    methods=["PUT", "PATCH"],
    response_model=OrderEnvelope,
    response_model_exclude_none=True,
)
async def update_order_status(order_id: str, payload: StatusUpdate, db: AsyncSession = Depends(get_db)):
    order = await OrderService.update_status(db, order_id, payload.status)
    return {"success": True, "data": order}

@router.post("/{order_id}/cancel", response_model=OrderEnvelope, response_model_exclude_none=True)
async def cancel_order(order_id: str, db: AsyncSession = Depends(get_db)):
    order = await OrderService.cancel_order(db, order_id)
    return {"success": True, "message": "Order cancelled successfully", "data": order}

@router.delete("/{order_id}", response_model=OrderEnvelope, response_model_exclude_none=True)
async def delete_order(order_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    # Some deployments treat DELETE as the user's cancel, not an admin purge
    if request.app.state.settings.order_delete_mode == "cancel":
        order = await OrderService.cancel_order(db, order_id)
        return {"success": True, "message": "Order cancelled successfully", "data": order}

    await OrderService.delete_order(db, order_id)
    return {"success": True, "message": "Order deleted successfully"}
