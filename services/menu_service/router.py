from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from shared.config.database import get_db
from shared.responses import Envelope
from .schemas import PizzaCreate, PizzaResponse, PizzaUpdate
from .service import MenuService

router = APIRouter(prefix="/api/menu", tags=["Menu"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health")
async def health_check():
    return {"status": "OK", "service": "Menu Service"}


@router.get("/", response_model=Envelope[list[PizzaResponse]], response_model_exclude_none=True, include_in_schema=False)
@router.get("", response_model=Envelope[list[PizzaResponse]], response_model_exclude_none=True)
async def list_pizzas(db: AsyncSession = Depends(get_db)):
    pizzas = await MenuService.list_pizzas(db)
    return {"success": True, "count": len(pizzas), "data": pizzas}

@router.post(
    "/",
    response_model=Envelope[PizzaResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@router.post(
    "",
    response_model=Envelope[PizzaResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_pizza(pizza: PizzaCreate, db: AsyncSession = Depends(get_db)):
    return {"success": True, "data": await MenuService.create_pizza(db, pizza)}

@router.get("/{pizza_id}", response_model=Envelope[PizzaResponse], response_model_exclude_none=True)
async def get_pizza(pizza_id: str, db: AsyncSession = Depends(get_db)):
    return {"success": True, "data": await MenuService.get_pizza(db, pizza_id)}

@router.put("/{pizza_id}", response_model=Envelope[PizzaResponse], response_model_exclude_none=True)
async def update_pizza(pizza_id: str, payload: PizzaUpdate, db: AsyncSession = Depends(get_db)):
    return {"success": True, "data": await MenuService.update_pizza(db, pizza_id, payload)}

@router.delete("/{pizza_id}", response_model=Envelope, response_model_exclude_none=True)
async def delete_pizza(pizza_id: str, db: AsyncSession = Depends(get_db)):
    await MenuService.delete_pizza(db, pizza_id)
    return {"success": True, "message": "Pizza deleted successfully"}
