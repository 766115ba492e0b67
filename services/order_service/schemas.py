from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import OrderStatus, PaymentMethod, PaymentStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class DeliveryAddress(_CamelModel):
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)

    @field_validator("street", "city", "zip_code")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class OrderLineRequest(_CamelModel):
    pizza_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class OrderCreate(_CamelModel):
    user_id: str = Field(min_length=1)
    items: list[OrderLineRequest] = Field(min_length=1)
    delivery_address: DeliveryAddress
    payment_method: PaymentMethod = PaymentMethod.CASH


class StatusUpdate(_CamelModel):
    status: OrderStatus


class OrderItemResponse(_CamelModel):
    pizza_id: str
    pizza_name: str
    quantity: int
    price: float


class OrderResponse(_CamelModel):
    id: str
    user_id: str
    items: list[OrderItemResponse]
    total_amount: float
    status: OrderStatus
    delivery_address: DeliveryAddress
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime
