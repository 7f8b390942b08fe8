from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models import OrderStatus, Role

# ----------------------------
# Pydantic Models
# ----------------------------

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Role

    @field_validator('name')
    def name_must_not_be_blank(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip()


class ResetPasswordRequest(BaseModel):
    userId: int
    newPassword: str = Field(..., min_length=1)


class OrderCreate(BaseModel):
    customer_id: int
    vendor_id: int
    service_id: int
    quantity: int

    @field_validator('quantity')
    def quantity_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError("Quantity must be positive")
        return v


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentInitRequest(BaseModel):
    email: EmailStr
    amount: float = Field(..., allow_inf_nan=False)

    @field_validator('amount')
    def amount_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError("Amount must be positive")
        return v


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    image: Optional[str] = None
