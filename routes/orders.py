import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from errors import DependencyError, NotFoundError, ValidationError
from models import Customer, Order, Service, User, Vendor
from schemas import OrderCreate, OrderStatusUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", status_code=201)
def place_order(payload: OrderCreate, db: Session = Depends(get_db)):
    order = Order(
        customer_id=payload.customer_id,
        vendor_id=payload.vendor_id,
        service_id=payload.service_id,
        quantity=payload.quantity,
    )
    try:
        db.add(order)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Order rejected: %s", exc.orig)
        raise ValidationError("Referenced customer, vendor or service does not exist") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Order insert failed")
        raise DependencyError("Failed to place order") from exc

    logger.info("Order %s placed by customer %s", order.id, order.customer_id)
    return {"message": "Order placed successfully", "orderId": order.id}


@router.get("")
def customer_orders(customer_id: Optional[int] = None, db: Session = Depends(get_db)):
    if not customer_id:
        raise ValidationError("Missing customer_id")

    rows = (
        db.query(Order, Service.title, Service.image, Vendor.name)
        .join(Service, Order.service_id == Service.id)
        .join(Vendor, Order.vendor_id == Vendor.id)
        .filter(Order.customer_id == customer_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return [
        dict(order.to_dict(), service_title=title, service_image=image, vendor_name=vendor_name)
        for order, title, image, vendor_name in rows
    ]


@router.get("/vendor-orders")
def vendor_orders(vendor_id: Optional[int] = None, db: Session = Depends(get_db)):
    if not vendor_id:
        raise ValidationError("Missing vendor_id")

    # orders.customer_id points at the customer profile; its user carries the display name
    rows = (
        db.query(Order, Service.title, func.coalesce(User.name, Customer.name))
        .join(Service, Order.service_id == Service.id)
        .join(Customer, Order.customer_id == Customer.id)
        .outerjoin(User, Customer.user_id == User.id)
        .filter(Order.vendor_id == vendor_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return [
        dict(order.to_dict(), service_title=title, customer_name=customer_name)
        for order, title, customer_name in rows
    ]


@router.patch("/{order_id}")
def update_order_status(order_id: int, payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")

    try:
        order.status = payload.status.value
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Status update failed for order %s", order_id)
        raise DependencyError("Failed to update order status") from exc

    logger.info("Order %s status -> %s", order_id, payload.status.value)
    return {"message": "Order status updated successfully"}
