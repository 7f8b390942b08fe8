import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base


class Role(str, enum.Enum):
    admin = "admin"
    vendor = "vendor"
    customer = "customer"


class OrderStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    shipped = "shipped"
    delivered = "delivered"
    completed = "completed"
    cancelled = "cancelled"


class _Base:
    def to_dict(self, *columns):
        """Column values as a dict, optionally restricted to ``columns``."""
        names = columns or [c.name for c in self.__table__.columns]
        return {name: getattr(self, name) for name in names}


Base = declarative_base(cls=_Base)


def _utcnow():
    # stored naive, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ----------------------------
# MySQL Models
# ----------------------------

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    email = Column(String(150), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # password hash, never the plain text
    role = Column(String(20), nullable=False)  # admin, vendor or customer
    image = Column(String(255), nullable=True)

    def public_dict(self):
        return self.to_dict("id", "name", "email", "role", "image")


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(255), nullable=True)
    category = Column(String(100), nullable=True)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=True)
    name = Column(String(150), nullable=False)


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    unit = Column(String(50), nullable=True)
    image = Column(String(255), nullable=True)
    category = Column(String(100), nullable=False)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    status = Column(String(30), nullable=False, default=OrderStatus.pending.value)
    created_at = Column(DateTime, nullable=False, default=_utcnow)


# Profile table created alongside a user of the given role, if any.
PROFILE_MODELS = {
    Role.admin: None,
    Role.vendor: Vendor,
    Role.customer: Customer,
}
