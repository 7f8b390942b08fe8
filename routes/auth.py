import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from errors import AuthError, ConflictError, DependencyError
from models import PROFILE_MODELS, Customer, Role, User, Vendor
from schemas import LoginRequest, RegisterRequest
from security import hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


# ------------------------------------------------------------
# Registration
# ------------------------------------------------------------

def _add_profile(db: Session, role: Role, user: User):
    """Insert the vendor/customer row that belongs to a freshly flushed user."""
    profile_model = PROFILE_MODELS[role]
    if profile_model is None:
        return None
    profile = profile_model(user_id=user.id, name=user.name)
    db.add(profile)
    db.flush()
    return profile


def register_account(db: Session, name, email, password, role: Role, image=None):
    """
    Create a user and, for vendors and customers, its profile row.

    Both inserts share one transaction: if the profile can't be written the
    user row is rolled back with it.
    """
    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError("Email already registered")

    user = User(
        name=name,
        email=email,
        password=hash_password(password),
        role=role.value,
        image=image,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Registration rejected for %s: %s", email, exc.orig)
        raise ConflictError("Email already registered") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("User insert failed for %s", email)
        raise DependencyError("User creation failed") from exc

    try:
        _add_profile(db, role, user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Profile insert failed for %s (%s); user rolled back", email, role.value)
        raise DependencyError(f"Failed to create {role.value} profile; registration rolled back") from exc

    db.refresh(user)
    logger.info("Registered %s %s (id=%s)", role.value, email, user.id)
    return user


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = register_account(db, payload.name, payload.email, payload.password, payload.role)
    return {
        "message": f"{payload.role.value} registered successfully",
        "user": user.to_dict("id", "name", "email", "role"),
    }


# ------------------------------------------------------------
# Login / Logout
# ------------------------------------------------------------

def _profile_id(db: Session, model, user_id):
    try:
        row = db.query(model.id).filter(model.user_id == user_id).first()
    except SQLAlchemyError as exc:
        logger.exception("%s lookup failed for user %s", model.__tablename__, user_id)
        raise DependencyError(f"Login error ({model.__name__.lower()} lookup)") from exc
    return row[0] if row else None


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = db.query(User).filter(User.email == payload.email).first()
    except SQLAlchemyError as exc:
        logger.exception("Login lookup failed for %s", payload.email)
        raise DependencyError("Database error") from exc

    if not user or not verify_password(user.password, payload.password):
        logger.info("Failed login for %s", payload.email)
        raise AuthError("Invalid credentials")

    body = user.to_dict("id", "name", "email", "role")
    try:
        role = Role(user.role)
    except ValueError as exc:
        logger.error("User %s has unknown stored role %r", user.id, user.role)
        raise DependencyError("Login error (unknown role)") from exc

    if role is Role.vendor:
        body["vendorId"] = _profile_id(db, Vendor, user.id)
    elif role is Role.customer:
        body["customerId"] = _profile_id(db, Customer, user.id)

    return {"message": "Login successful", "user": body}


# Stateless API: nothing to invalidate
@router.post("/logout")
def logout():
    return {"message": "User logged out successfully"}
