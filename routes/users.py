import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError as SchemaError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import uploads
from database import get_db
from errors import ConflictError, DependencyError, NotFoundError, ValidationError, field_errors
from models import Role, User
from routes.auth import register_account
from schemas import RegisterRequest, ResetPasswordRequest, UserResponse
from security import hash_password, issue_file_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=list[UserResponse])
def get_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.id).all()


@router.get("/admins", response_model=list[UserResponse])
def get_admins(db: Session = Depends(get_db)):
    return db.query(User).filter(User.role == Role.admin.value).order_by(User.id).all()


@router.get("/counts")
def get_user_counts(db: Session = Depends(get_db)):
    counts = dict(db.query(User.role, func.count(User.id)).group_by(User.role).all())
    return {
        "admins": counts.get(Role.admin.value, 0),
        "vendors": counts.get(Role.vendor.value, 0),
        "customers": counts.get(Role.customer.value, 0),
    }


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    try:
        updated = (
            db.query(User)
            .filter(User.id == payload.userId)
            .update({User.password: hash_password(payload.newPassword)}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Reset password failed for user %s", payload.userId)
        raise DependencyError("Failed to reset password") from exc

    if not updated:
        raise NotFoundError("User not found")
    logger.info("Password reset for user %s", payload.userId)
    return {"message": "Password reset successful"}


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    try:
        deleted = db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Refused to delete user %s: %s", user_id, exc.orig)
        raise ConflictError("User still has services or orders") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Delete failed for user %s", user_id)
        raise DependencyError("Database error") from exc

    if not deleted:
        raise NotFoundError("User not found")
    logger.info("Deleted user %s", user_id)
    return {"message": "User deleted successfully"}


# Multipart registration, used by the admin dashboard to add accounts with a picture
@router.post("/register", status_code=201)
def register_with_image(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    if not all([name, email, password, role]):
        raise ValidationError("Missing required fields")
    try:
        payload = RegisterRequest(name=name, email=email, password=password, role=role)
    except SchemaError as exc:
        raise ValidationError("Missing or invalid fields", errors=field_errors(exc.errors())) from exc

    data = uploads.validate_image(image) if uploads.has_file(image) else None

    filename = uploads.save_image(image, data) if data is not None else None
    try:
        user = register_account(db, payload.name, payload.email, payload.password, payload.role, image=filename)
    except Exception:
        uploads.discard(filename)
        raise

    body = {"message": "User registered successfully", "user": UserResponse.model_validate(user).model_dump()}
    if filename:
        body["download_token"] = issue_file_token(filename)
    return body
