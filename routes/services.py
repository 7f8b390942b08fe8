import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import uploads
from database import get_db
from errors import ConflictError, DependencyError, NotFoundError, ValidationError
from models import Service, Vendor
from security import check_file_token, issue_file_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/services", tags=["Services"])

# /api/secure-file is kept as an alias of /api/services/secure-file
secure_router = APIRouter(prefix="/api", tags=["Services"])


@router.get("/count")
def count_services(db: Session = Depends(get_db)):
    total = db.query(func.count(Service.id)).scalar()
    return {"totalServices": total or 0}


@router.get("")
def list_services(vendor_id: Optional[int] = None, db: Session = Depends(get_db)):
    query = db.query(Service)
    if vendor_id:
        query = query.filter(Service.vendor_id == vendor_id)
    return [s.to_dict() for s in query.order_by(Service.id).all()]


def _parse_number(value, cast, field):
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")


@router.post("", status_code=201)
def create_service(
    vendor_id: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    unit: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    if not all([vendor_id, title, price, category]):
        raise ValidationError("Missing required fields")
    vendor_id = _parse_number(vendor_id, int, "vendor_id")
    price = _parse_number(price, float, "price")
    if not math.isfinite(price) or price < 0:
        raise ValidationError("price must be a non-negative number")

    # Reject bad uploads before anything is written
    data = uploads.validate_image(image) if uploads.has_file(image) else None

    if db.get(Vendor, vendor_id) is None:
        raise NotFoundError("Vendor not found")

    filename = uploads.save_image(image, data) if data is not None else None
    service = Service(
        vendor_id=vendor_id,
        title=title,
        description=description,
        price=price,
        unit=unit,
        image=filename,
        category=category,
    )
    try:
        db.add(service)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        uploads.discard(filename)
        logger.exception("Service insert failed for vendor %s", vendor_id)
        raise DependencyError("Failed to add service") from exc

    logger.info("Vendor %s added service %s (%s)", vendor_id, service.id, title)
    body = {"message": "Service added successfully", "id": service.id, "image": filename}
    if filename:
        body["download_token"] = issue_file_token(filename)
    return body


@router.delete("/{service_id}")
def delete_service(service_id: int, db: Session = Depends(get_db)):
    try:
        deleted = db.query(Service).filter(Service.id == service_id).delete(synchronize_session=False)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Refused to delete service %s: %s", service_id, exc.orig)
        raise ConflictError("Service has orders and cannot be deleted") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Delete failed for service %s", service_id)
        raise DependencyError("Failed to delete service") from exc

    if not deleted:
        raise NotFoundError("Service not found")
    logger.info("Deleted service %s", service_id)
    return {"message": "Service deleted successfully"}


@router.get("/secure-file")
@secure_router.get("/secure-file")
def secure_file(file: Optional[str] = None, token: Optional[str] = None):
    """Stream a stored upload to a caller holding a download token issued for it."""
    check_file_token(token, file)
    path = uploads.resolve_upload(file)
    return FileResponse(path)
