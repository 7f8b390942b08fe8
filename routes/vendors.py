import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import uploads
from database import get_db
from errors import DependencyError, NotFoundError, ValidationError
from models import Vendor
from security import issue_file_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/vendors", tags=["Vendors"])

LISTING_COLUMNS = ("id", "name", "description", "image", "category")


@router.get("")
def list_vendors(db: Session = Depends(get_db)):
    vendors = db.query(Vendor).order_by(Vendor.id).all()
    return [v.to_dict(*LISTING_COLUMNS) for v in vendors]


@router.get("/{vendor_id}")
def get_vendor(vendor_id: int, db: Session = Depends(get_db)):
    vendor = db.get(Vendor, vendor_id)
    if vendor is None:
        raise NotFoundError("Vendor not found")
    return vendor.to_dict()


@router.post("/update-logo")
def update_logo(
    vendorId: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    if not vendorId or not uploads.has_file(image):
        raise ValidationError("Missing vendorId or image file")

    data = uploads.validate_image(image)
    vendor = db.get(Vendor, vendorId)
    if vendor is None:
        raise NotFoundError("Vendor not found")

    filename = uploads.save_image(image, data)
    try:
        vendor.image = filename
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        uploads.discard(filename)
        logger.exception("Logo update failed for vendor %s", vendorId)
        raise DependencyError("Failed to update logo") from exc

    logger.info("Vendor %s logo set to %s", vendorId, filename)
    return {
        "message": "Vendor logo updated successfully",
        "image": filename,
        "download_token": issue_file_token(filename),
    }


@router.post("/logout")
def vendor_logout():
    return {"message": "Vendor logged out successfully"}
