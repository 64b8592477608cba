"""
This module provides an endpoint for saving a contact.

A contact without an `id` (or with an id the store does not know) is created.
A contact with a known `id` updates that record; only the fields present in
the request are written, so a contact returned by a find with a subset of
fields can be saved back without losing the others.

The response is always the complete contact as stored.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pimbridge.database import get_db
from pimbridge.errors import ContactError
from pimbridge.services.contact_service import _save_contact
from pimbridge.util import http_error
from shared.models.contacts import Contact

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")

router = APIRouter()


@router.post("/contact", response_model=Contact)
def save_contact(contact: Contact, db: Session = Depends(get_db)) -> Contact:
    """
    Create or update a contact.

    Args:
        contact (Contact): The contact to save.
        db (Session): The database session dependency.

    Returns:
        Contact: The saved contact with every field "*" covers; photos are left out.

    Raises:
        HTTPException: 500 with code UNKNOWN_ERROR if the store fails.
    """
    logger.debug(f"/contact Request: save contact {contact.id}")
    try:
        return _save_contact(contact, db).contact
    except ContactError as e:
        raise http_error(e)
