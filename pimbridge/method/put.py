"""
This module provides an endpoint for updating a contact by ID.

Equivalent to POST /contact with the id taken from the path. Fields left out
of the body are kept as stored; an empty list clears that group.
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


@router.put("/contact/{contact_id}", response_model=Contact)
def update_contact(contact_id: str, contact: Contact, db: Session = Depends(get_db)) -> Contact:
    """
    Update the contact with the given id.

    Args:
        contact_id (str): The id of the contact to update; overrides any id in the body.
        contact (Contact): The fields to write. Fields left out are kept as stored.
        db (Session): The database session dependency.

    Returns:
        Contact: The saved contact with every field "*" covers; photos are left out.

    Raises:
        HTTPException: 500 with code UNKNOWN_ERROR if the store fails.
    """
    logger.debug(f"/contact/{contact_id} Request: update contact")
    contact.id = contact_id
    try:
        return _save_contact(contact, db).contact
    except ContactError as e:
        raise http_error(e)
