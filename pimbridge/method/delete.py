"""
This module provides an API endpoint for removing a contact from the store.

Functions:
    delete_contact(contact_id: str) -> dict:
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pimbridge.database import get_db
from pimbridge.errors import ContactError
from pimbridge.services.contact_service import _remove_contact
from pimbridge.util import http_error

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")

router = APIRouter()


@router.delete("/contact/{contact_id}", response_model=dict)
def delete_contact(contact_id: str, db: Session = Depends(get_db)) -> dict:
    """
    Deletes a contact and its addresses and categories.

    Args:
        contact_id (str): The unique identifier of the contact to delete.

    Returns:
        dict: A dictionary containing the contact ID and a status of "deleted".

    Raises:
        HTTPException: 500 with code UNKNOWN_ERROR if the contact is not found or the store fails.
    """
    logger.debug(f"/contact/{contact_id} Request: delete contact")
    try:
        _remove_contact(contact_id, db)
    except ContactError as e:
        raise http_error(e)

    return {
        "id": contact_id,
        "status": "deleted"
    }
