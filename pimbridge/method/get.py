"""
This module provides endpoints for reading contacts.

Endpoints:
    - GET /contact/{contact_id}: Read one contact, optionally restricted to some fields.
    - GET /contacts: Find contacts with query parameters.
    - POST /contacts/find: Find contacts with a JSON body.

Error Handling:
    - 400 with code INVALID_ARGUMENT_ERROR if a find names no fields.
    - 500 with code UNKNOWN_ERROR for store failures, and for a contact id that
      does not exist (clients expect UNKNOWN_ERROR there, not a 404).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pimbridge.database import get_db
from pimbridge.errors import ContactError
from pimbridge.services.contact_service import _find_contacts, _get_contact
from pimbridge.util import http_error
from shared.models.contacts import Contact, ContactFindOptions, ContactFindRequest

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")

router = APIRouter()


@router.get("/contact/{contact_id}", response_model=Contact)
def get_contact(
    contact_id: str,
    fields: Optional[List[str]] = Query(None, description="Field paths to return; all fields if omitted."),
    db: Session = Depends(get_db)
) -> Contact:
    """
    Retrieve a contact by its unique identifier.

    Args:
        contact_id (str): The contact's id.
        fields (Optional[List[str]]): Field paths to return, all if omitted.
        db (Session): The database session dependency.

    Returns:
        Contact: The contact with the requested fields.
    """
    logger.debug(f"Fetching contact by id: {contact_id}")
    try:
        return _get_contact(contact_id, fields, db)
    except ContactError as e:
        raise http_error(e)


@router.get("/contacts", response_model=List[Contact])
def list_contacts(
    fields: List[str] = Query(["*"], description="Field paths to search and return."),
    filter: str = Query("", description="Case-insensitive substring to search for."),
    multiple: bool = Query(True, description="Return every match instead of only the first."),
    db: Session = Depends(get_db)
) -> List[Contact]:
    """
    Find contacts using query parameters.

    Args:
        fields (List[str]): Field paths to search and return, or ["*"] for all fields.
        filter (str): Case-insensitive substring to search for. Empty matches every contact.
        multiple (bool): Return every match instead of only the first.
        db (Session): The database session dependency.

    Returns:
        List[Contact]: The matching contacts, carrying only the requested fields.

    Raises:
        HTTPException: 400 with code INVALID_ARGUMENT_ERROR if no field is given,
            500 with code UNKNOWN_ERROR if the store fails.
    """
    logger.debug(f"/contacts Request: fields={fields}, filter={filter}, multiple={multiple}")
    try:
        return _find_contacts(fields, ContactFindOptions(filter=filter, multiple=multiple), db)
    except ContactError as e:
        raise http_error(e)


@router.post("/contacts/find", response_model=List[Contact])
def find_contacts(request: ContactFindRequest, db: Session = Depends(get_db)) -> List[Contact]:
    """
    Find contacts matching a search.

    Each requested field path is searched for the filter string; the matching
    contacts are returned with only those fields (plus id and display name).
    """
    logger.debug(f"/contacts/find Request:\n{request.model_dump_json(indent=4)}")
    try:
        return _find_contacts(request.fields, request.options, db)
    except ContactError as e:
        raise http_error(e)
