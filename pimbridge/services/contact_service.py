"""
Business logic for contact operations.

This module contains the save, remove, find and get operations, separated from
the FastAPI route handlers. Failures are raised as `ContactError`:

    - INVALID_ARGUMENT_ERROR: a find without any field to search.
    - UNKNOWN_ERROR: anything that goes wrong while saving, removing or
      reading, including a contact id that is not in the store.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from pimbridge.errors import ContactError, ContactErrorCode
from pimbridge.filter import build_filter
from pimbridge.mapping import ALL_FIELDS, expand_fields
from pimbridge.photos import PhotoStore
from pimbridge.store import ContactStore
from pimbridge.sync import WriteResult, read_from_backing, save_contact
from shared.models.contacts import Contact, ContactFindOptions

from pydantic import ValidationError

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")


def _save_contact(contact: Contact, db: Session) -> WriteResult:
    """
    Save a contact to the store, creating it or updating the record with its id.

    Args:
        contact (Contact): The contact to save; fields left as None are not touched on update.
        db (Session): The database session.

    Returns:
        WriteResult: The persisted record and the contact read back with all fields.

    Raises:
        ContactError: UNKNOWN_ERROR if the store fails.
    """
    logger.debug(f"Saving contact:\n{contact.model_dump_json(indent=4, by_alias=True, exclude_none=True)}")

    store = ContactStore(db)
    try:
        result = save_contact(store, contact, photo_store=PhotoStore(store))
    except Exception as e:
        logger.error(f"Error saving contact {contact.id}: {e}", exc_info=True)
        raise ContactError(ContactErrorCode.UNKNOWN_ERROR, f"Failed to save contact: {e}")

    logger.info(f"Saved contact {result.record.uid}.")
    return result


def _remove_contact(contact_id: Optional[str], db: Session) -> Contact:
    """
    Remove a contact from the store.

    Returns:
        Contact: The removed contact, as it was stored.

    Raises:
        ContactError: UNKNOWN_ERROR if the id is missing or unknown, or the store fails.
    """
    store = ContactStore(db)
    try:
        record = store.find_by_uid(contact_id)
        if record is None:
            logger.warning(f"Cannot remove contact {contact_id}: not found.")
            raise ContactError(ContactErrorCode.UNKNOWN_ERROR, "Contact not found")

        removed = read_from_backing(record, [ALL_FIELDS])
        logger.info(f"Removing contact: {contact_id}")
        store.remove(record)
    except ContactError:
        raise
    except Exception as e:
        logger.error(f"Error removing contact {contact_id}: {e}", exc_info=True)
        raise ContactError(ContactErrorCode.UNKNOWN_ERROR, f"Failed to remove contact: {e}")

    return removed


def _find_contacts(fields: Optional[List[str]], options: Optional[ContactFindOptions], db: Session) -> List[Contact]:
    """
    Find contacts whose searched fields contain the filter string, ignoring case.

    Only the requested fields (plus id and display name) are returned. Without
    `options.multiple`, at most one contact is returned. Without a filter, every
    contact matches.

    Args:
        fields (Optional[List[str]]): Field paths to search and return, or ["*"].
        options (Optional[ContactFindOptions]): Filter string and cardinality.
        db (Session): The database session.

    Raises:
        ContactError: INVALID_ARGUMENT_ERROR if no field is given, UNKNOWN_ERROR if the store fails.
    """
    if not fields:
        logger.warning("Find called without any fields.")
        raise ContactError(ContactErrorCode.INVALID_ARGUMENT_ERROR, "At least one field is required")

    fields = expand_fields(fields)

    max_results = 1
    raw_filter = None
    if options is not None:
        if options.multiple:
            max_results = -1
        raw_filter = options.filter

    expression = build_filter(fields, raw_filter)

    try:
        records = ContactStore(db).find(expression, None, max_results)
    except Exception as e:
        logger.error(f"Error finding contacts: {e}", exc_info=True)
        raise ContactError(ContactErrorCode.UNKNOWN_ERROR, f"Failed to find contacts: {e}")

    logger.debug(f"Find on {fields} with filter '{raw_filter}' matched {len(records)} contacts.")
    return [read_from_backing(record, fields) for record in records if record is not None]


def _get_contact(contact_id: str, fields: Optional[List[str]], db: Session) -> Contact:
    """
    Read one contact by id.

    A contact that does not exist is reported as UNKNOWN_ERROR, not as a
    separate "not found" error; clients rely on that code.
    """
    try:
        record = ContactStore(db).find_by_uid(contact_id)
    except Exception as e:
        logger.error(f"Error reading contact {contact_id}: {e}", exc_info=True)
        raise ContactError(ContactErrorCode.UNKNOWN_ERROR, f"Failed to read contact: {e}")

    if record is None:
        logger.warning(f"Contact not found: {contact_id}")
        raise ContactError(ContactErrorCode.UNKNOWN_ERROR, "Contact not found")

    return read_from_backing(record, fields or [ALL_FIELDS])


def create_contact(properties: dict) -> Contact:
    """
    Build a contact from a dict of properties without saving it. Unknown keys are ignored.

    Raises:
        ContactError: INVALID_ARGUMENT_ERROR if a known property has an unusable value.
    """
    try:
        return Contact.model_validate(properties or {})
    except ValidationError as e:
        raise ContactError(ContactErrorCode.INVALID_ARGUMENT_ERROR, str(e))


def clone_contact(contact: Contact) -> Contact:
    return contact.clone()
