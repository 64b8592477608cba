"""Helpers shared by the route modules."""

from fastapi import HTTPException, status

from pimbridge.errors import ContactError, ContactErrorCode
from shared.models.contacts import ContactErrorResponse


def http_error(error: ContactError) -> HTTPException:
    """
    Convert a ContactError into the HTTPException returned to the client.

    INVALID_ARGUMENT_ERROR is a 400; every other code, including a contact that
    was not found, is a 500. The detail carries the contact error code.
    """
    if error.code == ContactErrorCode.INVALID_ARGUMENT_ERROR:
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(
        status_code=status_code,
        detail=ContactErrorResponse(code=int(error.code), message=error.message).model_dump()
    )
