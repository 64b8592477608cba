"""
This module defines Pydantic models for the open contact data model.

The open model holds variable-length lists of phone numbers, emails, addresses,
organizations, photos and URLs. Every field is optional: `None` means "not
specified", which is different from an empty list ("specified as empty") when a
contact is saved over an existing record.

Field names are snake_case in Python and camelCase on the wire (`displayName`,
`phoneNumbers`, `givenName`, ...). Either spelling is accepted on input.

Classes:
    - ContactName: The structured name of a contact.
    - ContactField: A (type, value, pref) triple used for phones, emails, IMs, URLs and photos.
    - ContactAddress: A postal address.
    - ContactOrganization: An organization the contact belongs to.
    - Contact: A complete or partial contact record.
    - ContactFindOptions: Search options (filter string, single vs. multiple results).
    - ContactFindRequest: Fields to search and return, plus find options.
    - ContactErrorResponse: Error payload returned by the HTTP layer.
"""

from datetime import date, datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ContactName(BaseModel):
    """
    Represents a contact's name.

    Attributes:
        formatted (Optional[str]): The full name formatted for display.
        family_name (Optional[str]): Family or last name.
        given_name (Optional[str]): Given or first name.
        middle_name (Optional[str]): Middle name.
        honorific_prefix (Optional[str]): Honorific prefix or title, e.g. "Dr.".
        honorific_suffix (Optional[str]): Honorific suffix, e.g. "Jr.".
    """
    model_config = ConfigDict(populate_by_name=True)

    formatted: Optional[str]                = Field(None, description="The full name formatted for display.")
    family_name: Optional[str]              = Field(None, alias="familyName", description="Family or last name.")
    given_name: Optional[str]               = Field(None, alias="givenName", description="Given or first name.")
    middle_name: Optional[str]              = Field(None, alias="middleName", description="Middle name.")
    honorific_prefix: Optional[str]         = Field(None, alias="honorificPrefix", description="Honorific prefix or title.")
    honorific_suffix: Optional[str]         = Field(None, alias="honorificSuffix", description="Honorific suffix.")


class ContactField(BaseModel):
    """
    Generic contact field.

    Attributes:
        type (Optional[str]): The kind of value, e.g. 'home', 'mobile', 'base64'.
        value (Optional[str]): The value itself.
        pref (bool): Whether this entry is the preferred one.
    """
    type: Optional[str]                     = Field(None, description="The type of information, e.g. 'home', 'work', 'mobile'.")
    value: Optional[str]                    = Field(None, description="The value of this field.")
    pref: bool                              = Field(False, description="Whether this entry is preferred.")


class ContactAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pref: bool                              = Field(False, description="Whether this address is preferred.")
    type: Optional[str]                     = Field(None, description="The type of address, e.g. 'home', 'work'.")
    formatted: Optional[str]                = Field(None, description="The full address formatted for display.")
    street_address: Optional[str]           = Field(None, alias="streetAddress", description="Street address.")
    locality: Optional[str]                 = Field(None, description="Locality or city.")
    region: Optional[str]                   = Field(None, description="Region or state.")
    postal_code: Optional[str]              = Field(None, alias="postalCode", description="Postal or ZIP code.")
    country: Optional[str]                  = Field(None, description="Country name.")


class ContactOrganization(BaseModel):
    pref: bool                              = Field(False, description="Whether this organization is preferred.")
    type: Optional[str]                     = Field(None, description="The type of organization.")
    name: Optional[str]                     = Field(None, description="Name of the organization.")
    department: Optional[str]               = Field(None, description="Department.")
    title: Optional[str]                    = Field(None, description="Job title.")


class Contact(BaseModel):
    """
    Represents a contact in the open data model.

    A contact has no `id` until it is saved for the first time; the store assigns it.
    Contacts returned by a find carry only the requested fields (plus `id` and
    `display_name`), so saving such a contact back must not clear the fields it
    does not carry.

    Attributes:
        id (Optional[str]): Unique identifier assigned by the store.
        display_name (Optional[str]): Name to display.
        name (Optional[ContactName]): Structured name.
        nickname (Optional[str]): Casual name.
        phone_numbers (Optional[List[ContactField]]): Phone numbers.
        emails (Optional[List[ContactField]]): Email addresses.
        addresses (Optional[List[ContactAddress]]): Postal addresses.
        ims (Optional[List[ContactField]]): Instant messaging ids.
        organizations (Optional[List[ContactOrganization]]): Organizations.
        birthday (Optional[date | datetime | str]): Birthday, as a date or a parseable string.
        note (Optional[str]): Free-text note.
        photos (Optional[List[ContactField]]): Photos.
        categories (Optional[List[Any]]): Category labels. Non-string entries are ignored when saving.
        urls (Optional[List[ContactField]]): Web pages.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "displayName": "Bob",
                "name": {"givenName": "Bob", "familyName": "Smith", "honorificPrefix": "Mr."},
                "phoneNumbers": [
                    {"type": "home", "value": "555-0100"},
                    {"type": "mobile", "value": "555-0199"}
                ],
                "emails": [{"value": "bob@example.com"}],
                "addresses": [{"type": "home", "streetAddress": "1 Main St", "locality": "Springfield"}],
                "categories": ["friends"]
            }
        }
    )

    id: Optional[str]                                   = Field(None, description="Unique identifier assigned by the store.")
    display_name: Optional[str]                         = Field(None, alias="displayName", description="Name to display.")
    name: Optional[ContactName]                         = Field(None, description="Structured name.")
    nickname: Optional[str]                             = Field(None, description="Casual name.")
    phone_numbers: Optional[List[ContactField]]         = Field(None, alias="phoneNumbers", description="Phone numbers.")
    emails: Optional[List[ContactField]]                = Field(None, description="Email addresses.")
    addresses: Optional[List[ContactAddress]]           = Field(None, description="Postal addresses.")
    ims: Optional[List[ContactField]]                   = Field(None, description="Instant messaging user ids.")
    organizations: Optional[List[ContactOrganization]]  = Field(None, description="Organizations.")
    birthday: Optional[Union[datetime, date, str]]      = Field(None, description="Birthday as a date or a date string.")
    note: Optional[str]                                 = Field(None, description="Free-text note.")
    photos: Optional[List[ContactField]]                = Field(None, description="Photos.")
    categories: Optional[List[Any]]                     = Field(None, description="Category labels.")
    urls: Optional[List[ContactField]]                  = Field(None, description="Web pages.")

    def clone(self) -> "Contact":
        """Deep copy of this contact with the id cleared, so saving it creates a new record."""
        return self.model_copy(deep=True, update={"id": None})


class ContactFindOptions(BaseModel):
    filter: str                             = Field("", description="Search string matched case-insensitively as a substring.")
    multiple: bool                          = Field(False, description="Return every match instead of only the first.")


class ContactFindRequest(BaseModel):
    """
    Request body for a contact search.

    Attributes:
        fields (List[str]): Field paths to search and to return, or ["*"] for all fields.
        options (Optional[ContactFindOptions]): Filter string and cardinality.
    """
    fields: List[str]                       = Field(default_factory=list, description="Field paths to search and return, or ['*'].")
    options: Optional[ContactFindOptions]   = Field(None, description="Search options.")

    model_config = {
        "json_schema_extra": {
            "example": {
                "fields": ["name", "emails"],
                "options": {"filter": "bob", "multiple": True}
            }
        }
    }


class ContactErrorResponse(BaseModel):
    code: int                               = Field(..., description="Contact error code.")
    message: str                            = Field("", description="Human readable description.")
