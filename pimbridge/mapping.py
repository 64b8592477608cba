"""
Field mappings between open contact field paths and backing store identifiers.

A contact search names fields of the open model (`name`, `addresses.locality`,
...). The store does not have those fields; it has slots such as `title`,
`firstName` or `homeAddress.city`. Each recognized path maps to one or more
backing identifiers, in a fixed order.

Example: a search on `name` becomes a search on the `title`, `firstName` and
`lastName` slots.

Unrecognized paths map to nothing. Callers skip them silently.
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Optional, Tuple

ALL_FIELDS = "*"


class FieldPath(str, Enum):
    ID = "id"
    DISPLAY_NAME = "displayName"
    NAME = "name"
    NAME_FORMATTED = "name.formatted"
    NAME_GIVEN_NAME = "name.givenName"
    NAME_FAMILY_NAME = "name.familyName"
    NAME_HONORIFIC_PREFIX = "name.honorificPrefix"
    PHONE_NUMBERS = "phoneNumbers"
    PHONE_NUMBERS_VALUE = "phoneNumbers.value"
    EMAILS = "emails"
    ADDRESSES = "addresses"
    ADDRESSES_FORMATTED = "addresses.formatted"
    ADDRESSES_STREET_ADDRESS = "addresses.streetAddress"
    ADDRESSES_LOCALITY = "addresses.locality"
    ADDRESSES_REGION = "addresses.region"
    ADDRESSES_COUNTRY = "addresses.country"
    ORGANIZATIONS = "organizations"
    ORGANIZATIONS_NAME = "organizations.name"
    ORGANIZATIONS_TITLE = "organizations.title"
    BIRTHDAY = "birthday"
    NOTE = "note"
    CATEGORIES = "categories"
    URLS = "urls"
    URLS_VALUE = "urls.value"


_NAME = ("title", "firstName", "lastName")

_PHONES = ("faxPhone", "homePhone", "homePhone2", "mobilePhone",
           "pagerPhone", "otherPhone", "workPhone", "workPhone2")

_ADDRESS = ("homeAddress.address1", "homeAddress.address2",
            "homeAddress.city", "homeAddress.stateProvince",
            "homeAddress.zipPostal", "homeAddress.country",
            "workAddress.address1", "workAddress.address2",
            "workAddress.city", "workAddress.stateProvince",
            "workAddress.zipPostal", "workAddress.country")

FIELD_MAPPINGS = MappingProxyType({
    FieldPath.ID:                       ("uid",),
    FieldPath.DISPLAY_NAME:             ("user1",),
    FieldPath.NAME:                     _NAME,
    FieldPath.NAME_FORMATTED:           _NAME,
    FieldPath.NAME_GIVEN_NAME:          ("firstName",),
    FieldPath.NAME_FAMILY_NAME:         ("lastName",),
    FieldPath.NAME_HONORIFIC_PREFIX:    ("title",),
    FieldPath.PHONE_NUMBERS:            _PHONES,
    FieldPath.PHONE_NUMBERS_VALUE:      _PHONES,
    FieldPath.EMAILS:                   ("email1", "email2", "email3"),
    FieldPath.ADDRESSES:                _ADDRESS,
    FieldPath.ADDRESSES_FORMATTED:      _ADDRESS,
    FieldPath.ADDRESSES_STREET_ADDRESS: ("homeAddress.address1", "homeAddress.address2",
                                         "workAddress.address1", "workAddress.address2"),
    FieldPath.ADDRESSES_LOCALITY:       ("homeAddress.city", "workAddress.city"),
    FieldPath.ADDRESSES_REGION:         ("homeAddress.stateProvince", "workAddress.stateProvince"),
    FieldPath.ADDRESSES_COUNTRY:        ("homeAddress.country", "workAddress.country"),
    FieldPath.ORGANIZATIONS:            ("company", "jobTitle"),
    FieldPath.ORGANIZATIONS_NAME:       ("company",),
    FieldPath.ORGANIZATIONS_TITLE:      ("jobTitle",),
    FieldPath.BIRTHDAY:                 ("birthday",),
    FieldPath.NOTE:                     ("note",),
    FieldPath.CATEGORIES:               ("categories",),
    FieldPath.URLS:                     ("webpage",),
    FieldPath.URLS_VALUE:               ("webpage",),
})


def lookup(path: Optional[str]) -> Tuple[str, ...]:
    """
    Return the backing identifiers for a field path, in table order.

    Args:
        path (Optional[str]): An open-model field path such as "name.givenName".

    Returns:
        Tuple[str, ...]: The backing identifiers, or an empty tuple if the path is not mapped.
    """
    if not path:
        return ()
    try:
        return FIELD_MAPPINGS[FieldPath(path)]
    except ValueError:
        return ()


def all_fields() -> List[str]:
    """Every mapped field path, in table order. Used to expand ["*"]."""
    return [path.value for path in FIELD_MAPPINGS]


def expand_fields(fields: Optional[Iterable[str]]) -> List[str]:
    """
    Expand the ["*"] wildcard to every mapped field path.

    Any other field list is returned unchanged (as a list); None becomes [].
    """
    if fields is None:
        return []
    fields = list(fields)
    if len(fields) == 1 and fields[0] == ALL_FIELDS:
        return all_fields()
    return fields
