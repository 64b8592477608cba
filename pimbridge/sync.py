"""
Converts contacts between the open model and the bounded, slot-based store record.

Writing (`write_to_backing`) copies every field group that is present on the
incoming contact into the record's slots. Field groups left as None are not
touched, because the caller usually holds a contact produced by a find that
only returned some fields; saving it back must not wipe the rest. An empty
list is different from None: it clears the slots of that group.

The record has fewer slots than a contact can have values. Extra values are
dropped according to a fixed policy:

    - emails: the first three with a value
    - phones: by type, two home, two work, one each of mobile/fax/pager/other;
      a mobile, fax or pager number whose slot is taken goes to the other slot
    - addresses: the first home (or untyped) and the first work (or untyped)
    - urls, organizations, photos: the first one

Middle name, honorific suffix, nickname and IMs have no slot and are dropped.

Reading (`read_from_backing`) builds a contact that carries only the requested
field groups, always with `id` and `display_name`.

`save_contact` ties both together: apply, persist, store the photo, and read
everything back so the caller always receives a complete contact.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Optional

from dateutil import parser as date_parser

from pimbridge.mapping import ALL_FIELDS, expand_fields
from shared.models.contacts import (
    Contact,
    ContactAddress,
    ContactField,
    ContactName,
    ContactOrganization,
)
from shared.models.pim import PimAddressORM, PimContactORM

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")


class PhoneType(str, Enum):
    HOME = "home"
    WORK = "work"
    MOBILE = "mobile"
    FAX = "fax"
    PAGER = "pager"
    OTHER = "other"


# Slots each phone type may fill, in fill order. Mobile, fax and pager
# numbers spill into the other slot; home and work numbers never do.
PHONE_SLOTS = MappingProxyType({
    PhoneType.HOME:     ("home_phone", "home_phone2"),
    PhoneType.WORK:     ("work_phone", "work_phone2"),
    PhoneType.MOBILE:   ("mobile_phone", "other_phone"),
    PhoneType.FAX:      ("fax_phone", "other_phone"),
    PhoneType.PAGER:    ("pager_phone", "other_phone"),
    PhoneType.OTHER:    ("other_phone",),
})

# Slot order and type labels used when reading phones back.
READ_PHONE_SLOTS = (
    ("home_phone",      PhoneType.HOME),
    ("home_phone2",     PhoneType.HOME),
    ("work_phone",      PhoneType.WORK),
    ("work_phone2",     PhoneType.WORK),
    ("mobile_phone",    PhoneType.MOBILE),
    ("fax_phone",       PhoneType.FAX),
    ("pager_phone",     PhoneType.PAGER),
    ("other_phone",     PhoneType.OTHER),
)

EMAIL_SLOTS = ("email1", "email2", "email3")


def phone_type(tag: Optional[str]) -> PhoneType:
    """Map a phone type tag to its slot type; unknown or missing tags are OTHER."""
    try:
        return PhoneType(tag)
    except ValueError:
        return PhoneType.OTHER


@dataclass
class WriteResult:
    """
    Outcome of a save.

    Attributes:
        record (PimContactORM): The persisted record, with its identity assigned.
        contact (Contact): The complete contact read back from that record with all fields.
    """
    record: PimContactORM
    contact: Contact


def _first_empty(record: PimContactORM, slots: Iterable[str]) -> Optional[str]:
    for slot in slots:
        if not getattr(record, slot):
            return slot
    return None


def _clear(record: PimContactORM, slots: Iterable[str]):
    for slot in slots:
        setattr(record, slot, "")


def _to_date(birthday) -> Optional[date]:
    if isinstance(birthday, datetime):
        return birthday.date()
    if isinstance(birthday, date):
        return birthday

    text = str(birthday)
    if len(text) == 0:
        return None
    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        logger.warning(f"Could not parse birthday '{text}', leaving it empty: {e}")
        return None


def _backing_address(address: ContactAddress) -> PimAddressORM:
    return PimAddressORM(
        address1=address.street_address or "",
        city=address.locality or "",
        state_province=address.region or "",
        zip_postal=address.postal_code or "",
        country=address.country or "",
    )


def _write_name(record: PimContactORM, name: ContactName):
    if name.given_name:
        record.first_name = name.given_name
    if name.family_name:
        record.last_name = name.family_name
    if name.honorific_prefix:
        record.title = name.honorific_prefix


def _write_emails(record: PimContactORM, emails: List[ContactField], update: bool):
    if update:
        _clear(record, EMAIL_SLOTS)

    for email in emails:
        if email is None or not email.value:
            continue
        slot = _first_empty(record, EMAIL_SLOTS)
        if slot is None:
            logger.debug(f"No email slot left, dropping '{email.value}'.")
            continue
        setattr(record, slot, email.value)


def _write_phones(record: PimContactORM, phones: List[ContactField], update: bool):
    if update:
        _clear(record, [slot for slot, _ in READ_PHONE_SLOTS])

    for phone in phones:
        if phone is None or not phone.value:
            continue
        kind = phone_type(phone.type)
        slot = _first_empty(record, PHONE_SLOTS[kind])
        if slot is None:
            logger.debug(f"No {kind.value} phone slot left, dropping '{phone.value}'.")
            continue
        setattr(record, slot, phone.value)


def _write_addresses(record: PimContactORM, addresses: List[ContactAddress], update: bool):
    if update:
        record.home_address = None
        record.work_address = None

    home = None
    work = None
    for address in addresses:
        if address is None:
            continue
        if home is None and (not address.type or address.type == "home"):
            home = address
            record.home_address = _backing_address(address)
        elif work is None and (not address.type or address.type == "work"):
            work = address
            record.work_address = _backing_address(address)
        else:
            logger.debug(f"No address slot left for type '{address.type}', dropping it.")


def _write_urls(record: PimContactORM, urls: List[ContactField], update: bool):
    if update:
        record.webpage = ""

    for url in urls:
        if url is None or not url.value:
            continue
        record.webpage = url.value
        break


def _write_organizations(record: PimContactORM, organizations: List[ContactOrganization], update: bool):
    if update:
        record.company = ""
        record.job_title = ""

    for organization in organizations:
        if organization is None:
            continue
        record.company = organization.name or ""
        record.job_title = organization.title or ""
        break


def write_to_backing(existing: Optional[PimContactORM], contact: Contact) -> PimContactORM:
    """
    Copy the present field groups of a contact into a store record.

    Args:
        existing (Optional[PimContactORM]): The stored record to update, or None to create one.
        contact (Contact): The contact to write. Field groups that are None are left alone.

    Returns:
        PimContactORM: The updated (or new, not yet persisted) record.
    """
    update = existing is not None
    record = existing if update else PimContactORM()

    if contact.name is not None:
        _write_name(record, contact.name)

    if contact.display_name is not None:
        record.user1 = contact.display_name

    if contact.note is not None:
        record.note = contact.note

    if contact.birthday is not None:
        record.birthday = _to_date(contact.birthday)

    if contact.emails is not None:
        _write_emails(record, contact.emails, update)

    if contact.phone_numbers is not None:
        _write_phones(record, contact.phone_numbers, update)

    if contact.addresses is not None:
        _write_addresses(record, contact.addresses, update)

    if contact.urls is not None:
        _write_urls(record, contact.urls, update)

    if contact.organizations is not None:
        _write_organizations(record, contact.organizations, update)

    # categories are replaced wholesale, but only when some are given
    if contact.categories:
        record.categories = [c for c in contact.categories if isinstance(c, str)]

    return record


def _contact_address(kind: str, address: Optional[PimAddressORM]) -> Optional[ContactAddress]:
    if address is None:
        return None

    address1 = address.address1 or ""
    address2 = address.address2 or ""
    street_address = f"{address1}, {address2}"
    locality = address.city or ""
    region = address.state_province or ""
    postal_code = address.zip_postal or ""
    country = address.country or ""
    formatted = f"{street_address}, {locality}, {region}, {postal_code}, {country}"

    return ContactAddress(
        type=kind,
        formatted=formatted,
        street_address=street_address,
        locality=locality or None,
        region=region or None,
        postal_code=postal_code or None,
        country=country or None,
    )


def read_from_backing(record: Optional[PimContactORM], fields: Optional[Iterable[str]]) -> Optional[Contact]:
    """
    Build a contact from a store record, copying only the requested field groups.

    `id` and `display_name` are always copied. A field path selects the group
    it starts with, so "addresses.locality" returns whole addresses.

    Args:
        record (Optional[PimContactORM]): The stored record.
        fields (Optional[Iterable[str]]): Field paths to copy, or ["*"] for all.

    Returns:
        Optional[Contact]: The contact, or None if there is no record.
    """
    if record is None:
        return None

    contact = Contact(id=record.uid or None, display_name=record.user1 or None)

    for field in expand_fields(fields):
        if not field:
            continue

        if field.startswith("name"):
            title = record.title or ""
            first_name = record.first_name or ""
            last_name = record.last_name or ""
            contact.name = ContactName(
                formatted=f"{title} {first_name} {last_name}",
                family_name=last_name or None,
                given_name=first_name or None,
                honorific_prefix=title or None,
            )

        elif field.startswith("phoneNumbers"):
            phone_numbers = [
                ContactField(type=kind.value, value=getattr(record, slot))
                for slot, kind in READ_PHONE_SLOTS
                if getattr(record, slot)
            ]
            contact.phone_numbers = phone_numbers or None

        elif field.startswith("emails"):
            emails = [
                ContactField(type=None, value=getattr(record, slot))
                for slot in EMAIL_SLOTS
                if getattr(record, slot)
            ]
            contact.emails = emails or None

        elif field.startswith("addresses"):
            addresses = [
                address for address in (
                    _contact_address("home", record.home_address),
                    _contact_address("work", record.work_address),
                )
                if address is not None
            ]
            contact.addresses = addresses or None

        elif field.startswith("birthday"):
            if record.birthday:
                contact.birthday = record.birthday

        elif field.startswith("note"):
            if record.note:
                contact.note = record.note

        elif field.startswith("organizations"):
            organizations = []
            if record.company or record.job_title:
                organizations.append(ContactOrganization(
                    name=record.company or None,
                    title=record.job_title or None,
                ))
            contact.organizations = organizations or None

        elif field.startswith("categories"):
            categories = list(record.categories)
            contact.categories = categories or None

        elif field.startswith("urls"):
            urls = []
            if record.webpage:
                urls.append(ContactField(value=record.webpage))
            contact.urls = urls or None

        elif field.startswith("photos"):
            photos = []
            if record.picture:
                photos.append(ContactField(type="base64", value=record.picture))
            contact.photos = photos or None

    return contact


def _save_photo(photo_store, uid: str, photos: Optional[List[ContactField]]):
    if photo_store is None or not photos:
        return

    for photo in photos:
        if photo is None or not photo.value:
            continue
        try:
            if not photo_store.set_picture(uid, photo.type, photo.value):
                logger.warning(f"Contact.setPicture failed for {uid}.")
        except Exception as e:
            logger.error(f"Contact.setPicture failed for {uid}: {e}", exc_info=True)
        break


def save_contact(store, contact: Contact, photo_store=None) -> WriteResult:
    """
    Save a contact: update the stored record with its id, or create a new one.

    The first photo with a value is handed to `photo_store`; a failing photo is
    logged and does not fail the save. The returned contact is read back from
    the persisted record with every mapped field, whatever subset the caller
    supplied. Photos are not mapped, so the picture is not part of it.

    Args:
        store: Backing store with `find_by_uid(uid)` and `persist(record)`.
        contact (Contact): The contact to save.
        photo_store: Optional collaborator with `set_picture(uid, type, value)`.

    Returns:
        WriteResult: The persisted record and the complete contact.
    """
    existing = store.find_by_uid(contact.id) if contact.id else None
    if contact.id and existing is None:
        logger.info(f"Contact {contact.id} not in store, creating a new record.")

    record = write_to_backing(existing, contact)
    record = store.persist(record)

    _save_photo(photo_store, record.uid, contact.photos)

    return WriteResult(record=record, contact=read_from_backing(record, [ALL_FIELDS]))
