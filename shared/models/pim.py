"""
This module defines the SQLAlchemy ORM models for the bounded, slot-based contact store.

Unlike the open contact model, a stored contact has a fixed number of named
slots: three email slots, eight phone slots (two home, two work, one each of
mobile, fax, pager and other), one home and one work address, one web page,
one company and job title. Only categories are unbounded.

Each slot has a backing identifier (e.g. `homePhone`, `homeAddress.city`);
those identifiers are what field mappings and filter expressions refer to.

Classes:
    PimContactORM (Base): One stored contact and its scalar slots.
    PimAddressORM (Base): A home or work address slot of a contact.
    PimCategoryORM (Base): One category label of a contact, kept in order.

Attributes:
    Base: Declarative base for SQLAlchemy models.
    BACKING_ATTRIBUTES (dict): Scalar backing identifier -> ORM attribute name.
    ADDRESS_SLOTS (dict): Address backing identifier prefix -> address kind.
    ADDRESS_ATTRIBUTES (dict): Address component identifier -> ORM attribute name.
"""

import uuid
from typing import List, Optional

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


BACKING_ATTRIBUTES = {
    "uid":          "uid",
    "user1":        "user1",
    "title":        "title",
    "firstName":    "first_name",
    "lastName":     "last_name",
    "note":         "note",
    "birthday":     "birthday",
    "email1":       "email1",
    "email2":       "email2",
    "email3":       "email3",
    "homePhone":    "home_phone",
    "homePhone2":   "home_phone2",
    "workPhone":    "work_phone",
    "workPhone2":   "work_phone2",
    "mobilePhone":  "mobile_phone",
    "faxPhone":     "fax_phone",
    "pagerPhone":   "pager_phone",
    "otherPhone":   "other_phone",
    "webpage":      "webpage",
    "company":      "company",
    "jobTitle":     "job_title",
}

ADDRESS_SLOTS = {
    "homeAddress":  "home",
    "workAddress":  "work",
}

ADDRESS_ATTRIBUTES = {
    "address1":         "address1",
    "address2":         "address2",
    "city":             "city",
    "stateProvince":    "state_province",
    "zipPostal":        "zip_postal",
    "country":          "country",
}


class PimAddressORM(Base):
    __tablename__ = "pim_addresses"
    id = Column(Integer, primary_key=True, autoincrement=True)
    contact_id = Column(Integer, ForeignKey("pim_contacts.id", ondelete="CASCADE"), nullable=False)
    kind = Column(String, nullable=False)           # home or work
    address1 = Column(String, default="")
    address2 = Column(String, default="")
    city = Column(String, default="")
    state_province = Column(String, default="")
    zip_postal = Column(String, default="")
    country = Column(String, default="")


class PimCategoryORM(Base):
    __tablename__ = "pim_categories"
    id = Column(Integer, primary_key=True, autoincrement=True)
    contact_id = Column(Integer, ForeignKey("pim_contacts.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer)
    name = Column(String, nullable=False)


class PimContactORM(Base):
    __tablename__ = "pim_contacts"
    id = Column(Integer, primary_key=True, autoincrement=True)
    uid = Column(String, unique=True, nullable=False, index=True, default=lambda: str(uuid.uuid4()))
    user1 = Column(String, default="")              # display name
    title = Column(String, default="")
    first_name = Column(String, default="")
    last_name = Column(String, default="")
    note = Column(Text, default="")
    birthday = Column(Date, nullable=True)
    email1 = Column(String, default="")
    email2 = Column(String, default="")
    email3 = Column(String, default="")
    home_phone = Column(String, default="")
    home_phone2 = Column(String, default="")
    work_phone = Column(String, default="")
    work_phone2 = Column(String, default="")
    mobile_phone = Column(String, default="")
    fax_phone = Column(String, default="")
    pager_phone = Column(String, default="")
    other_phone = Column(String, default="")
    webpage = Column(String, default="")
    company = Column(String, default="")
    job_title = Column(String, default="")
    picture = Column(Text, nullable=True)           # base64 encoded image

    addresses = relationship(
        "PimAddressORM",
        cascade="all, delete-orphan",
        order_by="PimAddressORM.id",
    )
    category_rows = relationship(
        "PimCategoryORM",
        cascade="all, delete-orphan",
        order_by="PimCategoryORM.position",
        collection_class=ordering_list("position"),
    )
    categories = association_proxy(
        "category_rows", "name",
        creator=lambda name: PimCategoryORM(name=name),
    )

    def _address(self, kind: str) -> Optional[PimAddressORM]:
        for address in self.addresses:
            if address.kind == kind:
                return address
        return None

    def _set_address(self, kind: str, address: Optional[PimAddressORM]):
        for existing in [a for a in self.addresses if a.kind == kind]:
            self.addresses.remove(existing)
        if address is not None:
            address.kind = kind
            self.addresses.append(address)

    @property
    def home_address(self) -> Optional[PimAddressORM]:
        return self._address("home")

    @home_address.setter
    def home_address(self, address: Optional[PimAddressORM]):
        self._set_address("home", address)

    @property
    def work_address(self) -> Optional[PimAddressORM]:
        return self._address("work")

    @work_address.setter
    def work_address(self, address: Optional[PimAddressORM]):
        self._set_address("work", address)

    def backing_values(self, identifier: str) -> List[str]:
        """
        Return the string values held under a backing identifier.

        Scalar slots yield zero or one value, `homeAddress.*` / `workAddress.*`
        yield the component of that address if the slot is filled, and
        `categories` yields every label. Unknown identifiers yield nothing.
        """
        if identifier == "categories":
            return list(self.categories)

        slot, _, component = identifier.partition(".")
        if slot in ADDRESS_SLOTS:
            address = self._address(ADDRESS_SLOTS[slot])
            attribute = ADDRESS_ATTRIBUTES.get(component)
            if address is None or attribute is None:
                return []
            value = getattr(address, attribute)
            return [] if value is None else [str(value)]

        attribute = BACKING_ATTRIBUTES.get(identifier)
        if attribute is None:
            return []
        value = getattr(self, attribute)
        if value is None:
            return []
        return [value.isoformat() if hasattr(value, "isoformat") else str(value)]
