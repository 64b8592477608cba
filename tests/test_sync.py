"""
Slot Synchronizer Tests
=======================

Writing open contacts into bounded records and reading them back:
slot capacity, the fill order of each group, the rule that absent groups are
left untouched on update, and the legacy formatting of names and addresses.
"""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from pimbridge.sync import (
    PhoneType,
    WriteResult,
    phone_type,
    read_from_backing,
    save_contact,
    write_to_backing,
)
from shared.models.contacts import (
    Contact,
    ContactAddress,
    ContactField,
    ContactName,
    ContactOrganization,
)
from shared.models.pim import PimAddressORM, PimContactORM


def phones(*entries):
    return [ContactField(type=kind, value=value) for kind, value in entries]


def stored_record():
    record = PimContactORM(
        uid="uid-1",
        user1="Bob",
        title="Mr.",
        first_name="Bob",
        last_name="Smith",
        note="old note",
        email1="a@example.com",
        email2="b@example.com",
        email3="",
        home_phone="111",
        home_phone2="",
        work_phone="222",
        work_phone2="",
        mobile_phone="333",
        fax_phone="",
        pager_phone="",
        other_phone="444",
        webpage="http://old.example.com",
        company="Old Co",
        job_title="Clerk",
    )
    record.home_address = PimAddressORM(address1="1 Old St", city="Oldtown")
    record.categories = ["old"]
    return record


class TestPhoneType:

    @pytest.mark.parametrize("tag, expected", [
        ("home", PhoneType.HOME),
        ("work", PhoneType.WORK),
        ("mobile", PhoneType.MOBILE),
        ("fax", PhoneType.FAX),
        ("pager", PhoneType.PAGER),
        ("other", PhoneType.OTHER),
        ("car", PhoneType.OTHER),
        (None, PhoneType.OTHER),
        ("HOME", PhoneType.OTHER),
    ])
    def test_tags(self, tag, expected):
        assert phone_type(tag) == expected


class TestWriteName:

    def test_name_parts_copied(self):
        contact = Contact(name=ContactName(given_name="Jane", family_name="Doe", honorific_prefix="Dr."))
        record = write_to_backing(None, contact)
        assert (record.title, record.first_name, record.last_name) == ("Dr.", "Jane", "Doe")

    def test_empty_name_parts_do_not_clear(self):
        record = stored_record()
        write_to_backing(record, Contact(name=ContactName(given_name="Robert", middle_name="Q")))
        assert record.first_name == "Robert"
        assert record.last_name == "Smith"
        assert record.title == "Mr."

    def test_display_name_and_note(self):
        record = stored_record()
        write_to_backing(record, Contact(display_name="Bobby", note=""))
        assert record.user1 == "Bobby"
        assert record.note == ""


class TestWriteBirthday:

    def test_date(self):
        record = write_to_backing(None, Contact(birthday=date(1980, 5, 17)))
        assert record.birthday == date(1980, 5, 17)

    def test_datetime(self):
        record = write_to_backing(None, Contact(birthday=datetime(1980, 5, 17, 13, 45)))
        assert record.birthday == date(1980, 5, 17)

    @pytest.mark.parametrize("text", ["1980-05-17", "May 17, 1980", "17 May 1980"])
    def test_string(self, text):
        record = write_to_backing(None, Contact(birthday=text))
        assert record.birthday == date(1980, 5, 17)

    def test_empty_string_clears(self):
        record = PimContactORM(birthday=date(1980, 5, 17))
        write_to_backing(record, Contact(birthday=""))
        assert record.birthday is None

    def test_unparseable_string_leaves_slot_empty(self):
        record = write_to_backing(None, Contact(birthday="not a date"))
        assert record.birthday is None


class TestWriteEmails:

    def test_first_three_kept_in_order(self):
        emails = [ContactField(value=f"{n}@example.com") for n in range(5)]
        record = write_to_backing(None, Contact(emails=emails))
        assert [record.email1, record.email2, record.email3] == [
            "0@example.com", "1@example.com", "2@example.com"
        ]

    def test_entries_without_value_skipped(self):
        emails = [ContactField(value=None), ContactField(value=""), ContactField(value="x@example.com")]
        record = write_to_backing(None, Contact(emails=emails))
        assert record.email1 == "x@example.com"
        assert not record.email2

    def test_update_replaces_all_slots(self):
        record = stored_record()
        write_to_backing(record, Contact(emails=[ContactField(value="new@example.com")]))
        assert [record.email1, record.email2, record.email3] == ["new@example.com", "", ""]


class TestWritePhones:

    def test_three_home_numbers_keep_two(self):
        record = write_to_backing(None, Contact(phone_numbers=phones(("home", "1"), ("home", "2"), ("home", "3"))))
        assert record.home_phone == "1"
        assert record.home_phone2 == "2"
        assert not record.other_phone

    def test_dispatch_by_type(self):
        record = write_to_backing(None, Contact(phone_numbers=phones(
            ("work", "w1"), ("mobile", "m"), ("fax", "f"), ("pager", "p"),
            ("work", "w2"), (None, "o"),
        )))
        assert (record.work_phone, record.work_phone2) == ("w1", "w2")
        assert (record.mobile_phone, record.fax_phone, record.pager_phone) == ("m", "f", "p")
        assert record.other_phone == "o"

    def test_single_slot_overflow_spills_to_other(self):
        record = write_to_backing(None, Contact(phone_numbers=phones(("mobile", "m1"), ("mobile", "m2"))))
        assert record.mobile_phone == "m1"
        assert record.other_phone == "m2"

    def test_other_slot_taken_first_wins(self):
        record = write_to_backing(None, Contact(phone_numbers=phones(
            ("mobile", "m1"), ("fax", "f1"), ("fax", "f2"), ("pager", "p1"), ("mobile", "m2"), ("car", "c1"),
        )))
        assert (record.mobile_phone, record.fax_phone, record.pager_phone) == ("m1", "f1", "p1")
        assert record.other_phone == "f2"

    def test_home_and_work_overflow_dropped(self):
        record = write_to_backing(None, Contact(phone_numbers=phones(
            ("work", "w1"), ("work", "w2"), ("work", "w3"),
        )))
        assert (record.work_phone, record.work_phone2) == ("w1", "w2")
        assert not record.other_phone

    def test_absent_phones_leave_slots(self):
        record = stored_record()
        write_to_backing(record, Contact(note="changed"))
        assert (record.home_phone, record.work_phone, record.mobile_phone, record.other_phone) == (
            "111", "222", "333", "444"
        )

    def test_empty_phones_clear_slots(self):
        record = stored_record()
        write_to_backing(record, Contact(phone_numbers=[]))
        for slot in ("home_phone", "home_phone2", "work_phone", "work_phone2",
                     "mobile_phone", "fax_phone", "pager_phone", "other_phone"):
            assert getattr(record, slot) == ""


class TestWriteAddresses:

    def test_work_home_work(self):
        addresses = [
            ContactAddress(type="work", street_address="1 Work St"),
            ContactAddress(type="home", street_address="2 Home St"),
            ContactAddress(type="work", street_address="3 Other Work St"),
        ]
        record = write_to_backing(None, Contact(addresses=addresses))
        assert record.home_address.address1 == "2 Home St"
        assert record.work_address.address1 == "1 Work St"
        assert len(record.addresses) == 2

    def test_untyped_fills_home_then_work(self):
        addresses = [ContactAddress(locality="A"), ContactAddress(locality="B"), ContactAddress(locality="C")]
        record = write_to_backing(None, Contact(addresses=addresses))
        assert record.home_address.city == "A"
        assert record.work_address.city == "B"

    def test_other_types_dropped(self):
        record = write_to_backing(None, Contact(addresses=[ContactAddress(type="vacation", locality="X")]))
        assert record.home_address is None
        assert record.work_address is None

    def test_components_mapped(self):
        address = ContactAddress(type="home", street_address="1 Main St", locality="Springfield",
                                 region="IL", postal_code="62701", country="USA")
        record = write_to_backing(None, Contact(addresses=[address]))
        home = record.home_address
        assert (home.address1, home.city, home.state_province, home.zip_postal, home.country) == (
            "1 Main St", "Springfield", "IL", "62701", "USA"
        )

    def test_missing_components_are_empty_strings(self):
        record = write_to_backing(None, Contact(addresses=[ContactAddress(type="home")]))
        home = record.home_address
        assert (home.address1, home.city, home.state_province, home.zip_postal, home.country) == (
            "", "", "", "", ""
        )

    def test_update_clears_both_slots(self):
        record = stored_record()
        write_to_backing(record, Contact(addresses=[ContactAddress(type="work", locality="Worktown")]))
        assert record.home_address is None
        assert record.work_address.city == "Worktown"


class TestWriteSingleSlots:

    def test_first_url_with_value(self):
        urls = [ContactField(value=""), ContactField(value="http://a.example.com"), ContactField(value="http://b.example.com")]
        record = write_to_backing(None, Contact(urls=urls))
        assert record.webpage == "http://a.example.com"

    def test_empty_urls_clear_webpage(self):
        record = stored_record()
        write_to_backing(record, Contact(urls=[]))
        assert record.webpage == ""

    def test_first_organization(self):
        organizations = [ContactOrganization(name="ACME"), ContactOrganization(name="Other", title="Boss")]
        record = write_to_backing(None, Contact(organizations=organizations))
        assert record.company == "ACME"
        assert record.job_title == ""

    def test_empty_organizations_clear(self):
        record = stored_record()
        write_to_backing(record, Contact(organizations=[]))
        assert (record.company, record.job_title) == ("", "")


class TestWriteCategories:

    def test_strings_only(self):
        record = write_to_backing(None, Contact(categories=["friends", 3, None, "work"]))
        assert list(record.categories) == ["friends", "work"]

    def test_replaced_wholesale(self):
        record = stored_record()
        write_to_backing(record, Contact(categories=["new"]))
        assert list(record.categories) == ["new"]

    @pytest.mark.parametrize("categories", [None, []])
    def test_absent_or_empty_left_alone(self, categories):
        record = stored_record()
        write_to_backing(record, Contact(categories=categories))
        assert list(record.categories) == ["old"]


class TestRead:

    def test_missing_record(self):
        assert read_from_backing(None, ["*"]) is None

    def test_id_and_display_name_always(self):
        contact = read_from_backing(stored_record(), [])
        assert contact.id == "uid-1"
        assert contact.display_name == "Bob"
        assert contact.name is None
        assert contact.phone_numbers is None

    def test_formatted_name(self):
        record = PimContactORM(title="Dr.", first_name="Jane", last_name="Doe")
        name = read_from_backing(record, ["name"]).name
        assert name.formatted == "Dr. Jane Doe"
        assert (name.given_name, name.family_name, name.honorific_prefix) == ("Jane", "Doe", "Dr.")
        assert name.middle_name is None
        assert name.honorific_suffix is None

    def test_formatted_name_keeps_spaces_for_missing_parts(self):
        record = PimContactORM(title="", first_name="Jane", last_name="Doe")
        assert read_from_backing(record, ["name.givenName"]).name.formatted == " Jane Doe"

    def test_phone_read_order_and_tags(self):
        record = stored_record()
        record.fax_phone = "555"
        numbers = read_from_backing(record, ["phoneNumbers.value"]).phone_numbers
        assert [(p.type, p.value) for p in numbers] == [
            ("home", "111"), ("work", "222"), ("mobile", "333"), ("fax", "555"), ("other", "444")
        ]

    def test_no_phones_is_none(self):
        assert read_from_backing(PimContactORM(), ["phoneNumbers"]).phone_numbers is None

    def test_emails_have_no_type(self):
        emails = read_from_backing(stored_record(), ["emails"]).emails
        assert [(e.type, e.value) for e in emails] == [(None, "a@example.com"), (None, "b@example.com")]

    def test_address_formatting(self):
        record = PimContactORM()
        record.work_address = PimAddressORM(address1="1 Main St", address2="", city="Springfield",
                                            state_province="", zip_postal="62701", country="USA")
        addresses = read_from_backing(record, ["addresses.locality"]).addresses
        assert len(addresses) == 1
        address = addresses[0]
        assert address.type == "work"
        assert address.street_address == "1 Main St, "
        assert address.formatted == "1 Main St, , Springfield, , 62701, USA"
        assert address.region is None

    def test_home_before_work(self):
        record = PimContactORM()
        record.work_address = PimAddressORM(city="W")
        record.home_address = PimAddressORM(city="H")
        assert [a.type for a in read_from_backing(record, ["addresses"]).addresses] == ["home", "work"]

    def test_single_valued_groups(self):
        record = stored_record()
        record.birthday = date(1980, 5, 17)
        record.picture = "aGVsbG8="
        contact = read_from_backing(record, ["birthday", "note", "organizations", "categories", "urls", "photos"])
        assert contact.birthday == date(1980, 5, 17)
        assert contact.note == "old note"
        assert contact.organizations == [ContactOrganization(name="Old Co", title="Clerk")]
        assert contact.categories == ["old"]
        assert contact.urls == [ContactField(value="http://old.example.com")]
        assert contact.photos == [ContactField(type="base64", value="aGVsbG8=")]

    def test_empty_groups_are_none(self):
        contact = read_from_backing(PimContactORM(), ["organizations", "categories", "urls", "photos", "addresses"])
        assert contact.organizations is None
        assert contact.categories is None
        assert contact.urls is None
        assert contact.photos is None
        assert contact.addresses is None

    def test_unrequested_groups_absent(self):
        contact = read_from_backing(stored_record(), ["note"])
        assert contact.note == "old note"
        assert contact.emails is None
        assert contact.name is None


class TestSaveContact:

    def full_contact(self):
        return Contact(
            display_name="Jane",
            name=ContactName(given_name="Jane", family_name="Doe", middle_name="Q",
                             honorific_prefix="Dr.", honorific_suffix="PhD"),
            nickname="JD",
            phone_numbers=phones(("home", "1"), ("home", "2"), ("home", "3"), ("work", "4"),
                                 ("mobile", "5"), ("fax", "6"), ("pager", "7"), (None, "8")),
            emails=[ContactField(value=f"{n}@example.com") for n in range(4)],
            addresses=[
                ContactAddress(type="home", street_address="1 Main St", locality="Springfield",
                               region="IL", postal_code="62701", country="USA"),
                ContactAddress(type="work", street_address="2 Work Rd", locality="Shelbyville",
                               region="IL", postal_code="62565", country="USA"),
            ],
            ims=[ContactField(type="aim", value="jane")],
            organizations=[ContactOrganization(name="ACME", title="Engineer", department="R&D")],
            birthday="1980-05-17",
            note="A note",
            categories=["friends", "work"],
            urls=[ContactField(value="http://jane.example.com")],
        )

    def test_round_trip(self, store):
        result = save_contact(store, self.full_contact())
        assert isinstance(result, WriteResult)
        contact = result.contact

        assert contact.id == result.record.uid
        assert contact.display_name == "Jane"
        assert contact.name == ContactName(formatted="Dr. Jane Doe", given_name="Jane",
                                           family_name="Doe", honorific_prefix="Dr.")
        assert contact.nickname is None
        assert contact.ims is None
        assert [(p.type, p.value) for p in contact.phone_numbers] == [
            ("home", "1"), ("home", "2"), ("work", "4"), ("mobile", "5"),
            ("fax", "6"), ("pager", "7"), ("other", "8"),
        ]
        assert [e.value for e in contact.emails] == ["0@example.com", "1@example.com", "2@example.com"]
        home, work = contact.addresses
        assert (home.type, home.street_address, home.locality, home.region, home.postal_code, home.country) == (
            "home", "1 Main St, ", "Springfield", "IL", "62701", "USA"
        )
        assert work.formatted == "2 Work Rd, , Shelbyville, IL, 62565, USA"
        assert contact.organizations == [ContactOrganization(name="ACME", title="Engineer")]
        assert contact.birthday == date(1980, 5, 17)
        assert contact.note == "A note"
        assert contact.categories == ["friends", "work"]
        assert contact.urls == [ContactField(value="http://jane.example.com")]
        assert contact.photos is None

    def test_create_assigns_identity(self, store):
        result = save_contact(store, Contact(display_name="New"))
        assert result.record.uid
        assert store.find_by_uid(result.record.uid) is result.record

    def test_unknown_id_creates(self, store):
        result = save_contact(store, Contact(id="does-not-exist", display_name="New"))
        assert result.record.uid != "does-not-exist"

    def test_partial_update_returns_full_contact(self, store):
        created = save_contact(store, self.full_contact()).contact

        partial = Contact(id=created.id, note="Updated")
        updated = save_contact(store, partial).contact

        assert updated.note == "Updated"
        assert updated.phone_numbers == created.phone_numbers
        assert updated.emails == created.emails
        assert updated.addresses == created.addresses
        assert updated.categories == ["friends", "work"]

    def test_empty_phone_list_clears_stored_phones(self, store):
        created = save_contact(store, self.full_contact()).contact
        updated = save_contact(store, Contact(id=created.id, phone_numbers=[])).contact
        assert updated.phone_numbers is None
        assert updated.emails == created.emails

    def test_resave_of_partial_read(self, store):
        created = save_contact(store, self.full_contact()).contact
        partial = read_from_backing(store.find_by_uid(created.id), ["emails"])
        partial.emails.append(ContactField(value="extra@example.com"))
        updated = save_contact(store, partial).contact
        assert updated.name == created.name
        assert updated.phone_numbers == created.phone_numbers

    def test_first_photo_handed_to_photo_store(self, store):
        photo_store = MagicMock()
        photo_store.set_picture.return_value = True
        contact = Contact(photos=[ContactField(value=""), ContactField(type="url", value="http://p/1.png"),
                                  ContactField(type="url", value="http://p/2.png")])
        result = save_contact(store, contact, photo_store=photo_store)
        photo_store.set_picture.assert_called_once_with(result.record.uid, "url", "http://p/1.png")

    def test_photo_failure_does_not_fail_save(self, store):
        photo_store = MagicMock()
        photo_store.set_picture.side_effect = RuntimeError("boom")
        result = save_contact(store, Contact(display_name="Pic", photos=[ContactField(value="x")]),
                              photo_store=photo_store)
        assert result.contact.display_name == "Pic"
