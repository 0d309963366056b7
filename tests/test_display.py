"""Display formatting tests"""
from src.confirmation import ConfirmationDataFormatter


formatter = ConfirmationDataFormatter()


def test_hides_system_fields_by_default():
    data = {
        "__RequestVerificationToken": "abc",
        "handler": "Submit",
        "TaskId": "7",
        "firstName": "Alice",
    }

    assert formatter.format_display_data(data) == {"First Name": "Alice"}


def test_listed_fields_keep_their_order():
    data = {"postcode": "sw1a 1aa", "ukprn": " 10012345 ", "city": "London"}

    result = formatter.format_display_data(data, ["ukprn", "postcode"])

    assert list(result.items()) == [("UKPRN", "10012345"), ("Postcode", "SW1A 1AA")]


def test_missing_and_blank_fields_are_skipped():
    data = {"firstName": "  ", "lastName": "Smith"}

    assert formatter.format_display_data(data, ["firstName", "lastName", "nope"]) == {"Last Name": "Smith"}


def test_empty_form_data():
    assert formatter.format_display_data({}) == {}


def test_field_labels():
    assert formatter.get_field_display_name("companiesHouseNumber") == "Companies House Number"
    assert formatter.get_field_display_name("schoolTrustType") == "School Trust Type"
    assert formatter.get_field_display_name("name") == "Name"
    assert formatter.get_field_display_name("") == ""


def test_value_formatting():
    assert formatter.format_field_value("companiesHouseNumber", "sc123456") == "SC123456"
    assert formatter.format_field_value("emailAddress", "Jo@Example.COM") == "jo@example.com"
    assert formatter.format_field_value("notes", ["one", " ", "two"]) == "one, two"
    assert formatter.format_field_value("notes", None) == ""


def test_does_not_modify_input():
    data = {"postcode": "sw1a 1aa"}
    formatter.format_display_data(data)

    assert data == {"postcode": "sw1a 1aa"}
