"""Formatting of stored form data for the confirmation page"""

from typing import Dict, List, Mapping, Optional, Sequence
import logging
import re

from .models import FormValue

logger = logging.getLogger(__name__)

SYSTEM_FIELDS = frozenset(
    name.lower()
    for name in (
        "__RequestVerificationToken",
        "handler",
        "CurrentPageId",
        "TaskId",
        "FlowId",
        "InstanceId",
    )
)

FIELD_LABELS = {
    key.lower(): label
    for key, label in {
        "trustName": "Trust Name",
        "ukprn": "UKPRN",
        "urn": "URN",
        "companiesHouseNumber": "Companies House Number",
        "contributorEmail": "Email Address",
        "contributorName": "Full Name",
        "contributorId": "Contributor ID",
        "firstName": "First Name",
        "lastName": "Last Name",
        "emailAddress": "Email Address",
        "phoneNumber": "Phone Number",
        "postcode": "Postcode",
        "addressLine1": "Address Line 1",
        "addressLine2": "Address Line 2",
        "city": "City",
        "county": "County",
        "country": "Country",
    }.items()
}

_WORD_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")


def is_system_field(field_name: str) -> bool:
    return field_name.lower() in SYSTEM_FIELDS


class ConfirmationDataFormatter:
    """Builds the label/value rows shown on the confirmation page

    Works on a copy: the stored form data is never modified.
    """

    def format_display_data(
        self,
        form_data: Mapping[str, FormValue],
        display_fields: Optional[Sequence[str]] = None,
    ) -> Dict[str, str]:
        result: Dict[str, str] = {}

        if not form_data:
            logger.warning("No form data provided for confirmation display")
            return result

        fields: List[str] = list(display_fields) if display_fields else [
            k for k in form_data if not is_system_field(k)
        ]

        for field_name in fields:
            if field_name not in form_data:
                logger.warning(f"Display field {field_name} not found in form data")
                continue

            formatted = self.format_field_value(field_name, form_data[field_name])
            if formatted:
                result[self.get_field_display_name(field_name)] = formatted

        logger.debug(f"Formatted {len(result)} fields for confirmation display")
        return result

    def get_field_display_name(self, field_name: str) -> str:
        if not field_name:
            return ""

        label = FIELD_LABELS.get(field_name.lower())
        if label:
            return label

        # camelCase / PascalCase -> Title Case
        return _WORD_BOUNDARY.sub(" ", field_name).title()

    def format_field_value(self, field_name: str, value: Optional[FormValue]) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            parts = [self.format_field_value(field_name, v) for v in value]
            return ", ".join(p for p in parts if p)

        text = str(value).strip()
        if not text:
            return ""

        key = field_name.lower()
        if key in ("companieshousenumber", "postcode"):
            return text.upper()
        if key in ("emailaddress", "contributoremail", "email"):
            return text.lower()
        return text
