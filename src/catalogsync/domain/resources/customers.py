"""Customer sync: identity fields, customer group, addresses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogsync.domain.diff import collection, reference, scalar
from catalogsync.domain.model import ResourceType
from catalogsync.domain.sync import ResourceSyncStrategy

if TYPE_CHECKING:
    from collections.abc import Iterator

    from catalogsync.domain.model import Draft

CUSTOMER_FIELDS = (
    scalar("email", "changeEmail", required=True),
    scalar("customerNumber", "setCustomerNumber", immutable=True),
    scalar("externalId", "setExternalId"),
    scalar("salutation", "setSalutation"),
    scalar("title", "setTitle"),
    scalar("firstName", "setFirstName"),
    scalar("middleName", "setMiddleName"),
    scalar("lastName", "setLastName"),
    scalar("dateOfBirth", "setDateOfBirth"),
    scalar("companyName", "setCompanyName"),
    scalar("vatId", "setVatId"),
    scalar("locale", "setLocale"),
    reference("customerGroup", "setCustomerGroup", ResourceType.CUSTOMER_GROUP),
    collection(
        "addresses",
        add_action="addAddress",
        remove_action="removeAddress",
        change_action="changeAddress",
        item_id_key="addressId",
        payload_key="address",
    ),
)


def validate_customer(draft: Draft) -> Iterator[str]:
    email = draft.fields.get("email")
    if not isinstance(email, str) or not email.strip():
        yield "email is required"
    seen: set[str] = set()
    for address in draft.collections.get("addresses", ()):
        if not address.identity.strip():
            yield "every address needs a key"
        elif address.identity in seen:
            yield f"address key '{address.identity}' is used more than once"
        seen.add(address.identity)


CUSTOMERS = ResourceSyncStrategy(
    resource_type=ResourceType.CUSTOMER,
    name="customers",
    field_specs=CUSTOMER_FIELDS,
    validator=validate_customer,
)
