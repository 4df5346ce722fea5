"""
Static lookup tables used by the FieldMatcher.

Bump SYNONYM_TABLE_VERSION whenever an entry is added or removed so that
mapping results can be traced back to the table that produced them.
"""

from typing import Callable, Dict, Tuple

SYNONYM_TABLE_VERSION = "1.0"

# Canonical concept -> alternate spellings (already normalized)
SYNONYM_TABLE: Dict[str, Tuple[str, ...]] = {
    "email": ("email_address", "user_email", "mail", "email_addr"),
    "phone": ("mobile", "telephone", "phone_number", "contact", "tel", "cell"),
    "name": ("full_name", "user_name", "customer_name", "display_name"),
    "address": ("street", "location", "addr", "street_address"),
    "dob": ("birth_date", "date_of_birth", "birthday", "birthdate"),
    "id": ("user_id", "customer_id", "identifier", "uid"),
    "zip": ("postal_code", "zipcode", "postcode"),
    "company": ("organization", "org", "business", "employer"),
    "status": ("state", "condition", "active"),
    "created": ("created_at", "creation_date", "date_created"),
    "updated": ("updated_at", "modified", "last_modified"),
}

# Variations tried against schema field names, in order
VARIATION_PATTERNS: Tuple[Callable[[str], str], ...] = (
    lambda name: f"user_{name}",
    lambda name: f"{name}_address",
    lambda name: f"{name}_number",
    lambda name: f"{name}_id",
    lambda name: f"customer_{name}",
)
