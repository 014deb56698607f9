"""dev-urn - RFC 9039 device identifier URNs

This package parses and validates `urn:dev:` identifiers (mac, ow, org, os,
ops and extension subtypes) into immutable structured records.
"""

from .dev_urn import (
    URN_DEV_PREFIX,
    MIN_SECTION_COUNT,
    MAX_SECTION_COUNT,
    ADDRESS_LENGTH,
    UrnDev,
    UrnDevBuilder,
    BodyKind,
    MacBody,
    OwBody,
    OrgBody,
    OsBody,
    OpsBody,
    OtherBody,
    parse,
    body_kind_for,
    has_urn_dev_prefix,
    is_valid_identifier,
    is_valid_identifier_no_dash,
    is_valid_hex_string,
    is_valid_pos_number,
    is_valid_subtype,
    is_valid_eui64,
    is_valid_ow_address,
    UrnDevError,
    MalformedUrnError,
    MissingUrnLiteralError,
    MissingDevLiteralError,
    InvalidComponentError,
    InvalidIdentifierError,
    InvalidEui64Error,
    InvalidOwAddressError,
    UnexpectedTrailingIdentifierError,
    InvalidOrgNumberError,
    InvalidOpsShapeError,
    InvalidSubtypeError,
)

__version__ = "0.1.0"

__all__ = [
    "URN_DEV_PREFIX",
    "MIN_SECTION_COUNT",
    "MAX_SECTION_COUNT",
    "ADDRESS_LENGTH",
    "UrnDev",
    "UrnDevBuilder",
    "BodyKind",
    "MacBody",
    "OwBody",
    "OrgBody",
    "OsBody",
    "OpsBody",
    "OtherBody",
    "parse",
    "body_kind_for",
    "has_urn_dev_prefix",
    "is_valid_identifier",
    "is_valid_identifier_no_dash",
    "is_valid_hex_string",
    "is_valid_pos_number",
    "is_valid_subtype",
    "is_valid_eui64",
    "is_valid_ow_address",
    "UrnDevError",
    "MalformedUrnError",
    "MissingUrnLiteralError",
    "MissingDevLiteralError",
    "InvalidComponentError",
    "InvalidIdentifierError",
    "InvalidEui64Error",
    "InvalidOwAddressError",
    "UnexpectedTrailingIdentifierError",
    "InvalidOrgNumberError",
    "InvalidOpsShapeError",
    "InvalidSubtypeError",
]
