"""RFC 9039 Device Identifier URNs

This module parses `urn:dev:` identifiers into an immutable record holding the
subtype, organization, product, serial, component and identifier parts, and
the hardware address for `mac` and `ow` identifiers.

From RFC 9039, section 3.2:

    devurn = "urn:dev:" body componentpart
    body = macbody / owbody / orgbody / osbody / opsbody / otherbody
    macbody = %s"mac:" hexstring
    owbody = %s"ow:" hexstring
    orgbody = %s"org:" posnumber "-" identifier *( ":" identifier )
    osbody = %s"os:" posnumber "-" serial *( ":" identifier )
    opsbody = %s"ops:" posnumber "-" product "-" serial *( ":" identifier )
    otherbody = subtype ":" identifier *( ":" identifier )
    subtype = LALPHA *(DIGIT / LALPHA)
    identifier = 1*devunreserved
    identifiernodash = 1*devunreservednodash
    product = identifiernodash
    serial = identifier
    componentpart = *( "_" identifier )
    devunreservednodash = ALPHA / DIGIT / "."
    devunreserved = devunreservednodash / "-"
    hexstring = 1*(hexdigit hexdigit)
    hexdigit = DIGIT / "a" / "b" / "c" / "d" / "e" / "f"
    posnumber = NZDIGIT *DIGIT
"""

import re
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple, Union


URN_DEV_PREFIX = "urn:dev:"

MIN_SECTION_COUNT = 4
# Exclusive: at most MAX_SECTION_COUNT - 1 sections are accepted
MAX_SECTION_COUNT = 16

# EUI-64 and 1-Wire addresses are 8 bytes
ADDRESS_LENGTH = 16

IDENTIFIER_GRAMMAR = "identifier ([A-Za-z0-9.-]+)"
IDENTIFIER_NO_DASH_GRAMMAR = "dash-free identifier ([A-Za-z0-9.]+)"
HEX_ADDRESS_GRAMMAR = f"{ADDRESS_LENGTH} lowercase hex digits"
POS_NUMBER_GRAMMAR = "positive number ([1-9][0-9]*)"
SUBTYPE_GRAMMAR = "subtype ([a-z][0-9a-z]*)"

_SUBTYPE_RE = re.compile(r"[a-z][0-9a-z]*")
_IDENTIFIER_NO_DASH_RE = re.compile(r"[A-Za-z0-9.]+")
_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9.\-]+")
_HEX_STRING_RE = re.compile(r"(?:[0-9a-f][0-9a-f])+")
_POS_NUMBER_RE = re.compile(r"[1-9][0-9]*")


# Error classes
class UrnDevError(Exception):
    """Base exception for urn:dev parse errors

    `token` is the offending text and `expected` describes what was required
    in its place.
    """
    reason = "invalid urn:dev"

    def __init__(self, token: str, expected: str):
        self.token = token
        self.expected = expected
        super().__init__(f"{self.reason}: '{token}' (expected {expected})")


class MalformedUrnError(UrnDevError):
    """Wrong number of ':'-separated sections"""
    reason = "malformed urn:dev"


class MissingUrnLiteralError(UrnDevError):
    """First section is not 'urn'"""
    reason = "missing 'urn' literal"


class MissingDevLiteralError(UrnDevError):
    """Second section is not 'dev'"""
    reason = "missing 'dev' literal"


class InvalidComponentError(UrnDevError):
    """Component after '_' is not an identifier"""
    reason = "invalid component"


class InvalidIdentifierError(UrnDevError):
    """Identifier, product or serial has disallowed characters or is empty"""
    reason = "invalid identifier"


class InvalidEui64Error(UrnDevError):
    """mac body is not a 16 digit lowercase hex EUI-64"""
    reason = "invalid EUI-64 address"


class InvalidOwAddressError(UrnDevError):
    """ow body is not a 16 digit lowercase hex 1-Wire address"""
    reason = "invalid 1-Wire address"


class UnexpectedTrailingIdentifierError(UrnDevError):
    """mac or ow address followed by exactly one bare identifier"""
    reason = "unexpected trailing identifier"


class InvalidOrgNumberError(UrnDevError):
    """Organization part missing or not a positive number"""
    reason = "invalid organization number"


class InvalidOpsShapeError(UrnDevError):
    """ops body does not split into organization, product and serial"""
    reason = "invalid ops body"


class InvalidSubtypeError(UrnDevError):
    """Unknown subtype whose name does not match the subtype grammar"""
    reason = "invalid subtype"


# Token validators
def is_valid_identifier(s: str) -> bool:
    return _IDENTIFIER_RE.fullmatch(s) is not None


def is_valid_identifier_no_dash(s: str) -> bool:
    return _IDENTIFIER_NO_DASH_RE.fullmatch(s) is not None


def is_valid_hex_string(s: str) -> bool:
    """Even number of lowercase hex digits, at least two"""
    return _HEX_STRING_RE.fullmatch(s) is not None


def is_valid_pos_number(s: str) -> bool:
    """Decimal number without leading zeros"""
    return _POS_NUMBER_RE.fullmatch(s) is not None


def is_valid_subtype(s: str) -> bool:
    return _SUBTYPE_RE.fullmatch(s) is not None


def is_valid_eui64(s: str) -> bool:
    return len(s) == ADDRESS_LENGTH and is_valid_hex_string(s)


def is_valid_ow_address(s: str) -> bool:
    return len(s) == ADDRESS_LENGTH and is_valid_hex_string(s)


def has_urn_dev_prefix(name: str) -> bool:
    """Check whether a string starts with `urn:dev:`, ignoring case

    A string with the prefix can still fail `parse`.
    """
    return name.lower().startswith(URN_DEV_PREFIX)


class BodyKind(Enum):
    """Body grammar a urn:dev identifier was parsed with"""
    MAC = "mac"
    OW = "ow"
    ORG = "org"
    OS = "os"
    OPS = "ops"
    OTHER = "other"


class MacBody(NamedTuple):
    eui64_identifier: str
    kind = BodyKind.MAC


class OwBody(NamedTuple):
    ow_identifier: str
    kind = BodyKind.OW


class OrgBody(NamedTuple):
    organization: str
    kind = BodyKind.ORG


class OsBody(NamedTuple):
    organization: str
    serial: str
    kind = BodyKind.OS


class OpsBody(NamedTuple):
    organization: str
    product: str
    serial: str
    kind = BodyKind.OPS


class OtherBody(NamedTuple):
    kind = BodyKind.OTHER


Body = Union[MacBody, OwBody, OrgBody, OsBody, OpsBody, OtherBody]


def body_kind_for(subtype: str) -> BodyKind:
    """Body family a subtype is parsed with; unknown subtypes are OTHER"""
    if subtype in ("mac", "ow", "org", "os", "ops"):
        return BodyKind(subtype)
    return BodyKind.OTHER


class UrnDev:
    """A parsed RFC 9039 device identifier

    Examples:
    - `urn:dev:mac:0024beffff804ff1`
    - `urn:dev:ops:32473-Refrigerator-5002`
    - `urn:dev:ow:264437f5000000ed_humidity`

    Instances come from `from_string` or `parse` and are immutable.
    Fields that do not apply to the subtype read as empty strings.
    """

    __slots__ = ("_full_name", "_subtype", "_body", "_identifier", "_component")

    def __init__(self, full_name: str, subtype: str, body: Body,
                 identifier: Tuple[str, ...], component: Tuple[str, ...]):
        """Create a record from already validated parts (use `from_string`)

        The body family must be the one the subtype dispatches to.
        """
        if body.kind != body_kind_for(subtype):
            raise InvalidSubtypeError(subtype, f"subtype with a {body.kind.value} body")
        self._full_name = full_name
        self._subtype = subtype
        self._body = body
        self._identifier = tuple(identifier)
        self._component = tuple(component)

    @classmethod
    def from_string(cls, s: str) -> 'UrnDev':
        """Parse a urn:dev string

        Format: `urn:dev:<subtype>:<body>[:<identifier>...][_<component>...]`
        The `urn` and `dev` literals are case-insensitive; everything else
        is case-sensitive and kept verbatim.
        """
        sections = s.split(":")
        if len(sections) < MIN_SECTION_COUNT or len(sections) >= MAX_SECTION_COUNT:
            raise MalformedUrnError(
                s, f"{MIN_SECTION_COUNT} to {MAX_SECTION_COUNT - 1} ':'-separated sections")

        if sections[0].lower() != "urn":
            raise MissingUrnLiteralError(sections[0], "'urn'")
        if sections[1].lower() != "dev":
            raise MissingDevLiteralError(sections[1], "'dev'")

        subtype = sections[2]

        # Component part hangs off the last section
        head, *component = sections[-1].split("_")
        sections[-1] = head
        for c in component:
            if not is_valid_identifier(c):
                raise InvalidComponentError(c, IDENTIFIER_GRAMMAR)

        identifier = sections[3:]
        for i in identifier:
            if not is_valid_identifier(i):
                raise InvalidIdentifierError(i, IDENTIFIER_GRAMMAR)

        parse_body = _BODY_PARSERS.get(subtype, _parse_other_body)
        body, identifier = parse_body(subtype, sections, identifier)

        return cls(s, subtype, body, tuple(identifier), tuple(component))

    @staticmethod
    def is_valid(s: str) -> bool:
        """Check if a string parses as a urn:dev identifier"""
        try:
            UrnDev.from_string(s)
        except UrnDevError:
            return False
        return True

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def subtype(self) -> str:
        return self._subtype

    @property
    def body(self) -> Body:
        return self._body

    @property
    def kind(self) -> BodyKind:
        return self._body.kind

    @property
    def organization(self) -> str:
        return getattr(self._body, "organization", "")

    @property
    def product(self) -> str:
        return getattr(self._body, "product", "")

    @property
    def serial(self) -> str:
        return getattr(self._body, "serial", "")

    @property
    def eui64_identifier(self) -> str:
        return getattr(self._body, "eui64_identifier", "")

    @property
    def ow_identifier(self) -> str:
        return getattr(self._body, "ow_identifier", "")

    @property
    def identifier(self) -> Tuple[str, ...]:
        return self._identifier

    @property
    def component(self) -> Tuple[str, ...]:
        return self._component

    def to_string(self) -> str:
        """Get the identifier exactly as it was parsed"""
        return self._full_name

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"UrnDev('{self._full_name}')"

    def _key(self) -> tuple:
        return (self._full_name, self._subtype, self._body,
                self._identifier, self._component)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UrnDev):
            return False
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


def parse(name: str) -> UrnDev:
    """Parse a urn:dev string, raising a `UrnDevError` subclass on failure"""
    return UrnDev.from_string(name)


# Body parsers get the subtype, the sections (component part already removed)
# and the validated identifiers, and return the body with what is left of the
# identifiers.
BodyResult = Tuple[Body, List[str]]


def _check_single_address(subtype: str, sections: List[str]) -> None:
    # An address followed by exactly one more identifier is rejected
    if len(sections) == 5:
        raise UnexpectedTrailingIdentifierError(
            sections[4], f"no bare identifier after a {subtype} address")


def _parse_mac_body(subtype: str, sections: List[str], identifier: List[str]) -> BodyResult:
    _check_single_address(subtype, sections)
    address = sections[3]
    if not is_valid_eui64(address):
        raise InvalidEui64Error(address, HEX_ADDRESS_GRAMMAR)
    return MacBody(address), identifier[1:]


def _parse_ow_body(subtype: str, sections: List[str], identifier: List[str]) -> BodyResult:
    _check_single_address(subtype, sections)
    address = sections[3]
    if not is_valid_ow_address(address):
        raise InvalidOwAddressError(address, HEX_ADDRESS_GRAMMAR)
    return OwBody(address), identifier[1:]


def _split_organization(section: str) -> Tuple[str, str]:
    """Split `<posnumber>-<rest>` on the first dash"""
    organization, dash, rest = section.partition("-")
    if not dash or not is_valid_pos_number(organization):
        raise InvalidOrgNumberError(organization, f"{POS_NUMBER_GRAMMAR} followed by '-'")
    if not is_valid_identifier(rest):
        raise InvalidIdentifierError(rest, IDENTIFIER_GRAMMAR)
    return organization, rest


def _parse_org_body(subtype: str, sections: List[str], identifier: List[str]) -> BodyResult:
    organization, first = _split_organization(sections[3])
    # The identifier after the organization number stays in slot 0
    return OrgBody(organization), [first] + identifier[1:]


def _parse_os_body(subtype: str, sections: List[str], identifier: List[str]) -> BodyResult:
    organization, serial = _split_organization(sections[3])
    return OsBody(organization, serial), identifier[1:]


def _parse_ops_body(subtype: str, sections: List[str], identifier: List[str]) -> BodyResult:
    parts = sections[3].split("-")
    if len(parts) != 3:
        raise InvalidOpsShapeError(sections[3], "<posnumber>-<product>-<serial>")

    organization, product, serial = parts
    if not is_valid_pos_number(organization):
        raise InvalidOrgNumberError(organization, POS_NUMBER_GRAMMAR)
    if not is_valid_identifier_no_dash(product):
        raise InvalidIdentifierError(product, IDENTIFIER_NO_DASH_GRAMMAR)
    if not is_valid_identifier(serial):
        raise InvalidIdentifierError(serial, IDENTIFIER_GRAMMAR)
    return OpsBody(organization, product, serial), identifier[1:]


def _parse_other_body(subtype: str, sections: List[str], identifier: List[str]) -> BodyResult:
    if not is_valid_subtype(subtype):
        raise InvalidSubtypeError(subtype, SUBTYPE_GRAMMAR)
    return OtherBody(), identifier


_BODY_PARSERS: Dict[str, Callable[[str, List[str], List[str]], BodyResult]] = {
    "mac": _parse_mac_body,
    "ow": _parse_ow_body,
    "org": _parse_org_body,
    "os": _parse_os_body,
    "ops": _parse_ops_body,
}


class UrnDevBuilder:
    """Builder for creating urn:dev identifiers fluently

    `build` checks every field against its grammar, then runs the assembled
    string through `parse`.
    """

    def __init__(self, subtype: str):
        """Create a new builder for a subtype (required)"""
        self.subtype = subtype
        self._address: Optional[str] = None
        self._organization: Optional[str] = None
        self._product: Optional[str] = None
        self._serial: Optional[str] = None
        self.identifiers: List[str] = []
        self.components: List[str] = []

    def address(self, value: str) -> 'UrnDevBuilder':
        """Set the EUI-64 or 1-Wire address (mac and ow)"""
        self._address = value
        return self

    def organization(self, value: str) -> 'UrnDevBuilder':
        self._organization = value
        return self

    def product(self, value: str) -> 'UrnDevBuilder':
        self._product = value
        return self

    def serial(self, value: str) -> 'UrnDevBuilder':
        self._serial = value
        return self

    def identifier(self, value: str) -> 'UrnDevBuilder':
        """Append an identifier

        For `org` the first identifier follows the organization number.
        """
        self.identifiers.append(value)
        return self

    def component(self, value: str) -> 'UrnDevBuilder':
        self.components.append(value)
        return self

    def _body_sections(self) -> List[str]:
        if self.subtype in ("mac", "ow"):
            return [self._address or ""] + self.identifiers
        if self.subtype == "org":
            first = self.identifiers[0] if self.identifiers else ""
            return [f"{self._organization or ''}-{first}"] + self.identifiers[1:]
        if self.subtype == "os":
            return [f"{self._organization or ''}-{self._serial or ''}"] + self.identifiers
        if self.subtype == "ops":
            head = f"{self._organization or ''}-{self._product or ''}-{self._serial or ''}"
            return [head] + self.identifiers
        return list(self.identifiers)

    def to_string(self) -> str:
        """Assemble the identifier string without validating it"""
        s = URN_DEV_PREFIX + ":".join([self.subtype] + self._body_sections())
        return s + "".join(f"_{c}" for c in self.components)

    def _check_fields(self) -> None:
        """Check each field against its own grammar

        Without this a ':' or '_' inside a value would shift it into
        another field of the assembled string.
        """
        kind = body_kind_for(self.subtype)
        if kind == BodyKind.MAC and not is_valid_eui64(self._address or ""):
            raise InvalidEui64Error(self._address or "", HEX_ADDRESS_GRAMMAR)
        if kind == BodyKind.OW and not is_valid_ow_address(self._address or ""):
            raise InvalidOwAddressError(self._address or "", HEX_ADDRESS_GRAMMAR)
        if kind in (BodyKind.ORG, BodyKind.OS, BodyKind.OPS):
            if not is_valid_pos_number(self._organization or ""):
                raise InvalidOrgNumberError(self._organization or "", POS_NUMBER_GRAMMAR)
        if kind == BodyKind.OPS and not is_valid_identifier_no_dash(self._product or ""):
            raise InvalidIdentifierError(self._product or "", IDENTIFIER_NO_DASH_GRAMMAR)
        if kind in (BodyKind.OS, BodyKind.OPS) and not is_valid_identifier(self._serial or ""):
            raise InvalidIdentifierError(self._serial or "", IDENTIFIER_GRAMMAR)
        for i in self.identifiers:
            if not is_valid_identifier(i):
                raise InvalidIdentifierError(i, IDENTIFIER_GRAMMAR)
        for c in self.components:
            if not is_valid_identifier(c):
                raise InvalidComponentError(c, IDENTIFIER_GRAMMAR)

    def build(self) -> UrnDev:
        self._check_fields()
        return UrnDev.from_string(self.to_string())
