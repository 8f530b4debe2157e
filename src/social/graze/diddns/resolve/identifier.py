"""did:dns identifier parsing and key slot naming."""

import re
from typing import Optional

from social.graze.diddns.model.document import DidDnsIdentifier, KeySlot

DID_DNS_PATTERN = re.compile(r"did:dns:(.+)")

DID_KEY_PREFIX = "did:key:"


def parse_did_dns(did: str) -> Optional[DidDnsIdentifier]:
    """Parse a did:dns identifier.

    Args:
        did: Identifier to parse

    Returns:
        DidDnsIdentifier with the domain, or None if the identifier is not a
        did:dns identifier
    """
    if did is None:
        return None
    match = DID_DNS_PATTERN.fullmatch(did)
    if match is None:
        return None
    return DidDnsIdentifier(did=did, domain=match.group(1))


def key_slot(identifier: DidDnsIdentifier, index: int) -> KeySlot:
    return KeySlot(index=index, domain=identifier.domain)


def is_did_key(value: str) -> bool:
    return value.startswith(DID_KEY_PREFIX)
