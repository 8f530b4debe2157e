"""Delegated did:key resolution.

did:key identifiers found in DNS are resolved by an external universal resolver
style HTTP endpoint rather than locally. This module only covers the call
contract: fetch the resolution result and pick out the members that did:dns
resolution reads.
"""

import asyncio
import logging
from typing import Any, Dict, List

import aiohttp
from aiohttp import ClientSession

from social.graze.diddns.model.document import (
    VERIFICATION_METHOD_TERMS,
    ResolvedKeyDocument,
)
from social.graze.diddns.resolve.errors import DidKeyResolutionError

logger = logging.getLogger(__name__)

RESOLUTION_RESULT_ACCEPT = 'application/ld+json;profile="https://w3id.org/did-resolution"'


def as_list(value: Any) -> List[Any]:
    """Normalize a JSON-LD member that may hold a single value or an array."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def parse_key_document(did: str, body: Any) -> ResolvedKeyDocument:
    """Extract contexts and verification methods from a resolver response.

    Args:
        did: The did:key identifier that was resolved
        body: Decoded JSON response, either a resolution result carrying
            ``didDocument`` or a bare DID document

    Returns:
        ResolvedKeyDocument for the did:key

    Raises:
        DidKeyResolutionError: If the response holds no DID document
    """
    if isinstance(body, dict) and "didDocument" in body:
        document = body["didDocument"]
    else:
        document = body

    if not isinstance(document, dict):
        raise DidKeyResolutionError(f"No DID document returned for {did}")

    contexts = []
    for context in as_list(document.get("@context")):
        if isinstance(context, str):
            contexts.append(context)
        else:
            logger.debug("Ignoring non-URI context in %s: %s", did, context)

    verification_methods: Dict[str, List[Any]] = {
        term: as_list(document.get(term)) for term in VERIFICATION_METHOD_TERMS
    }

    return ResolvedKeyDocument(
        did=did, contexts=contexts, verification_methods=verification_methods
    )


class DidKeyResolverClient:
    """HTTP client for the delegated did:key resolver.

    Requests go to ``{endpoint}/{did}``, e.g.
    https://dev.uniresolver.io/1.0/identifiers/did:key:z6Mk...
    """

    def __init__(
        self, session: ClientSession, endpoint: str, timeout: float = 30.0
    ) -> None:
        self.session = session
        self.endpoint = endpoint
        self.timeout = timeout

    def url(self, did: str) -> str:
        return f"{self.endpoint.rstrip('/')}/{did}"

    async def resolve(self, did: str) -> ResolvedKeyDocument:
        """Resolve a did:key identifier through the delegated resolver.

        Args:
            did: did:key identifier to resolve

        Returns:
            ResolvedKeyDocument with contexts and verification methods

        Raises:
            DidKeyResolutionError: If the resolver cannot be reached, answers
                with a non-200 status or returns no usable document
        """
        url = self.url(did)
        try:
            async with self.session.get(
                url,
                headers={"Accept": RESOLUTION_RESULT_ACCEPT},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                if resp.status != 200:
                    raise DidKeyResolutionError(
                        f"Cannot resolve {did}: {url} returned HTTP {resp.status}"
                    )
                body = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise DidKeyResolutionError(f"Cannot resolve {did}: {e}") from e

        key_document = parse_key_document(did, body)
        logger.debug("Resolved %s to %s", did, key_document)
        return key_document
