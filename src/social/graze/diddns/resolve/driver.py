"""did:dns resolution driver.

Discovers did:key references published under ``_key{N}._did.{domain}``,
resolves each of them through the delegated resolver and merges their
verification methods into a single did:dns DID document.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Dict, Optional, Tuple

from aiohttp import ClientSession

from social.graze.diddns.model.document import (
    VERIFICATION_METHOD,
    VERIFICATION_METHOD_TERMS,
    DidDnsIdentifier,
    DidDocument,
    DidDocumentMetadata,
    DiscoveredKeyReference,
    KeyAggregation,
    ResolutionWarning,
    ResolveResult,
    SkipReason,
)
from social.graze.diddns.resolve.did_key import DidKeyResolverClient
from social.graze.diddns.resolve.identifier import is_did_key, key_slot, parse_did_dns
from social.graze.diddns.resolve.lookup import DnsLookupClient
from social.graze.diddns.resolve.rewrite import rewrite_verification_methods

if TYPE_CHECKING:
    from social.graze.diddns.app.config import Settings

logger = logging.getLogger(__name__)


def assemble_document(
    aggregation: KeyAggregation, metadata: DidDocumentMetadata
) -> Optional[ResolveResult]:
    """Build the did:dns DID document from the aggregated key documents.

    Args:
        aggregation: Contexts and rewritten verification methods from every
            discovered key slot
        metadata: DNS servers and delegated resolver used

    Returns:
        ResolveResult, or None if no verification method was discovered
    """
    if len(aggregation.verification_methods[VERIFICATION_METHOD]) == 0:
        logger.debug(
            "No verification methods found for %s", aggregation.identifier.did
        )
        return None

    did_document = DidDocument.model_validate(
        {
            "@context": list(aggregation.contexts),
            "id": aggregation.identifier.did,
            **{
                term: list(aggregation.verification_methods[term])
                for term in VERIFICATION_METHOD_TERMS
            },
        }
    )

    return ResolveResult(
        did_document=did_document,
        did_document_metadata=metadata,
        warnings=list(aggregation.warnings),
    )


class DidDnsDriver:
    """Resolves did:dns identifiers.

    The DNS lookup client and the delegated resolver client are shared by
    every resolution made through a driver. They can be passed in, otherwise
    they are created from the settings by the first call to open(). Each
    resolution call keeps its own aggregation state, nothing is cached
    between calls.
    """

    def __init__(
        self,
        settings: "Settings",
        session: Optional[ClientSession] = None,
        dns_client: Optional[DnsLookupClient] = None,
        key_resolver: Optional[DidKeyResolverClient] = None,
    ) -> None:
        self.settings = settings
        self.session = session
        self._owns_session = False
        self._dns_client = dns_client
        self._key_resolver = key_resolver
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._dns_client is not None and self._key_resolver is not None

    async def open(self) -> Tuple[DnsLookupClient, DidKeyResolverClient]:
        """Create the DNS and delegated resolver clients if not already done.

        Returns:
            The DNS lookup client and the delegated resolver client

        Raises:
            DnsLookupError: If the DNS resolver cannot be configured
        """
        async with self._open_lock:
            if self._dns_client is None:
                self._dns_client = DnsLookupClient.create(self.settings.dns_servers)

            if self._key_resolver is None:
                if self.session is None:
                    self.session = ClientSession()
                    self._owns_session = True
                self._key_resolver = DidKeyResolverClient(
                    self.session,
                    self.settings.did_key_resolver,
                    timeout=self.settings.did_key_resolver_timeout,
                )
                logger.info(
                    "Created did:key resolver: %s", self.settings.did_key_resolver
                )

            return self._dns_client, self._key_resolver

    async def close(self) -> None:
        if self._owns_session and self.session is not None:
            await self.session.close()

    def properties(self) -> Dict[str, Any]:
        """Driver options in their wire names."""
        return {
            "dnsServers": self.settings.dns_servers,
            "didKeyResolver": self.settings.did_key_resolver,
        }

    def metadata(self) -> DidDocumentMetadata:
        dns_servers = None
        if self._dns_client is not None:
            dns_servers = self._dns_client.dns_servers
        return DidDocumentMetadata(
            dns_servers=dns_servers, did_key_resolver=self.settings.did_key_resolver
        )

    async def discover_keys(
        self, aggregation: KeyAggregation
    ) -> AsyncIterator[DiscoveredKeyReference]:
        """Probe key slots in order and yield every did:key found.

        Slots are probed one at a time starting at 1. Discovery ends at the
        first slot without a URI record. A slot holding something other than
        a did:key is skipped with a warning and the next slot is still
        probed. Probed slots and warnings are recorded on ``aggregation``.

        Raises:
            DnsLookupError: If a DNS lookup fails
        """
        dns_client, _ = await self.open()

        max_key_slots = self.settings.max_key_slots
        index = 1
        while True:
            slot = key_slot(aggregation.identifier, index)

            if max_key_slots is not None and index > max_key_slots:
                message = f"Stopped key discovery after {max_key_slots} key slots; {slot.fqdn} was not probed."
                logger.warning(message)
                aggregation.warnings.append(
                    ResolutionWarning(
                        key_slot=slot.label,
                        reason=SkipReason.slot_limit_reached,
                        value=slot.fqdn,
                        message=message,
                    )
                )
                return

            aggregation.probed.append(slot)
            target = await dns_client.lookup(slot.fqdn)

            if target is None:
                logger.debug(
                    "For FQDN %s found nothing. Assuming all verification methods have been found.",
                    slot.fqdn,
                )
                return

            if is_did_key(target):
                yield DiscoveredKeyReference(slot=slot, target=target)
            else:
                message = f"For FQDN {slot.fqdn} found something other than did:key: {target}"
                logger.warning(message)
                aggregation.warnings.append(
                    ResolutionWarning(
                        key_slot=slot.label,
                        reason=SkipReason.unexpected_target,
                        value=target,
                        message=message,
                    )
                )

            index += 1

    async def aggregate(self, identifier: DidDnsIdentifier) -> KeyAggregation:
        """Discover, resolve and rewrite every key published for an identifier.

        Raises:
            ResolutionError: If a DNS lookup or a delegated resolve fails
        """
        _, key_resolver = await self.open()

        aggregation = KeyAggregation(identifier=identifier)

        async for reference in self.discover_keys(aggregation):
            key_document = await key_resolver.resolve(reference.target)
            aggregation.discovered.append(reference)

            aggregation.add_contexts(key_document.contexts)
            logger.debug("Contexts now: %s", aggregation.contexts)

            for term in VERIFICATION_METHOD_TERMS:
                rewritten, warnings = rewrite_verification_methods(
                    key_document.entries(term),
                    reference.target,
                    identifier.did,
                    reference.slot.label,
                )
                aggregation.extend(term, rewritten)
                aggregation.warnings.extend(warnings)

            logger.debug(
                "All verification methods now: %s",
                aggregation.verification_methods[VERIFICATION_METHOD],
            )

        return aggregation

    async def resolve(self, did: str) -> Optional[ResolveResult]:
        """Resolve a did:dns identifier.

        Args:
            did: Identifier to resolve

        Returns:
            ResolveResult, or None if the identifier is not a did:dns
            identifier or no verification method was found for it

        Raises:
            ResolutionError: If a DNS lookup or a delegated resolve fails
        """
        identifier = parse_did_dns(did)
        if identifier is None:
            return None

        aggregation = await self.aggregate(identifier)
        return assemble_document(aggregation, self.metadata())
