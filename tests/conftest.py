"""
Shared test configuration and fixtures for did:dns resolution tests.

Provides in-memory stand-ins for the DNS lookup client and the delegated did:key
resolver, plus factories for typical did:key documents, so that resolution can
be exercised end to end without network access.
"""

from typing import Callable, Dict, List, Optional

import pytest

from social.graze.diddns.app.config import Settings
from social.graze.diddns.model.document import ResolvedKeyDocument
from social.graze.diddns.resolve.driver import DidDnsDriver
from social.graze.diddns.resolve.errors import DidKeyResolutionError

class FakeDnsLookupClient:
    """DNS lookup client answering from a name to URI target mapping."""

    def __init__(
        self, records: Dict[str, str], dns_servers: str = "192.0.2.53"
    ) -> None:
        self.records = records
        self.dns_servers = dns_servers
        self.queries: List[str] = []

    async def lookup(self, fqdn: str) -> Optional[str]:
        self.queries.append(fqdn)
        return self.records.get(fqdn)


class FakeDidKeyResolverClient:
    """Delegated resolver answering from a did:key to document mapping."""

    def __init__(
        self,
        documents: Dict[str, ResolvedKeyDocument],
        endpoint: str = "https://resolver.example/1.0/identifiers",
    ) -> None:
        self.documents = documents
        self.endpoint = endpoint
        self.resolved: List[str] = []

    async def resolve(self, did: str) -> ResolvedKeyDocument:
        self.resolved.append(did)
        if did not in self.documents:
            raise DidKeyResolutionError(f"Cannot resolve {did}: HTTP 404")
        return self.documents[did]


def make_key_document(
    did: str, contexts: Optional[List[str]] = None
) -> ResolvedKeyDocument:
    """Build the document a did:key resolver returns for an Ed25519 key."""
    fragment = did.removeprefix("did:key:")
    verification_method_id = f"{did}#{fragment}"
    if contexts is None:
        contexts = [
            "https://www.w3.org/ns/did/v1",
            "https://w3id.org/security/suites/ed25519-2020/v1",
        ]
    return ResolvedKeyDocument(
        did=did,
        contexts=contexts,
        verification_methods={
            "verificationMethod": [
                {
                    "id": verification_method_id,
                    "type": "Ed25519VerificationKey2020",
                    "controller": did,
                    "publicKeyMultibase": fragment,
                }
            ],
            "authentication": [verification_method_id],
            "assertionMethod": [verification_method_id],
            "capabilityInvocation": [verification_method_id],
            "capabilityDelegation": [verification_method_id],
            "keyAgreement": [],
        },
    )


@pytest.fixture
def settings() -> Settings:
    """Settings with explicit DNS servers and delegated resolver."""
    return Settings(
        dns_servers="192.0.2.53",
        did_key_resolver="https://resolver.example/1.0/identifiers",
    )  # type: ignore


@pytest.fixture
def key_document_factory() -> Callable[..., ResolvedKeyDocument]:
    return make_key_document


@pytest.fixture
def driver_factory(settings) -> Callable[..., DidDnsDriver]:
    """Build a driver over fake DNS records and did:key documents.

    The fakes are reachable through ``driver.fake_dns`` and
    ``driver.fake_key_resolver`` for assertions.
    """

    def factory(
        records: Dict[str, str],
        documents: Optional[Dict[str, ResolvedKeyDocument]] = None,
        driver_settings: Optional[Settings] = None,
    ) -> DidDnsDriver:
        if documents is None:
            documents = {
                target: make_key_document(target)
                for target in records.values()
                if target.startswith("did:key:")
            }
        fake_dns = FakeDnsLookupClient(records)
        fake_key_resolver = FakeDidKeyResolverClient(documents)
        driver = DidDnsDriver(
            driver_settings or settings,
            dns_client=fake_dns,  # type: ignore
            key_resolver=fake_key_resolver,  # type: ignore
        )
        driver.fake_dns = fake_dns  # type: ignore
        driver.fake_key_resolver = fake_key_resolver  # type: ignore
        return driver

    return factory
