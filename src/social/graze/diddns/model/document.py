"""did:dns resolution data models.

Pydantic models for the values produced and consumed while resolving a did:dns
identifier, from the parsed identifier through to the synthesized DID document.
"""

from enum import StrEnum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DID_CONTEXTS: List[str] = ["https://www.w3.org/ns/did/v1"]
"""JSON-LD contexts every synthesized DID document starts from."""

VERIFICATION_METHOD = "verificationMethod"
AUTHENTICATION = "authentication"
ASSERTION_METHOD = "assertionMethod"
CAPABILITY_INVOCATION = "capabilityInvocation"
CAPABILITY_DELEGATION = "capabilityDelegation"
KEY_AGREEMENT = "keyAgreement"

VERIFICATION_METHOD_TERMS: List[str] = [
    VERIFICATION_METHOD,
    AUTHENTICATION,
    ASSERTION_METHOD,
    CAPABILITY_INVOCATION,
    CAPABILITY_DELEGATION,
    KEY_AGREEMENT,
]
"""DID document members that carry verification methods, in output order."""


class DidDnsIdentifier(BaseModel):
    """Parsed did:dns identifier."""

    model_config = ConfigDict(frozen=True)

    did: str
    domain: str


class KeySlot(BaseModel):
    """A single numbered key slot under a did:dns domain."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1)
    domain: str

    @property
    def label(self) -> str:
        return f"key{self.index}"

    @property
    def fqdn(self) -> str:
        return f"_{self.label}._did.{self.domain}"


class DiscoveredKeyReference(BaseModel):
    """A did:key identifier published in DNS at a key slot."""

    model_config = ConfigDict(frozen=True)

    slot: KeySlot
    target: str


class ResolvedKeyDocument(BaseModel):
    """DID document returned by the delegated resolver for a did:key.

    Only the members read by did:dns resolution are kept. Verification method
    entries are carried as they were received (strings, objects or anything
    else) so that unexpected shapes can be reported rather than rejected.
    """

    did: str
    contexts: List[str] = Field(default_factory=list)
    verification_methods: Dict[str, List[Any]] = Field(default_factory=dict)

    def entries(self, term: str) -> List[Any]:
        return self.verification_methods.get(term, [])


class VerificationMethodReference(BaseModel):
    """Verification method given as a bare identifier string."""

    model_config = ConfigDict(frozen=True)

    id: str

    def to_json(self) -> str:
        return self.id


class EmbeddedVerificationMethod(BaseModel):
    """Verification method given as an embedded object.

    Only ``id`` and ``controller`` are interpreted, every other member (type,
    key material, ...) is carried through untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    controller: str

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump()


VerificationMethodEntry = Union[VerificationMethodReference, EmbeddedVerificationMethod]


class SkipReason(StrEnum):
    """Why a DNS record or verification method was left out of the document."""

    unexpected_target = "unexpected_target"
    unexpected_id = "unexpected_id"
    unexpected_controller = "unexpected_controller"
    unexpected_entry = "unexpected_entry"
    slot_limit_reached = "slot_limit_reached"


class ResolutionWarning(BaseModel):
    """A skipped record or entry, collected alongside the resolution result."""

    key_slot: str
    reason: SkipReason
    value: Any = None
    message: str


class KeyAggregation(BaseModel):
    """Running state of the discovery loop for one resolution call.

    Verification methods from every discovered key slot are appended in slot
    order, never replaced.
    """

    identifier: DidDnsIdentifier
    contexts: List[str] = Field(default_factory=lambda: list(DEFAULT_DID_CONTEXTS))
    verification_methods: Dict[str, List[VerificationMethodEntry]] = Field(
        default_factory=lambda: {term: [] for term in VERIFICATION_METHOD_TERMS}
    )
    discovered: List[DiscoveredKeyReference] = Field(default_factory=list)
    probed: List[KeySlot] = Field(default_factory=list)
    warnings: List[ResolutionWarning] = Field(default_factory=list)

    def add_contexts(self, contexts: List[str]) -> None:
        for context in contexts:
            if context not in self.contexts:
                self.contexts.append(context)

    def extend(self, term: str, entries: List[VerificationMethodEntry]) -> None:
        self.verification_methods[term].extend(entries)


class DidDocument(BaseModel):
    """Synthesized did:dns DID document."""

    model_config = ConfigDict(populate_by_name=True)

    context: List[str] = Field(alias="@context")
    id: str
    verification_method: List[VerificationMethodEntry] = Field(
        default_factory=list, alias=VERIFICATION_METHOD
    )
    authentication: List[VerificationMethodEntry] = Field(default_factory=list)
    assertion_method: List[VerificationMethodEntry] = Field(
        default_factory=list, alias=ASSERTION_METHOD
    )
    capability_invocation: List[VerificationMethodEntry] = Field(
        default_factory=list, alias=CAPABILITY_INVOCATION
    )
    capability_delegation: List[VerificationMethodEntry] = Field(
        default_factory=list, alias=CAPABILITY_DELEGATION
    )
    key_agreement: List[VerificationMethodEntry] = Field(
        default_factory=list, alias=KEY_AGREEMENT
    )

    def to_json(self) -> Dict[str, Any]:
        """Render the document as JSON-LD.

        Verification methods are rendered back into their original shapes:
        references as strings and embedded methods as objects.
        """
        document: Dict[str, Any] = {"@context": list(self.context), "id": self.id}
        for term in VERIFICATION_METHOD_TERMS:
            document[term] = [entry.to_json() for entry in self.methods(term)]
        return document

    def methods(self, term: str) -> List[VerificationMethodEntry]:
        return {
            VERIFICATION_METHOD: self.verification_method,
            AUTHENTICATION: self.authentication,
            ASSERTION_METHOD: self.assertion_method,
            CAPABILITY_INVOCATION: self.capability_invocation,
            CAPABILITY_DELEGATION: self.capability_delegation,
            KEY_AGREEMENT: self.key_agreement,
        }[term]


class DidDocumentMetadata(BaseModel):
    """Informational metadata describing how a document was resolved."""

    model_config = ConfigDict(populate_by_name=True)

    dns_servers: Optional[str] = Field(default=None, alias="dnsServers")
    did_key_resolver: str = Field(alias="didKeyResolver")


class ResolveResult(BaseModel):
    """Outcome of a successful did:dns resolution."""

    did_document: DidDocument
    did_document_metadata: DidDocumentMetadata
    warnings: List[ResolutionWarning] = Field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "@context": "https://w3id.org/did-resolution/v1",
            "didDocument": self.did_document.to_json(),
            "didResolutionMetadata": {
                "contentType": "application/did+ld+json",
                "warnings": [
                    warning.model_dump(mode="json") for warning in self.warnings
                ],
            },
            "didDocumentMetadata": self.did_document_metadata.model_dump(
                by_alias=True
            ),
        }
