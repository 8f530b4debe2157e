"""
Resolution Models

This package defines the pydantic models passed between the stages of did:dns
resolution. None of them are persisted; every instance lives for the duration of
a single resolution call.

Key Models:
- document.py: identifiers, key slots, delegated key documents, verification
  method variants, the synthesized DID document and the resolution result

The models flow through resolution in this order:
- DidDnsIdentifier: the parsed did:dns identifier and its domain
- KeySlot: one probed DNS name (_key{N}._did.{domain})
- DiscoveredKeyReference: a did:key target published at a key slot
- ResolvedKeyDocument: the delegated resolver's view of that did:key
- KeyAggregation: rewritten verification methods accumulated across slots
- ResolveResult: the final DID document, its metadata and any warnings
"""
