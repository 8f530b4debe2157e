"""
did:dns Resolution

This package resolves did:dns identifiers into DID documents by discovering
did:key references published in DNS under the identifier's domain.

Key Components:
- identifier.py: did:dns identifier parsing and key slot naming
- lookup.py: DNS URI record lookups
- did_key.py: delegated did:key resolution over HTTP
- rewrite.py: rewriting did:key verification methods into the did:dns namespace
- driver.py: the key discovery loop and DID document assembly
- __main__.py: CLI interface for resolution

The resolution flow follows these steps:
1. Parse did:dns:<domain>, declining anything else
2. Look up URI records at _key1._did.<domain>, _key2._did.<domain>, ... until
   a slot has no record
3. Resolve every did:key target through the delegated resolver
4. Rewrite verification method ids and controllers from the did:key to the
   did:dns identifier and accumulate them across slots
5. Assemble the DID document, or decline if no verification method was found
"""
