"""
did:dns - DNS published DID resolution

This module implements a resolution driver for did:dns identifiers. A did:dns
domain publishes references to did:key identifiers as DNS URI records at
_key1._did.<domain>, _key2._did.<domain>, and so on. The driver discovers those
references, resolves each did:key through a delegated resolver, and merges the
resulting keys into a single DID document identified by the did:dns identifier.

Key Components:
- app: Web application layer exposing the driver over HTTP
- model: Pydantic models for identifiers, key documents and the DID document
- resolve: Identifier parsing, DNS lookups, delegated resolution, rewriting and
  document assembly

Resolution Overview:
1. did:dns:<domain> is parsed; any other identifier is declined so that a
   hosting resolver can try other drivers
2. Key slots are probed in order until one has no URI record
3. Every did:key target is resolved by the delegated resolver
4. Verification method ids and controllers are rewritten from the did:key to
   the did:dns identifier and accumulated across key slots
5. The DID document is assembled along with the DNS servers and delegated
   resolver used
"""
