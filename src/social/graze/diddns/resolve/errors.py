"""Exceptions raised while resolving did:dns identifiers."""


class ResolutionError(Exception):
    """A did:dns identifier could not be resolved."""


class DnsLookupError(ResolutionError):
    """DNS lookup failed or returned a non-success status."""


class DidKeyResolutionError(ResolutionError):
    """The delegated resolver could not resolve a did:key identifier."""
