"""DNS URI record lookups for did:dns key slots.

Wraps dnspython's asynchronous resolver. A lookup returns the target of the
most preferred URI record at a name, None when the name has no URI record, and
raises DnsLookupError for every other DNS failure.
"""

import logging
from typing import Any, List, Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from social.graze.diddns.resolve.errors import DnsLookupError

logger = logging.getLogger(__name__)


def parse_dns_servers(dns_servers: Optional[str]) -> List[str]:
    """Split a semicolon separated DNS server list.

    Args:
        dns_servers: Server addresses separated by ';', may be None or blank

    Returns:
        Non-empty, stripped server addresses in configured order
    """
    if dns_servers is None:
        return []
    return [server.strip() for server in dns_servers.split(";") if server.strip()]


def uri_target(record: Any) -> str:
    """Return a URI record target as text.

    Bytes that are not valid UTF-8 are kept as backslash escapes, so a
    malformed target is still a string that callers can reject.
    """
    target = record.target
    if isinstance(target, bytes):
        return target.decode("utf-8", errors="backslashreplace")
    return str(target)


class DnsLookupClient:
    """Looks up URI records through a single shared resolver.

    Use DnsLookupClient.create to build one from the configured server list.
    ``dns_servers`` holds the servers actually in use, for reporting in
    resolution metadata.
    """

    def __init__(self, resolver: dns.asyncresolver.Resolver, dns_servers: str) -> None:
        self.resolver = resolver
        self.dns_servers = dns_servers

    @classmethod
    def create(cls, dns_servers: Optional[str] = None) -> "DnsLookupClient":
        """Create a client for the given servers or the platform configuration.

        Args:
            dns_servers: Semicolon separated server addresses. When empty the
                system resolver configuration is used.

        Raises:
            DnsLookupError: If the resolver cannot be configured
        """
        servers = parse_dns_servers(dns_servers)
        try:
            if len(servers) > 0:
                resolver = dns.asyncresolver.Resolver(configure=False)
                resolver.nameservers = servers
                logger.info("Created DNS resolver with servers %s.", servers)
                return cls(resolver, ";".join(servers))

            resolver = dns.asyncresolver.Resolver()
        except (dns.exception.DNSException, ValueError) as e:
            raise DnsLookupError(f"Unable to create DNS resolver: {e}") from e

        effective = ",".join(str(nameserver) for nameserver in resolver.nameservers)
        logger.info("Created default DNS resolver with servers %s.", effective)
        return cls(resolver, effective)

    async def lookup(self, fqdn: str) -> Optional[str]:
        """Look up the most preferred URI record target at a name.

        Records are ordered by priority, lowest first. Records sharing the
        lowest priority keep the order in which they were answered.

        Args:
            fqdn: Fully qualified name to query

        Returns:
            Target of the lowest priority URI record, or None if there is none

        Raises:
            DnsLookupError: On timeouts, server failures and other DNS errors
        """
        try:
            answer = await self.resolver.resolve(fqdn, "URI")
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            logger.debug("For FQDN %s found no URI record.", fqdn)
            return None
        except dns.exception.DNSException as e:
            logger.debug("For FQDN %s got error: %s", fqdn, e)
            raise DnsLookupError(f"DNS resolution error for {fqdn}: {e}") from e

        records = list(answer)
        if len(records) == 0:
            return None

        for record in records:
            logger.debug(
                "For FQDN %s found entry %s with priority %s",
                fqdn,
                uri_target(record),
                record.priority,
            )

        records.sort(key=lambda record: record.priority)
        return uri_target(records[0])
