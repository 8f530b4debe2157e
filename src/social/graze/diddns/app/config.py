"""
Configuration Module for the did:dns Driver

This module defines the configuration system for the did:dns resolution driver,
using Pydantic for settings validation and dependency injection through AppKeys.

The Settings class is loaded once from environment variables at startup and is
the only view of configuration the resolution core sees. The environment
variable names used by universal resolver deployments
(uniresolver_driver_did_dns_dnsServers, uniresolver_driver_did_dns_didKeyResolver)
are accepted alongside the plain names.

Key configuration areas include:
- DNS servers and the delegated did:key resolver
- Key discovery limits
- Service networking
- Monitoring and observability
"""

from typing import Final, Optional
import logging

from aio_statsd import TelegrafStatsdClient
from aiohttp import ClientSession, web
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from social.graze.diddns.resolve.driver import DidDnsDriver


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings for the did:dns driver.

    Environment variables are automatically mapped to settings fields, with aliases
    provided for the universal resolver driver variable names. For example, the DNS
    server list can be set with either DNS_SERVERS or
    uniresolver_driver_did_dns_dnsServers.
    """

    # Resolution settings
    dns_servers: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "dns_servers", "uniresolver_driver_did_dns_dnsServers"
        ),
    )
    """
    Semicolon separated list of DNS server addresses, e.g. "8.8.8.8;1.1.1.1".
    When unset or blank the platform resolver configuration is used.
    Set with DNS_SERVERS or uniresolver_driver_did_dns_dnsServers.
    """

    did_key_resolver: str = Field(
        "http://localhost:8080/1.0/identifiers",
        validation_alias=AliasChoices(
            "did_key_resolver", "uniresolver_driver_did_dns_didKeyResolver"
        ),
    )
    """
    Endpoint of the resolver used for did:key identifiers found in DNS.
    Set with DID_KEY_RESOLVER or uniresolver_driver_did_dns_didKeyResolver.
    Default: http://localhost:8080/1.0/identifiers
    """

    did_key_resolver_timeout: float = 30.0
    """
    Total timeout in seconds for a single delegated did:key resolution.
    Set with DID_KEY_RESOLVER_TIMEOUT environment variable.
    """

    max_key_slots: Optional[int] = Field(None, ge=1)
    """
    Highest key slot index probed during discovery. Unbounded when unset.
    Set with MAX_KEY_SLOTS environment variable.
    """

    # Environment and debugging settings
    debug: bool = False
    """
    Enable debug mode for verbose logging.
    Set with DEBUG=true environment variable.
    """

    # Network settings
    http_port: int = Field(alias="port", default=8080)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    # Monitoring and error reporting
    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    statsd_host: str = Field(alias="TELEGRAF_HOST", default="telegraf")
    """
    StatsD/Telegraf host for metrics collection.
    Set with TELEGRAF_HOST environment variable.
    """

    statsd_port: int = Field(alias="TELEGRAF_PORT", default=8125)
    """
    StatsD/Telegraf port for metrics collection.
    Set with TELEGRAF_PORT environment variable.
    """

    @field_validator("dns_servers", mode="before")
    @classmethod
    def blank_dns_servers(cls, v) -> Optional[str]:
        """Treat a blank server list the same as an unset one."""
        if isinstance(v, str) and len(v.strip()) == 0:
            return None
        return v


# Application context keys for dependency injection
SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

SessionAppKey: Final = web.AppKey("http_session", ClientSession)
"""AppKey for accessing the shared aiohttp client session"""

TelegrafStatsdClientAppKey: Final = web.AppKey(
    "telegraf_statsd_client", TelegrafStatsdClient
)
"""AppKey for the Telegraf/StatsD metrics client"""

DidDnsDriverAppKey: Final = web.AppKey("did_dns_driver", DidDnsDriver)
"""AppKey for the shared did:dns resolution driver"""
