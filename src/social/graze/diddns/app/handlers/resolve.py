import logging
from typing import Any, Dict, Optional

from aiohttp import web
import sentry_sdk

from social.graze.diddns.app.config import (
    DidDnsDriverAppKey,
    TelegrafStatsdClientAppKey,
)
from social.graze.diddns.resolve.errors import ResolutionError

logger = logging.getLogger(__name__)

RESOLUTION_RESULT_CONTENT_TYPE = (
    'application/ld+json;profile="https://w3id.org/did-resolution"'
)


def resolution_error(error: str, message: Optional[str] = None) -> Dict[str, Any]:
    did_resolution_metadata: Dict[str, Any] = {"error": error}
    if message is not None:
        did_resolution_metadata["errorMessage"] = message
    return {
        "@context": "https://w3id.org/did-resolution/v1",
        "didDocument": None,
        "didResolutionMetadata": did_resolution_metadata,
        "didDocumentMetadata": {},
    }


async def handle_resolve(request: web.Request):
    driver = request.app[DidDnsDriverAppKey]
    statsd_client = request.app[TelegrafStatsdClientAppKey]
    identifier = request.match_info.get("identifier", "")

    if len(identifier) == 0:
        statsd_client.increment(
            "diddns.resolve.count", 1, tag_dict={"outcome": "invalid"}
        )
        return web.json_response(
            resolution_error("invalidDid", "No identifier given"),
            status=400,
            content_type=RESOLUTION_RESULT_CONTENT_TYPE,
        )

    try:
        result = await driver.resolve(identifier)
    except ResolutionError as e:
        logger.error(f"Unable to resolve {identifier}: {type(e).__name__}: {str(e)}")
        sentry_sdk.capture_exception(e)
        statsd_client.increment(
            "diddns.resolve.count",
            1,
            tag_dict={"outcome": "error", "error": type(e).__name__},
        )
        return web.json_response(
            resolution_error("internalError", str(e)),
            status=500,
            content_type=RESOLUTION_RESULT_CONTENT_TYPE,
        )

    if result is None:
        statsd_client.increment(
            "diddns.resolve.count", 1, tag_dict={"outcome": "not_found"}
        )
        return web.json_response(
            resolution_error("notFound"),
            status=404,
            content_type=RESOLUTION_RESULT_CONTENT_TYPE,
        )

    statsd_client.increment(
        "diddns.resolve.count", 1, tag_dict={"outcome": "resolved"}
    )
    statsd_client.gauge(
        "diddns.resolve.verification_methods",
        len(result.did_document.verification_method),
        tag_dict={},
    )
    return web.json_response(
        result.to_json(), content_type=RESOLUTION_RESULT_CONTENT_TYPE
    )


async def handle_properties(request: web.Request):
    driver = request.app[DidDnsDriverAppKey]
    return web.json_response(driver.properties())
