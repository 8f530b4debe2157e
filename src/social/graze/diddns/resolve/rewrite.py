"""Rewriting did:key verification methods into the did:dns namespace.

A did:key document describes its keys under its own identifier, e.g.
``did:key:zABC#zABC`` controlled by ``did:key:zABC``. Before those keys can be
part of a did:dns document they are re-homed under the did:dns identifier:
``did:dns:example.com#zABC`` controlled by ``did:dns:example.com``.

Entries that do not belong to the did:key being rewritten are skipped and
reported as warnings. They never fail resolution.
"""

import logging
from typing import Any, List, Tuple

from social.graze.diddns.model.document import (
    EmbeddedVerificationMethod,
    ResolutionWarning,
    SkipReason,
    VerificationMethodEntry,
    VerificationMethodReference,
)

logger = logging.getLogger(__name__)


def rewrite_id(verification_method_id: str, key_did: str, dns_did: str) -> str:
    """Replace the leading did:key identifier of a verification method id.

    Only the ``key_did`` prefix is replaced. The fragment and anything else
    after the prefix is kept as is.
    """
    return dns_did + verification_method_id[len(key_did):]


def _skip(
    warnings: List[ResolutionWarning],
    key_slot: str,
    reason: SkipReason,
    value: Any,
    message: str,
) -> None:
    logger.warning("%s: %s", key_slot, message)
    warnings.append(
        ResolutionWarning(key_slot=key_slot, reason=reason, value=value, message=message)
    )


def rewrite_verification_methods(
    entries: List[Any], key_did: str, dns_did: str, key_slot: str
) -> Tuple[List[VerificationMethodEntry], List[ResolutionWarning]]:
    """Rewrite verification method entries from a did:key document.

    String entries are references and must start with ``{key_did}#``. Object
    entries are embedded methods: their ``id`` must start with ``{key_did}#``
    and their ``controller`` must equal ``key_did``. The id prefix is replaced
    with ``dns_did`` and the controller becomes ``dns_did``.

    Args:
        entries: Raw entries of one verification method member
        key_did: The did:key identifier the entries were resolved from
        dns_did: The did:dns identifier being resolved
        key_slot: Label of the key slot the did:key came from, e.g. ``key1``

    Returns:
        Tuple of the rewritten entries, in their original order, and warnings
        for every skipped entry
    """
    logger.debug("Verification methods before rewrite: %s", entries)
    expected_prefix = key_did + "#"
    rewritten: List[VerificationMethodEntry] = []
    warnings: List[ResolutionWarning] = []

    for entry in entries:
        if isinstance(entry, str):
            if not entry.startswith(expected_prefix):
                _skip(
                    warnings,
                    key_slot,
                    SkipReason.unexpected_id,
                    entry,
                    f'Skipping unexpected verification method ID, since it doesn\'t start with "{expected_prefix}": {entry}',
                )
                continue
            rewritten.append(
                VerificationMethodReference(id=rewrite_id(entry, key_did, dns_did))
            )

        elif isinstance(entry, dict):
            verification_method_id = entry.get("id")
            if not isinstance(
                verification_method_id, str
            ) or not verification_method_id.startswith(expected_prefix):
                _skip(
                    warnings,
                    key_slot,
                    SkipReason.unexpected_id,
                    entry,
                    f'Skipping unexpected verification method ID, since it doesn\'t start with "{expected_prefix}": {verification_method_id}',
                )
                continue

            controller = entry.get("controller")
            if controller != key_did:
                _skip(
                    warnings,
                    key_slot,
                    SkipReason.unexpected_controller,
                    entry,
                    f'Skipping unexpected verification method controller, since it is not "{key_did}": {controller}',
                )
                continue

            rewritten.append(
                EmbeddedVerificationMethod.model_validate(
                    {
                        **entry,
                        "id": rewrite_id(verification_method_id, key_did, dns_did),
                        "controller": dns_did,
                    }
                )
            )

        else:
            _skip(
                warnings,
                key_slot,
                SkipReason.unexpected_entry,
                entry,
                f"Skipping unexpected verification method: {entry}",
            )

    logger.debug("Verification methods after rewrite: %s", rewritten)
    return rewritten, warnings
