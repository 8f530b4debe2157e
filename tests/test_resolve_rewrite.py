"""
Unit tests for verification method rewriting in social.graze.diddns.resolve.rewrite

Tests cover rewriting of reference and embedded verification methods from a
did:key into the did:dns namespace, and the warnings recorded for entries that
do not belong to the did:key.
"""

from social.graze.diddns.model.document import (
    EmbeddedVerificationMethod,
    SkipReason,
    VerificationMethodReference,
)
from social.graze.diddns.resolve.rewrite import (
    rewrite_id,
    rewrite_verification_methods,
)

KEY_DID = "did:key:zABC"
DNS_DID = "did:dns:example.com"


class TestRewriteId:
    """Test suite for rewrite_id function."""

    def test_rewrite_keeps_fragment(self):
        """Test only the did:key prefix is replaced."""
        assert rewrite_id("did:key:zABC#zABC", KEY_DID, DNS_DID) == "did:dns:example.com#zABC"

    def test_rewrite_fragment_containing_key_did(self):
        """Test a fragment that repeats the did:key is left alone."""
        assert (
            rewrite_id("did:key:zABC#did:key:zABC", KEY_DID, DNS_DID)
            == "did:dns:example.com#did:key:zABC"
        )


class TestRewriteReferences:
    """Test suite for string verification method references."""

    def test_reference_rewritten(self):
        """Test a matching reference is rewritten."""
        rewritten, warnings = rewrite_verification_methods(
            ["did:key:zABC#zABC"], KEY_DID, DNS_DID, "key1"
        )
        assert rewritten == [VerificationMethodReference(id="did:dns:example.com#zABC")]
        assert warnings == []

    def test_reference_from_other_key_skipped(self):
        """Test a reference to another did:key is skipped with a warning."""
        rewritten, warnings = rewrite_verification_methods(
            ["did:key:zXYZ#zXYZ", "did:key:zABC#zABC"], KEY_DID, DNS_DID, "key1"
        )
        assert [entry.id for entry in rewritten] == ["did:dns:example.com#zABC"]
        assert len(warnings) == 1
        assert warnings[0].reason == SkipReason.unexpected_id
        assert warnings[0].key_slot == "key1"
        assert warnings[0].value == "did:key:zXYZ#zXYZ"

    def test_reference_without_fragment_skipped(self):
        """Test the bare did:key is not a verification method reference."""
        rewritten, warnings = rewrite_verification_methods(
            [KEY_DID, "did:key:zABCD#zABCD"], KEY_DID, DNS_DID, "key2"
        )
        assert rewritten == []
        assert [warning.reason for warning in warnings] == [
            SkipReason.unexpected_id,
            SkipReason.unexpected_id,
        ]


class TestRewriteEmbedded:
    """Test suite for embedded verification methods."""

    def test_embedded_rewritten(self):
        """Test id prefix and whole controller are rewritten, other members kept."""
        entry = {
            "id": "did:key:zABC#zABC",
            "type": "Ed25519VerificationKey2020",
            "controller": "did:key:zABC",
            "publicKeyMultibase": "zABC",
        }
        rewritten, warnings = rewrite_verification_methods([entry], KEY_DID, DNS_DID, "key1")

        assert warnings == []
        assert len(rewritten) == 1
        method = rewritten[0]
        assert isinstance(method, EmbeddedVerificationMethod)
        assert method.to_json() == {
            "id": "did:dns:example.com#zABC",
            "controller": "did:dns:example.com",
            "type": "Ed25519VerificationKey2020",
            "publicKeyMultibase": "zABC",
        }

    def test_embedded_entry_not_modified(self):
        """Test the delegated resolver's entry is left untouched."""
        entry = {"id": "did:key:zABC#zABC", "controller": "did:key:zABC"}
        rewrite_verification_methods([entry], KEY_DID, DNS_DID, "key1")
        assert entry == {"id": "did:key:zABC#zABC", "controller": "did:key:zABC"}

    def test_embedded_controller_mismatch_skipped(self):
        """Test a foreign controller is skipped while valid entries remain."""
        entries = [
            {"id": "did:key:zABC#zABC", "controller": "did:key:zXYZ"},
            {"id": "did:key:zABC#zABC2", "controller": "did:key:zABC"},
        ]
        rewritten, warnings = rewrite_verification_methods(entries, KEY_DID, DNS_DID, "key1")

        assert [entry.id for entry in rewritten] == ["did:dns:example.com#zABC2"]
        assert len(warnings) == 1
        assert warnings[0].reason == SkipReason.unexpected_controller
        assert warnings[0].value == entries[0]

    def test_embedded_controller_must_equal_key_did(self):
        """Test a controller that merely starts with the did:key is rejected."""
        rewritten, warnings = rewrite_verification_methods(
            [{"id": "did:key:zABC#zABC", "controller": "did:key:zABC#zABC"}],
            KEY_DID,
            DNS_DID,
            "key1",
        )
        assert rewritten == []
        assert warnings[0].reason == SkipReason.unexpected_controller

    def test_embedded_id_mismatch_skipped(self):
        """Test an embedded method with a foreign id is skipped."""
        rewritten, warnings = rewrite_verification_methods(
            [{"id": "did:key:zXYZ#zXYZ", "controller": "did:key:zABC"}],
            KEY_DID,
            DNS_DID,
            "key1",
        )
        assert rewritten == []
        assert warnings[0].reason == SkipReason.unexpected_id

    def test_embedded_missing_members_skipped(self):
        """Test embedded methods without id or controller are skipped."""
        rewritten, warnings = rewrite_verification_methods(
            [{"controller": "did:key:zABC"}, {"id": "did:key:zABC#zABC"}],
            KEY_DID,
            DNS_DID,
            "key1",
        )
        assert rewritten == []
        assert [warning.reason for warning in warnings] == [
            SkipReason.unexpected_id,
            SkipReason.unexpected_controller,
        ]


class TestRewriteUnexpectedEntries:
    """Test suite for entries that are neither references nor objects."""

    def test_unexpected_entries_skipped(self):
        """Test numbers, lists and nulls are skipped with warnings."""
        rewritten, warnings = rewrite_verification_methods(
            [42, ["did:key:zABC#zABC"], None, "did:key:zABC#zABC"],
            KEY_DID,
            DNS_DID,
            "key3",
        )
        assert [entry.id for entry in rewritten] == ["did:dns:example.com#zABC"]
        assert [warning.reason for warning in warnings] == [SkipReason.unexpected_entry] * 3
        assert all(warning.key_slot == "key3" for warning in warnings)

    def test_order_preserved(self):
        """Test rewritten entries keep their original order."""
        entries = [
            "did:key:zABC#b",
            {"id": "did:key:zABC#a", "controller": "did:key:zABC"},
            "did:key:zABC#c",
        ]
        rewritten, _ = rewrite_verification_methods(entries, KEY_DID, DNS_DID, "key1")
        assert [entry.id for entry in rewritten] == [
            "did:dns:example.com#b",
            "did:dns:example.com#a",
            "did:dns:example.com#c",
        ]

    def test_empty_entries(self):
        assert rewrite_verification_methods([], KEY_DID, DNS_DID, "key1") == ([], [])
