"""
Tests for IdentityRegistry.

Tests cover:
- Registration and activation
- Switching, including failed switches
- Lookup of active and explicit identities
- Concurrent registration
"""

import threading

import pytest

from lighter_signer.errors import IdentityError
from lighter_signer.protocol import IdentityRegistry, SigningIdentity

from ..conftest import ACCOUNT_INDEX, OTHER_PRIVATE_KEY, PRIVATE_KEY


def make_identity(api_key_index: int, private_key: bytes = PRIVATE_KEY) -> SigningIdentity:
    return SigningIdentity(
        private_key=private_key,
        public_key=bytes([api_key_index]) * 40,
        api_key_index=api_key_index,
        account_index=ACCOUNT_INDEX,
    )


@pytest.fixture
def registry() -> IdentityRegistry:
    return IdentityRegistry()


# =============================================================================
# Registration Tests
# =============================================================================


class TestRegister:
    """Tests for register()."""

    def test_empty_registry_has_no_active(self, registry) -> None:
        """Test looking up the active identity before any registration."""
        with pytest.raises(IdentityError) as exc_info:
            registry.get()
        assert exc_info.value.code == "NO_ACTIVE_IDENTITY"
        assert registry.active_index is None

    def test_register_activates(self, registry) -> None:
        registry.register(make_identity(3))
        assert registry.active.api_key_index == 3
        assert 3 in registry
        assert len(registry) == 1

    def test_register_without_activation(self, registry) -> None:
        """Test activate=False keeps the current active identity."""
        registry.register(make_identity(3))
        registry.register(make_identity(4), activate=False)
        assert registry.active_index == 3
        assert registry.indices() == [3, 4]

    def test_first_registration_always_active(self, registry) -> None:
        registry.register(make_identity(5), activate=False)
        assert registry.active_index == 5

    def test_register_replaces_same_index(self, registry) -> None:
        registry.register(make_identity(3))
        registry.register(make_identity(3, OTHER_PRIVATE_KEY))
        assert len(registry) == 1
        assert registry.get(3).private_key == OTHER_PRIVATE_KEY

    def test_private_key_not_in_repr(self) -> None:
        assert PRIVATE_KEY.hex() not in repr(make_identity(3))
        assert "private_key" not in repr(make_identity(3))


# =============================================================================
# Switch Tests
# =============================================================================


class TestSwitch:
    """Tests for switch()."""

    def test_switch_known(self, registry) -> None:
        registry.register(make_identity(3))
        registry.register(make_identity(4))
        identity = registry.switch(3)
        assert identity.api_key_index == 3
        assert registry.active_index == 3

    def test_switch_unknown_leaves_active(self, registry) -> None:
        """Test a failed switch does not change the active identity."""
        registry.register(make_identity(3))
        with pytest.raises(IdentityError) as exc_info:
            registry.switch(9)
        assert exc_info.value.code == "IDENTITY_NOT_REGISTERED"
        assert registry.active_index == 3

    def test_get_explicit_unknown(self, registry) -> None:
        registry.register(make_identity(3))
        with pytest.raises(IdentityError):
            registry.get(4)

    def test_get_explicit_does_not_switch(self, registry) -> None:
        registry.register(make_identity(3))
        registry.register(make_identity(4), activate=False)
        assert registry.get(4).api_key_index == 4
        assert registry.active_index == 3


class TestConcurrency:
    """Tests for concurrent access."""

    def test_concurrent_register(self, registry) -> None:
        """Test parallel registrations all land and one is active."""
        threads = [
            threading.Thread(target=registry.register, args=(make_identity(i),))
            for i in range(50)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert registry.indices() == list(range(50))
        assert registry.active_index in registry
