"""Unit tests for the credential store."""

import pytest
from pydantic import ValidationError

from aws_actor.credentials import (
    CredentialFailure,
    CredentialFailureReason,
    CredentialMaterial,
    CredentialState,
    CredentialStore,
)
from aws_actor.metrics import ClientMetrics
from tests.helpers.fakes import ScriptedSource, make_failure, make_material
from tests.helpers.time import FIXED_NOW, ONE_HOUR, fixed_clock


def make_store(*results: object, metrics: ClientMetrics | None = None) -> CredentialStore:
    source = ScriptedSource(list(results) or [make_failure()])
    return CredentialStore(source, clock=fixed_clock, metrics=metrics)


class TestInitialState:
    """Tests for a freshly created store."""

    def test_starts_empty(self) -> None:
        """Test neither material nor failure is held at start."""
        store = make_store()
        assert store.material is None
        assert store.failure is None

    def test_not_usable_when_empty(self) -> None:
        """Test an empty store is not usable."""
        assert make_store().is_usable() is False

    def test_not_expired_when_empty(self) -> None:
        """Test an empty store is not expired."""
        assert make_store().is_expired() is False


class TestIsExpired:
    """Tests for expiry checks."""

    def test_no_expiry_never_expires(self) -> None:
        """Test material without expiry is never expired."""
        store = make_store(make_material())
        store.refresh()
        assert store.is_expired(FIXED_NOW + ONE_HOUR * 10_000) is False

    def test_before_expiry(self) -> None:
        """Test material is fresh before its expiry."""
        store = make_store(make_material(expiration=FIXED_NOW + ONE_HOUR))
        store.refresh()
        assert store.is_expired() is False

    def test_at_expiry(self) -> None:
        """Test material is expired exactly at its expiry."""
        store = make_store(make_material(expiration=FIXED_NOW))
        store.refresh()
        assert store.is_expired() is True

    def test_after_expiry(self) -> None:
        """Test material is expired after its expiry."""
        store = make_store(make_material(expiration=FIXED_NOW - ONE_HOUR))
        store.refresh()
        assert store.is_expired() is True

    def test_explicit_now_overrides_clock(self) -> None:
        """Test the now argument takes precedence over the clock."""
        store = make_store(make_material(expiration=FIXED_NOW + ONE_HOUR))
        store.refresh()
        assert store.is_expired(FIXED_NOW + ONE_HOUR * 2) is True


class TestRefresh:
    """Tests for refresh."""

    def test_success_installs_material(self) -> None:
        """Test successful refresh replaces material and clears failure."""
        material = make_material(access_key="AKIDNEW")
        store = make_store(make_failure(), material)

        store.refresh()
        assert store.failure is not None

        result = store.refresh()
        assert result == material
        assert store.material == material
        assert store.failure is None
        assert store.is_usable()

    def test_failure_clears_material(self) -> None:
        """Test failed refresh records the reason and clears material."""
        failure = make_failure()
        store = make_store(make_material(), failure)
        store.refresh()
        assert store.is_usable()

        result = store.refresh()
        assert result == failure
        assert store.material is None
        assert store.failure == failure
        assert store.is_usable() is False

    def test_records_metrics(self) -> None:
        """Test refresh attempts are counted."""
        metrics = ClientMetrics()
        store = make_store(make_material(), make_failure(), metrics=metrics)
        store.refresh()
        store.refresh()
        assert metrics.credential_refresh_total == 2
        assert metrics.credential_refresh_failures_total == 1

    def test_raising_source_is_recorded_as_failure(self) -> None:
        """Test an exception from the source becomes a PROVIDER_ERROR failure."""

        class BrokenSource:
            def resolve(self) -> CredentialMaterial:
                raise KeyError("aws_access_key_id")

        metrics = ClientMetrics()
        store = CredentialStore(BrokenSource(), clock=fixed_clock, metrics=metrics)
        store.set_explicit("AKIDOLD", "old-secret")

        result = store.refresh()

        assert isinstance(result, CredentialFailure)
        assert result.reason == CredentialFailureReason.PROVIDER_ERROR
        assert result.message.startswith("KeyError")
        assert store.failure == result
        assert store.material is None
        assert metrics.credential_refresh_failures_total == 1


class TestSetExplicit:
    """Tests for explicitly set credentials."""

    def test_installs_material_without_token_or_expiry(self) -> None:
        """Test explicit credentials carry no token or expiry."""
        store = make_store(make_material(security_token="tok", expiration=FIXED_NOW))
        store.refresh()

        store.set_explicit("AKIDEXPLICIT", "secret")

        material = store.material
        assert material is not None
        assert material.access_key == "AKIDEXPLICIT"
        assert material.secret_key.get_secret_value() == "secret"
        assert material.security_token is None
        assert material.expiration is None
        assert material.source == "explicit"
        assert store.is_expired() is False

    def test_clears_failure(self) -> None:
        """Test explicit credentials clear a recorded failure."""
        store = make_store(make_failure())
        store.refresh()
        store.set_explicit("AKID", "secret")
        assert store.failure is None
        assert store.is_usable()


class TestCredentialState:
    """Tests for the state model invariant."""

    def test_material_and_failure_are_exclusive(self) -> None:
        """Test both material and failure cannot be held together."""
        with pytest.raises(ValidationError):
            CredentialState(material=make_material(), failure=make_failure())

    def test_material_is_frozen(self) -> None:
        """Test material cannot be mutated field by field."""
        material = make_material()
        with pytest.raises(ValidationError):
            material.access_key = "other"  # type: ignore[misc]

    def test_secret_is_masked(self) -> None:
        """Test the secret key never appears in repr."""
        material = CredentialMaterial(access_key="AKID", secret_key="very-secret")
        assert "very-secret" not in repr(material)

    def test_failure_reason_values(self) -> None:
        """Test failure reasons are string enums."""
        assert CredentialFailureReason.NO_CREDENTIALS.value == "NO_CREDENTIALS"
