try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from ops_dashboard.services.session_tokens import SessionTokenService


def test_check_password() -> None:
    tokens = SessionTokenService(password="hunter2", secret="s3cret")

    assert tokens.check_password("hunter2")
    assert not tokens.check_password("hunter3")
    assert not tokens.check_password("")


def test_issued_token_verifies_until_expiry() -> None:
    now = [1_700_000_000.0]
    tokens = SessionTokenService(
        password="hunter2", secret="s3cret", max_age_seconds=60, clock=lambda: now[0]
    )

    token = tokens.issue()
    assert tokens.verify(token)

    now[0] += 61
    assert not tokens.verify(token)


def test_tokens_from_another_secret_are_rejected() -> None:
    issuer = SessionTokenService(password="hunter2", secret="one")
    verifier = SessionTokenService(password="hunter2", secret="two")

    assert not verifier.verify(issuer.issue())
    assert not verifier.verify("not-a-token")
    assert not verifier.verify(None)


def test_password_is_required() -> None:
    with pytest.raises(ValueError):
        SessionTokenService(password="")
