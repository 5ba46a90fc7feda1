from __future__ import annotations

import pytest

from estate_import.config import ConfigurationError, positive_int_env


def test_positive_int_env_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_INT", raising=False)

    assert positive_int_env("EXAMPLE_INT", 7) == 7

    monkeypatch.setenv("EXAMPLE_INT", "  ")
    assert positive_int_env("EXAMPLE_INT", 7) == 7


def test_positive_int_env_parses_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", " 42 ")

    assert positive_int_env("EXAMPLE_INT", 7) == 42


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_positive_int_env_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    monkeypatch.setenv("EXAMPLE_INT", raw)

    with pytest.raises(ConfigurationError) as exc:
        positive_int_env("EXAMPLE_INT", 7)

    assert "EXAMPLE_INT" in str(exc.value)
