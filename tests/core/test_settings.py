"""Tests for settings loading (base and API)."""

from contractrest.api.settings import ContractRestSettings
from contractrest.core.settings import ContractRestBaseSettings


class TestBaseSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CONTRACTREST_PORT", raising=False)
        s = ContractRestBaseSettings(_env_file=None)
        assert s.host == "0.0.0.0"
        assert s.port == 3000
        assert s.debug is False
        assert s.log_level == "INFO"
        assert s.log_json is None

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CONTRACTREST_PORT", "8080")
        monkeypatch.setenv("CONTRACTREST_DEBUG", "true")
        s = ContractRestBaseSettings(_env_file=None)
        assert s.port == 8080
        assert s.debug is True

    def test_unknown_env_vars_ignored(self, monkeypatch):
        monkeypatch.setenv("CONTRACTREST_NOT_A_SETTING", "x")
        ContractRestBaseSettings(_env_file=None)


class TestApiSettings:
    def test_defaults(self):
        s = ContractRestSettings(_env_file=None)
        assert s.document_url == "/swagger.json"
        assert s.docs_url == "/api-docs"
        assert s.mutating_tag == "submitTx"
        assert s.backend_factory is None
        assert s.as_localhost is False

    def test_gateway_from_env(self, monkeypatch):
        monkeypatch.setenv("CONTRACTREST_NETWORK", "mychannel")
        monkeypatch.setenv("CONTRACTREST_CONTRACT", "fabcar")
        monkeypatch.setenv("CONTRACTREST_AS_LOCALHOST", "1")
        s = ContractRestSettings(_env_file=None)
        assert s.network == "mychannel"
        assert s.contract == "fabcar"
        assert s.as_localhost is True

    def test_init_kwargs_override_env(self, monkeypatch):
        monkeypatch.setenv("CONTRACTREST_NETWORK", "mychannel")
        s = ContractRestSettings(_env_file=None, network="other")
        assert s.network == "other"
