"""Unit tests for catalog and proxy configuration."""

import pytest

from devportal.api.config import APIConfig
from devportal.lib.config import ConfigLoader
from devportal.models.component import DEFAULT_LANDSCAPE_ROUTE


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "landscapes.yaml").write_text(
        "landscapes:\n"
        "  - name: eu10\n"
        "    route: sap.hana.ondemand.com\n"
        "  - name: legacy\n"
    )
    (tmp_path / "components.yaml").write_text(
        "components:\n"
        "  - id: accounts\n"
        "    name: accounts-service\n"
        "  - name: dashboard\n"
        "    metadata:\n"
        "      subdomain: sap-provisioning\n"
    )
    return tmp_path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("PORTAL_PROXY_BASE_URL", "PORTAL_PROXY_PATH", "PORTAL_PROXY_TOKEN", "PROBE_TIMEOUT_SECONDS"):
        monkeypatch.delenv(key, raising=False)


def test_loads_catalog(config_dir, tmp_path):
    loader = ConfigLoader(config_dir=str(config_dir), env_file=str(tmp_path / "missing.env"))

    assert [landscape.name for landscape in loader.list_landscapes()] == ["eu10", "legacy"]
    assert loader.get_landscape("legacy").route == DEFAULT_LANDSCAPE_ROUTE
    components = loader.get_components()
    assert [c.id for c in components] == ["accounts", "dashboard"]
    assert components[1].subdomain == "sap-provisioning"
    assert components[0].subdomain is None


def test_proxy_settings_from_env(config_dir, tmp_path, monkeypatch):
    monkeypatch.setenv("PORTAL_PROXY_BASE_URL", "https://portal.internal")
    monkeypatch.setenv("PORTAL_PROXY_TOKEN", "abc")
    monkeypatch.setenv("PROBE_TIMEOUT_SECONDS", "4")

    loader = ConfigLoader(config_dir=str(config_dir), env_file=str(tmp_path / "missing.env"))

    assert loader.proxy.base_url == "https://portal.internal"
    assert loader.proxy.path == "/cis-public/proxy"
    assert loader.proxy.token == "abc"
    assert loader.proxy.timeout_seconds == 4.0


@pytest.mark.parametrize("value", ["soon", "0", "-3"])
def test_invalid_timeout_rejected(config_dir, tmp_path, monkeypatch, value):
    monkeypatch.setenv("PROBE_TIMEOUT_SECONDS", value)

    with pytest.raises(ValueError):
        ConfigLoader(config_dir=str(config_dir), env_file=str(tmp_path / "missing.env"))


def test_duplicate_component_ids_rejected(tmp_path):
    (tmp_path / "components.yaml").write_text(
        "components:\n  - id: a\n    name: one\n  - id: a\n    name: two\n"
    )

    with pytest.raises(ValueError, match="Duplicate"):
        ConfigLoader(config_dir=str(tmp_path), env_file=str(tmp_path / "missing.env"))


def test_missing_catalog_is_empty(tmp_path):
    loader = ConfigLoader(config_dir=str(tmp_path), env_file=str(tmp_path / "missing.env"))

    assert loader.list_landscapes() == []
    assert loader.get_components() == []


def test_api_config_defaults_and_dotted_get(tmp_path):
    config = APIConfig(config_path=str(tmp_path / "absent.yaml"))

    assert config.get("server.port") == 9100
    assert config.get("logging.level") == "INFO"
    assert config.get("server.missing", "fallback") == "fallback"


def test_api_config_from_file(tmp_path):
    path = tmp_path / "api.yaml"
    path.write_text("server:\n  port: 9200\ncatalog:\n  config_dir: /etc/portal\n")

    config = APIConfig(config_path=str(path))

    assert config.get("server.port") == 9200
    assert config.get("catalog.config_dir") == "/etc/portal"
