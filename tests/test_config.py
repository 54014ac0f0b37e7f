"""Tests for configuration parsing."""

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from davdrop.config import (
    DavDropConfig,
    DropConfig,
    get_config_template,
    load_config,
)
from davdrop.types import CompressionMode, Credentials


class TestConfigTemplate:
    def test_template_is_valid_yaml(self):
        import yaml

        data = yaml.safe_load(get_config_template())
        assert "server" in data
        assert "upload" in data

    def test_template_loads_as_config(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write(get_config_template())
            f.flush()

            config = load_config(Path(f.name))

            assert config.server.endpoint == "https://cloud.example.com"
            assert config.upload.compression == CompressionMode.ZIP

    def test_template_has_no_credentials(self):
        template = get_config_template()
        assert "password:" not in template


class TestLoadConfig:
    def test_load_minimal_config(self):
        config_yaml = """
server:
  endpoint: https://cloud.example/
"""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write(config_yaml)
            f.flush()

            config = load_config(Path(f.name))

            assert config.server.endpoint == "https://cloud.example"  # trailing slash stripped
            assert config.server.remote_root == "/artifacts"  # default
            assert config.server.timeout == 60.0
            assert config.upload.compression == CompressionMode.ZIP
            assert config.upload.scratch_root is None
            assert config.upload.copy_workers == 8

    def test_load_full_config(self):
        config_yaml = """
server:
  endpoint: https://example.org/nextcloud
  timeout: 120
  remote_root: ci/artifacts/

upload:
  compression: none
  scratch_root: /var/tmp/davdrop
  copy_workers: 2
"""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write(config_yaml)
            f.flush()

            config = load_config(Path(f.name))

            assert config.server.timeout == 120
            assert config.server.remote_root == "/ci/artifacts"
            assert config.upload.compression == CompressionMode.NONE
            assert config.upload.scratch_root == "/var/tmp/davdrop"
            assert config.upload.copy_workers == 2

    def test_config_not_a_mapping(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("- endpoint\n- https://cloud.example\n")
            f.flush()

            with pytest.raises(ValidationError):
                load_config(Path(f.name))

    def test_missing_server(self):
        with pytest.raises(ValidationError):
            DavDropConfig(upload={})

    def test_invalid_endpoint(self):
        with pytest.raises(ValidationError, match="http"):
            DavDropConfig(server={"endpoint": "cloud.example"})

    def test_invalid_remote_root(self):
        with pytest.raises(ValidationError, match="remote_root"):
            DavDropConfig(server={"endpoint": "https://cloud.example", "remote_root": "/"})

    def test_invalid_copy_workers(self):
        with pytest.raises(ValidationError, match="copy_workers"):
            DavDropConfig(server={"endpoint": "https://cloud.example"}, upload={"copy_workers": 0})

    def test_invalid_compression(self):
        with pytest.raises(ValidationError):
            DavDropConfig(server={"endpoint": "https://cloud.example"}, upload={"compression": "gz"})


class TestDropConfig:
    @pytest.fixture
    def credentials(self):
        return Credentials(username="ci", password="secret")

    def test_from_config_defaults(self, credentials):
        config = DavDropConfig(server={"endpoint": "https://cloud.example"})

        drop = DropConfig.from_config(config, credentials)

        assert drop.endpoint == "https://cloud.example"
        assert drop.compression == CompressionMode.ZIP
        assert drop.scratch_root == Path(tempfile.gettempdir())
        assert drop.remote_root == "/artifacts"

    def test_compression_override(self, credentials):
        config = DavDropConfig(server={"endpoint": "https://cloud.example"})

        drop = DropConfig.from_config(config, credentials, compression=CompressionMode.NONE)

        assert drop.compression == CompressionMode.NONE

    def test_is_immutable(self, credentials):
        config = DavDropConfig(server={"endpoint": "https://cloud.example"})
        drop = DropConfig.from_config(config, credentials)

        with pytest.raises(ValidationError):
            drop.endpoint = "https://other.example"

    def test_password_not_in_repr(self, credentials):
        config = DavDropConfig(server={"endpoint": "https://cloud.example"})
        drop = DropConfig.from_config(config, credentials)

        assert "secret" not in repr(drop)
        assert drop.credentials.authorization_header() == {"Authorization": "Basic Y2k6c2VjcmV0"}
