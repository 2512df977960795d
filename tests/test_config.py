"""Test configuration reading from multiple sources."""

import os
from unittest.mock import patch

from realip.configs.config import AppConfig, get_app_config
from realip.configs.system import RealIPConfig


class TestConfigSources:
    """Test configuration loading from multiple sources."""

    def test_defaults(self):
        config = RealIPConfig()

        assert config.enabled is True
        assert config.headers == ["X-Forwarded-For", "X-Real-IP"]
        assert config.trusted_networks == ["127.0.0.0/8", "::1/128"]

    def test_config_env_vars_work(self):
        """Test that environment variables work for configuration."""

        env_vars = {
            "REALIP_REAL_IP__HEADERS": '["CF-Connecting-IP"]',
            "REALIP_REAL_IP__TRUSTED_NETWORKS": '["173.245.48.0/20"]',
            "REALIP_LOGGING__LEVEL": "debug",
            "REALIP_SERVER__PORT": "9000",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            config = AppConfig()

            assert config.real_ip.headers == ["CF-Connecting-IP"]
            assert config.real_ip.trusted_networks == ["173.245.48.0/20"]
            assert config.logging.level == "debug"
            assert config.server.port == 9000

    def test_override_yaml_file(self, tmp_path):
        """The file named by REALIP_CONFIG_FILE beats env vars."""

        override = tmp_path / "override.yaml"
        override.write_text(
            "real_ip:\n"
            "  headers: [X-Real-IP]\n"
            "  trusted_networks: ['10.0.0.0/8']\n",
            encoding="utf-8",
        )
        env_vars = {
            "REALIP_CONFIG_FILE": str(override),
            "REALIP_REAL_IP__HEADERS": '["CF-Connecting-IP"]',
        }

        with patch.dict(os.environ, env_vars, clear=False):
            config = get_app_config()

            assert config.real_ip.headers == ["X-Real-IP"]
            assert config.real_ip.trusted_networks == ["10.0.0.0/8"]

    def test_missing_override_file_is_ignored(self, tmp_path):
        env_vars = {"REALIP_CONFIG_FILE": str(tmp_path / "nope.yaml")}

        with patch.dict(os.environ, env_vars, clear=False):
            assert get_app_config().real_ip.enabled is True

    def test_init_kwargs_win(self):
        env_vars = {"REALIP_REAL_IP__HEADERS": '["CF-Connecting-IP"]'}

        with patch.dict(os.environ, env_vars, clear=False):
            config = AppConfig(real_ip=RealIPConfig(headers=["X-Client-IP"]))

            assert config.real_ip.headers == ["X-Client-IP"]

    def test_not_cached(self):
        assert get_app_config() is not get_app_config()
