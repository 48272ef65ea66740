#!/usr/bin/env python3
"""
Unit тесты для config.py
"""

from site_builder_mcp.utils.config import ServiceConfig
from site_builder_mcp.utils.session_manager import ProjectSessionManager


class TestConfig:
    """Тесты конфигурации"""

    def test_service_defaults(self, monkeypatch):
        """Тест значений по умолчанию"""
        for name in ("MCP_TRANSPORT", "MCP_HOST", "MCP_PORT", "DEFAULT_TEMPLATE"):
            monkeypatch.delenv(name, raising=False)

        config = ServiceConfig()

        assert config.MCP_TRANSPORT == "stdio"
        assert config.MCP_PORT == 8660
        assert config.DEFAULT_TEMPLATE == "react"

    def test_service_from_env(self, monkeypatch):
        """Тест чтения из окружения"""
        monkeypatch.setenv("MCP_TRANSPORT", "sse")
        monkeypatch.setenv("MCP_PORT", "9000")
        monkeypatch.setenv("UNRELATED_SETTING", "ignored")

        config = ServiceConfig()

        assert config.MCP_TRANSPORT == "sse"
        assert config.MCP_PORT == 9000


class TestSessionManager:
    """Тесты для ProjectSessionManager"""

    def test_sessions_are_per_project(self):
        manager = ProjectSessionManager()

        first = manager.get_session("a")

        assert manager.get_session("a") is first
        assert manager.get_session("b") is not first
        assert manager.has_session("b")

    def test_reset(self):
        manager = ProjectSessionManager()
        manager.get_session("a").next_step_id = 5

        assert manager.reset_session("a").next_step_id == 0
