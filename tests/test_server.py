#!/usr/bin/env python3
"""
Интеграционные тесты для server.py
"""

import pytest

from site_builder_mcp import server
from site_builder_mcp.tools.base import ToolExecResult
from site_builder_mcp.utils.dependencies import get_session_manager

ARTIFACT = (
    '<boltArtifact id="site" title="Site">'
    '<boltAction type="file" filePath="index.html"><h1>Hi</h1></boltAction>'
    '<boltAction type="file" filePath="src/app.js">app()</boltAction>'
    "</boltArtifact>"
)


@pytest.fixture
def project_id():
    """Создает чистую сессию для каждого теста"""
    get_session_manager().reset_session("server-test")
    return "server-test"


class TestServerTools:
    """Тесты инструментов MCP сервера"""

    def test_to_response(self):
        """Тест преобразования результата"""
        ok = server.to_response(ToolExecResult(output="done", data={"steps": []}))
        failed = server.to_response(ToolExecResult(error="boom", error_code=-1))

        assert ok == {"status": "success", "result": "done", "exit_code": 0, "steps": []}
        assert failed == {"status": "error", "error": "boom", "exit_code": -1}

    @pytest.mark.asyncio
    async def test_apply_then_mount(self, project_id):
        """Тест применения артефакта и монтирования"""
        applied = await server.apply_artifact(None, project_id, ARTIFACT)
        mounted = await server.mount_descriptor(None, project_id)

        assert applied["status"] == "success"
        assert len(applied["steps"]) == 2
        assert mounted["descriptor"] == {
            "index.html": {"file": {"contents": "<h1>Hi</h1>"}},
            "src": {"directory": {"app.js": {"file": {"contents": "app()"}}}},
        }

    @pytest.mark.asyncio
    async def test_edit_and_view(self, project_id):
        """Тест правки файла через инструмент"""
        await server.apply_artifact(None, project_id, ARTIFACT)

        written = await server.project_file_tool(None, project_id, "write", path="src/app.js", content="app(2)")
        viewed = await server.project_file_tool(None, project_id, "view", path="src/app.js")
        steps = await server.list_steps(None, project_id)

        assert written["status"] == "success"
        assert "app(2)" in viewed["result"]
        assert len(steps["steps"]) == 2

    @pytest.mark.asyncio
    async def test_start_project_uses_default_template(self, project_id):
        """Тест шаблона по умолчанию"""
        started = await server.start_project(None, project_id)

        assert started["status"] == "success"
        session = get_session_manager().get_session(project_id)
        assert session.template == server.server_config.DEFAULT_TEMPLATE

    @pytest.mark.asyncio
    async def test_preview(self):
        """Тест предпросмотра"""
        preview = await server.preview_artifact(None, ARTIFACT)

        assert preview["title"] == "Site"
        assert [step["path"] for step in preview["steps"]] == ["/index.html", "/src/app.js"]

    @pytest.mark.asyncio
    async def test_errors_are_returned_as_dicts(self, project_id):
        """Тест ошибок инструмента"""
        result = await server.project_file_tool(None, project_id, "view", path="missing.txt")

        assert result["status"] == "error"
        assert result["exit_code"] == -1

    def test_artifact_format_prompt(self):
        """Тест системного промпта"""
        prompt = server.get_artifact_format_prompt()

        assert "<boltArtifact" in prompt
        assert "project_file" in prompt
