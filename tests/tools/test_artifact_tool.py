#!/usr/bin/env python3
"""
Unit тесты для artifact_tool.py
"""

import pytest

from site_builder_mcp.models.session import ProjectSession
from site_builder_mcp.tools.artifact_tool import ArtifactTool

ARTIFACT = """Here you go:
<boltArtifact id="counter" title="Counter">
<boltAction type="file" filePath="src/counter.js">
export let count = 0;
</boltAction>
<boltAction type="shell">npm run dev</boltAction>
</boltArtifact>"""


class TestArtifactTool:
    """Тесты для ArtifactTool"""

    @pytest.fixture
    def artifact_tool(self):
        """Создает экземпляр ArtifactTool"""
        return ArtifactTool()

    @pytest.fixture
    def session(self):
        """Создает сессию проекта"""
        return ProjectSession(project_id="counter")

    def test_schema(self, artifact_tool):
        """Тест схемы параметров"""
        schema = artifact_tool.get_input_schema()

        assert artifact_tool.get_name() == "artifact"
        assert schema["required"] == ["command"]
        assert schema["properties"]["command"]["enum"] == ["apply", "preview", "start", "steps"]
        assert schema["properties"]["template"]["enum"] == ["node", "react"]

    @pytest.mark.asyncio
    async def test_apply(self, artifact_tool, session):
        """Тест применения артефакта"""
        result = await artifact_tool.execute({"command": "apply", "artifact": ARTIFACT, "_session": session})

        assert result.error is None
        assert "Applied 2 steps" in result.output
        assert result.data["errors"] == []
        file_step, shell_step = result.data["steps"]
        assert file_step["kind"] == "CreateFile"
        assert file_step["status"] == "completed"
        assert file_step["content_length"] == len("export let count = 0;")
        assert "content" not in file_step
        assert shell_step["content"] == "npm run dev"
        assert session.tree.find("/src/counter.js").content == "export let count = 0;"

    @pytest.mark.asyncio
    async def test_apply_reports_rejected_steps(self, artifact_tool, session):
        """Тест отчета об отклоненных шагах"""
        await artifact_tool.execute({
            "command": "apply",
            "artifact": '<boltArtifact><boltAction type="file" filePath="src">x</boltAction></boltArtifact>',
            "_session": session,
        })

        result = await artifact_tool.execute({"command": "apply", "artifact": ARTIFACT, "_session": session})

        assert result.error is None
        assert "1 steps were rejected" in result.output
        assert result.data["errors"][0]["type"] == "PathCollisionError"
        assert result.data["errors"][0]["step_id"] == 1

    @pytest.mark.asyncio
    async def test_preview_does_not_need_session(self, artifact_tool):
        """Тест предпросмотра без сессии"""
        truncated = ARTIFACT.split("<boltAction type=\"shell\">")[0] + '<boltAction type="shell">npm'

        result = await artifact_tool.execute({"command": "preview", "artifact": truncated})

        assert result.error is None
        assert result.data["artifact_id"] == "counter"
        assert result.data["truncated"] is True
        assert len(result.data["steps"]) == 1
        assert result.data["steps"][0]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_start_and_steps(self, artifact_tool, session):
        """Тест запуска из шаблона и журнала шагов"""
        started = await artifact_tool.execute({"command": "start", "template": "node", "_session": session})
        again = await artifact_tool.execute({"command": "start", "template": "react", "_session": session})
        listed = await artifact_tool.execute({"command": "steps", "status": "completed", "_session": session})

        assert started.error is None
        assert "already been started" in again.error
        assert again.error_code == -1
        assert [step["path"] for step in listed.data["steps"]] == ["/index.js", "/package.json"]

    @pytest.mark.asyncio
    async def test_invalid_template(self, artifact_tool, session):
        """Тест неизвестного шаблона"""
        result = await artifact_tool.execute({"command": "start", "template": "vue", "_session": session})

        assert "Invalid template answer" in result.error
        assert session.template is None

    @pytest.mark.asyncio
    async def test_missing_session(self, artifact_tool):
        """Тест отсутствия сессии"""
        result = await artifact_tool.execute({"command": "apply", "artifact": ARTIFACT})

        assert result.error == "ProjectSession not found in arguments."
        assert result.error_code == -1

    @pytest.mark.asyncio
    async def test_missing_artifact(self, artifact_tool, session):
        """Тест отсутствия параметра artifact"""
        result = await artifact_tool.execute({"command": "apply", "_session": session})

        assert "Parameter `artifact` is required" in result.error

    @pytest.mark.asyncio
    async def test_unknown_command(self, artifact_tool, session):
        """Тест неизвестной команды"""
        result = await artifact_tool.execute({"command": "deploy", "_session": session})

        assert "Unrecognized command deploy" in result.error
