"""Tests for system prompt injection."""

from pathlib import Path

import pytest
from conftest import simple_skill, write_config, write_skill

from preload_skills import create_plugin
from preload_skills.hooks import (
    SystemPromptInput,
    SystemPromptOutput,
    ToolExecuteAfterOutput,
    ToolExecuteBeforeOutput,
    ToolExecuteInput,
)


async def read_file(hooks, session_id: str, call_id: str, file_path: str) -> None:
    tool_input = ToolExecuteInput(tool="read", session_id=session_id, call_id=call_id)
    await hooks.tool_execute_before(tool_input, ToolExecuteBeforeOutput(args={"filePath": file_path}))
    await hooks.tool_execute_after(tool_input, ToolExecuteAfterOutput())


class TestSystemPromptHook:
    """Tests for the system transform handler."""

    @pytest.mark.asyncio
    async def test_appends_initial_skills(self, project_dir: Path):
        write_skill(project_dir, "s", simple_skill("s", body="Body"))
        write_config(project_dir, {"skills": ["s"]})
        hooks = create_plugin(project_dir)

        output = SystemPromptOutput(system=["You are helpful."])
        await hooks.system_transform(SystemPromptInput(session_id="s1"), output)

        assert len(output.system) == 2
        assert output.system[0] == "You are helpful."
        assert output.system[1].startswith("<preloaded-skills>")
        assert "Body" in output.system[1]
        assert hooks.context.session_store.get_state("s1").initial_skills_injected is True

    @pytest.mark.asyncio
    async def test_reinjected_every_call(self, project_dir: Path):
        """Hosts rebuild the system prompt per turn, so the block is repeated."""
        write_skill(project_dir, "s", simple_skill("s", body="Body"))
        write_config(project_dir, {"skills": ["s"]})
        hooks = create_plugin(project_dir)

        first = SystemPromptOutput()
        second = SystemPromptOutput()
        await hooks.system_transform(SystemPromptInput(session_id="s1"), first)
        await hooks.system_transform(SystemPromptInput(session_id="s1"), second)

        assert first.system == second.system

    @pytest.mark.asyncio
    async def test_includes_triggered_skills(self, project_dir: Path):
        write_skill(project_dir, "s", simple_skill("s", body="Initial"))
        write_skill(project_dir, "ts", simple_skill("ts", body="Typed"))
        write_config(project_dir, {"skills": ["s"], "fileTypeSkills": {".ts": ["ts"]}})
        hooks = create_plugin(project_dir)

        await read_file(hooks, "s1", "c1", "src/index.ts")
        assert [s.name for s in hooks.context.session_store.get_pending_skills("s1")] == ["ts"]

        output = SystemPromptOutput()
        await hooks.system_transform(SystemPromptInput(session_id="s1"), output)

        block = output.system[0]
        assert block.index("Initial") < block.index("Typed")
        assert block.count('<preloaded-skill name="ts">') == 1
        assert hooks.context.session_store.get_pending_skills("s1") == []

        # Loaded skills stay in later prompts once the queue is drained
        later = SystemPromptOutput()
        await hooks.system_transform(SystemPromptInput(session_id="s1"), later)
        assert "Typed" in later.system[0]

    @pytest.mark.asyncio
    async def test_triggered_only_leaves_initial_flag(self, project_dir: Path):
        """Without initial skills the injected flag is not set."""
        write_skill(project_dir, "ts", simple_skill("ts", body="Typed"))
        write_config(project_dir, {"fileTypeSkills": {".ts": ["ts"]}})
        hooks = create_plugin(project_dir)

        await read_file(hooks, "s1", "c1", "src/index.ts")
        output = SystemPromptOutput()
        await hooks.system_transform(SystemPromptInput(session_id="s1"), output)

        assert "Typed" in output.system[0]
        assert hooks.context.session_store.get_state("s1").initial_skills_injected is False

    @pytest.mark.asyncio
    async def test_nothing_to_inject(self, project_dir: Path):
        hooks = create_plugin(project_dir)
        output = SystemPromptOutput(system=["base"])
        await hooks.system_transform(SystemPromptInput(session_id="s1"), output)
        assert output.system == ["base"]

    @pytest.mark.asyncio
    async def test_missing_session_id(self, project_dir: Path):
        write_skill(project_dir, "s", simple_skill("s"))
        write_config(project_dir, {"skills": ["s"]})
        hooks = create_plugin(project_dir)

        output = SystemPromptOutput()
        await hooks.system_transform(SystemPromptInput(session_id=None), output)
        assert output.system == []

    @pytest.mark.asyncio
    async def test_uses_summaries(self, project_dir: Path):
        write_skill(project_dir, "s", "---\nname: s\nsummary: Short version\n---\nLong version")
        write_config(project_dir, {"skills": ["s"], "useSummaries": True})
        hooks = create_plugin(project_dir)

        output = SystemPromptOutput()
        await hooks.system_transform(SystemPromptInput(session_id="s1"), output)

        assert "Short version" in output.system[0]
        assert "Long version" not in output.system[0]
