"""Tests for the Claude Agent SDK hook bridge."""

from pathlib import Path

import pytest
from conftest import simple_skill, write_config, write_skill

from preload_skills import create_plugin
from preload_skills.adapters.claude_sdk import (
    FILE_TOOL_MATCHER,
    ClaudeSDKHookBridge,
    translate_tool_input,
)
from preload_skills.hooks import MESSAGE_SEPARATOR
from preload_skills.hooks.lifecycle import COMPACTION_HEADER


def context_of(result) -> str:
    return result["hookSpecificOutput"]["additionalContext"]


def make_bridge(project_dir: Path, **config) -> ClaudeSDKHookBridge:
    write_skill(project_dir, "base", simple_skill("base", body="Base rules"))
    write_skill(project_dir, "ts", simple_skill("ts", body="Typed rules"))
    data = {"skills": ["base"], "fileTypeSkills": {".ts": ["ts"]}}
    data.update(config)
    write_config(project_dir, data)
    return ClaudeSDKHookBridge(create_plugin(project_dir))


async def prompt(bridge: ClaudeSDKHookBridge, text: str, session_id: str = "s1"):
    return await bridge.on_user_prompt_submit(
        {"session_id": session_id, "prompt": text, "hook_event_name": "UserPromptSubmit"},
        None,
        None,
    )


async def read_file(bridge: ClaudeSDKHookBridge, path: str, tool_use_id: str, session_id: str = "s1"):
    data = {"session_id": session_id, "tool_name": "Read", "tool_input": {"file_path": path}}
    await bridge.on_pre_tool_use(data, tool_use_id, None)
    await bridge.on_post_tool_use(data, tool_use_id, None)


class TestTranslateToolInput:
    def test_renames_file_path(self):
        assert translate_tool_input({"file_path": "a.ts", "limit": 5}) == {"filePath": "a.ts", "limit": 5}

    def test_keeps_other_keys(self):
        assert translate_tool_input({"path": "src", "pattern": "*.ts"}) == {"path": "src", "pattern": "*.ts"}

    def test_non_dict(self):
        assert translate_tool_input(None) == {}


class TestSystemPromptMode:
    """Instruction-channel injection delivered as additional context."""

    @pytest.mark.asyncio
    async def test_first_prompt_gets_skills(self, project_dir: Path):
        bridge = make_bridge(project_dir)
        result = await prompt(bridge, "hello")

        assert result["hookSpecificOutput"]["hookEventName"] == "UserPromptSubmit"
        assert "Base rules" in context_of(result)

    @pytest.mark.asyncio
    async def test_unchanged_block_not_repeated(self, project_dir: Path):
        bridge = make_bridge(project_dir)
        await prompt(bridge, "hello")
        assert await prompt(bridge, "again") == {}

    @pytest.mark.asyncio
    async def test_triggered_skill_on_next_prompt(self, project_dir: Path):
        bridge = make_bridge(project_dir)
        await prompt(bridge, "hello")

        await read_file(bridge, "src/index.ts", "toolu_1")
        result = await prompt(bridge, "continue")

        assert "Typed rules" in context_of(result)

    @pytest.mark.asyncio
    async def test_compaction_context_carried_to_next_prompt(self, project_dir: Path):
        bridge = make_bridge(project_dir)
        await prompt(bridge, "hello")

        await bridge.on_pre_compact({"session_id": "s1", "trigger": "auto"}, None, None)
        result = await prompt(bridge, "after compaction")

        text = context_of(result)
        assert text.startswith(COMPACTION_HEADER)
        assert "Base rules" in text

    @pytest.mark.asyncio
    async def test_missing_session_id(self, project_dir: Path):
        bridge = make_bridge(project_dir)
        assert await bridge.on_user_prompt_submit({"prompt": "hi"}, None, None) == {}


class TestChatMessageMode:
    """User-message injection delivered as additional context."""

    @pytest.mark.asyncio
    async def test_prefix_without_separator(self, project_dir: Path):
        bridge = make_bridge(project_dir, injectionMethod="chatMessage")
        result = await prompt(bridge, "hello")

        text = context_of(result)
        assert text.startswith("<preloaded-skills>")
        assert "Base rules" in text
        assert MESSAGE_SEPARATOR not in text
        assert "hello" not in text

    @pytest.mark.asyncio
    async def test_second_prompt_empty(self, project_dir: Path):
        bridge = make_bridge(project_dir, injectionMethod="chatMessage")
        await prompt(bridge, "hello")
        assert await prompt(bridge, "again") == {}


class TestToolsAndSessions:
    @pytest.mark.asyncio
    async def test_unmapped_tool_ignored(self, project_dir: Path):
        bridge = make_bridge(project_dir)
        data = {"session_id": "s1", "tool_name": "Bash", "tool_input": {"command": "ls a.ts"}}
        assert await bridge.on_pre_tool_use(data, "toolu_1", None) == {}
        assert await bridge.on_post_tool_use(data, "toolu_1", None) == {}
        assert bridge.hooks.context.session_store.get_pending_skills("s1") == []

    @pytest.mark.asyncio
    async def test_close_session(self, project_dir: Path):
        bridge = make_bridge(project_dir)
        await prompt(bridge, "hello")
        store = bridge.hooks.context.session_store
        assert store.has_session("s1")

        await bridge.close_session("s1")

        assert not store.has_session("s1")
        # A new session with the same id gets the skills again
        assert "Base rules" in context_of(await prompt(bridge, "hello"))

    def test_hook_matchers(self, project_dir: Path):
        bridge = make_bridge(project_dir)
        matchers = bridge.hook_matchers()

        assert set(matchers) == {"UserPromptSubmit", "PreToolUse", "PostToolUse", "PreCompact"}
        assert matchers["PreToolUse"][0].matcher == FILE_TOOL_MATCHER
        assert matchers["UserPromptSubmit"][0].hooks == [bridge.on_user_prompt_submit]
