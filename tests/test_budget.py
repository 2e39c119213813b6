"""Tests for token budgeting."""

from pathlib import Path

import pytest
from conftest import simple_skill, write_skill

from preload_skills.core.config import PreloadConfig, TriggerType
from preload_skills.core.paths import get_analytics_file
from preload_skills.session.analytics import AnalyticsRecorder
from preload_skills.skills.budget import (
    BudgetAllocator,
    BudgetStats,
    calculate_total_tokens,
    filter_skills_by_token_budget,
)
from preload_skills.skills.loader import SkillStore
from preload_skills.skills.models import Skill


def make_skill(name: str, tokens: int) -> Skill:
    return Skill(
        name=name,
        description="",
        content="x" * (tokens * 4),
        file_path=Path(f"/skills/{name}/SKILL.md"),
        token_count=tokens,
    )


class TestFilterByBudget:
    """Tests for filter_skills_by_token_budget()."""

    def test_keeps_everything_that_fits(self):
        skills = [make_skill("a", 10), make_skill("b", 20)]
        assert filter_skills_by_token_budget(skills, 30) == skills

    def test_stops_at_first_overflow(self):
        """A later small skill is dropped after the first overflow."""
        skills = [make_skill("a", 10), make_skill("big", 50), make_skill("small", 1)]
        kept = filter_skills_by_token_budget(skills, 20)
        assert [s.name for s in kept] == ["a"]

    def test_zero_budget(self):
        assert filter_skills_by_token_budget([make_skill("a", 1)], 0) == []

    def test_negative_budget(self):
        assert filter_skills_by_token_budget([make_skill("a", 1)], -10) == []

    def test_total_tokens(self):
        assert calculate_total_tokens([make_skill("a", 3), make_skill("b", 4)]) == 7


class TestBudgetStats:
    """Tests for BudgetStats."""

    def test_uncapped(self):
        stats = BudgetStats(tokens_used=120, max_tokens=None)
        assert stats.remaining is None
        assert stats.percentage is None
        assert stats.format_summary() == "Token budget: 120 used"

    def test_capped(self):
        stats = BudgetStats(tokens_used=1200, max_tokens=4000)
        assert stats.remaining == 2800
        assert stats.percentage == 30.0
        assert stats.format_summary() == "Token budget: 1200 of 4000 used (30.0%)"

    def test_percentage_bounded(self):
        stats = BudgetStats(tokens_used=5000, max_tokens=4000)
        assert stats.remaining == 0
        assert stats.percentage == 100.0

    def test_to_dict(self):
        assert BudgetStats(tokens_used=1, max_tokens=3).to_dict() == {
            "tokens_used": 1,
            "max_tokens": 3,
            "remaining": 2,
            "percentage": 33.3,
        }


@pytest.fixture
def store(project_dir: Path) -> SkillStore:
    # 40 chars of body plus the header
    for name in ("a", "b", "c"):
        write_skill(project_dir, name, simple_skill(name, body="y" * 40))
    return SkillStore(project_dir)


class TestBudgetAllocator:
    """Tests for BudgetAllocator.load_with_budget()."""

    def test_uncapped_loads_everything(self, store: SkillStore):
        allocator = BudgetAllocator(PreloadConfig(), store)
        result = allocator.load_with_budget(["a", "missing", "b"], 0, TriggerType.INITIAL)
        assert [s.name for s in result.skills] == ["a", "b"]
        assert result.tokens_used == sum(s.token_count for s in result.skills)

    def test_respects_remaining_budget(self, store: SkillStore):
        per_skill = store.load("a").token_count
        config = PreloadConfig(max_tokens=per_skill * 3)
        allocator = BudgetAllocator(config, store)

        result = allocator.load_with_budget(["a", "b", "c"], per_skill, TriggerType.FILE_TYPE)

        assert [s.name for s in result.skills] == ["a", "b"]
        assert result.tokens_used == per_skill * 2

    def test_exhausted_budget(self, store: SkillStore):
        config = PreloadConfig(max_tokens=10)
        allocator = BudgetAllocator(config, store)
        result = allocator.load_with_budget(["a"], 10, TriggerType.PATH)
        assert result.skills == []
        assert result.tokens_used == 0

    def test_expands_groups(self, store: SkillStore):
        config = PreloadConfig(groups={"pair": ["b", "a"]})
        allocator = BudgetAllocator(config, store)
        result = allocator.load_with_budget(["@pair", "c"], 0, TriggerType.AGENT)
        assert [s.name for s in result.skills] == ["b", "a", "c"]

    def test_tracks_analytics_for_session(self, store: SkillStore, project_dir: Path):
        analytics = AnalyticsRecorder(get_analytics_file(project_dir), enabled=True)
        allocator = BudgetAllocator(PreloadConfig(), store, analytics)

        allocator.load_with_budget(["a", "b"], 0, TriggerType.CONTENT, session_id="s1")

        usage = analytics.get("s1").skill_usage
        assert usage["a"].load_count == 1
        assert usage["b"].load_count == 1
        assert usage["a"].trigger_type is TriggerType.CONTENT

    def test_excluded_skills_not_charged(self, store: SkillStore, project_dir: Path):
        """Excluded names neither load nor use budget, so later skills still fit."""
        per_skill = store.load("a").token_count
        analytics = AnalyticsRecorder(get_analytics_file(project_dir), enabled=True)
        allocator = BudgetAllocator(PreloadConfig(max_tokens=per_skill * 2), store, analytics)

        result = allocator.load_with_budget(
            ["a", "b"], per_skill, TriggerType.CONTENT, session_id="s1", exclude=["a"]
        )

        assert [s.name for s in result.skills] == ["b"]
        assert "a" not in analytics.get("s1").skill_usage

    def test_no_analytics_without_session(self, store: SkillStore, project_dir: Path):
        analytics = AnalyticsRecorder(get_analytics_file(project_dir), enabled=True)
        allocator = BudgetAllocator(PreloadConfig(), store, analytics)
        allocator.load_with_budget(["a"], 0, TriggerType.INITIAL)
        assert analytics.to_dict() == {}

    def test_budget_stats(self, store: SkillStore):
        allocator = BudgetAllocator(PreloadConfig(max_tokens=100), store)
        assert allocator.budget_stats(25).percentage == 25.0
