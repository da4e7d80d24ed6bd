"""
Tests for notification rules and the rules loader.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from notifyd.domain.entities import Urgency
from notifyd.rules.loader import load_rules
from notifyd.rules.models import AppRule, NotificationRules


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent.parent


class TestDefaults:
    def test_defaults(self) -> None:
        rules = NotificationRules()
        assert rules.show_images and rules.show_actions
        assert rules.enable_links and rules.enable_animations
        assert rules.max_image_size == 128
        assert rules.max_timeout_urgent is None
        assert rules.max_timeout_normal == 5000
        assert rules.max_timeout_low == 3000
        assert rules.do_not_disturb is False
        assert rules.app_rules == []

    @pytest.mark.parametrize(("configured", "effective"), [(1, 32), (31, 32), (128, 128), (256, 256), (4096, 256)])
    def test_effective_image_size_clamped(self, configured: int, effective: int) -> None:
        assert NotificationRules(max_image_size=configured).effective_max_image_size == effective

    def test_image_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            NotificationRules(max_image_size=0)

    def test_max_timeout_for(self) -> None:
        rules = NotificationRules()
        assert rules.max_timeout_for(Urgency.LOW) == 3000
        assert rules.max_timeout_for(Urgency.NORMAL) == 5000
        assert rules.max_timeout_for(Urgency.CRITICAL) is None

    @pytest.mark.parametrize(
        ("dnd", "urgency", "allowed"),
        [
            (False, Urgency.LOW, True),
            (False, Urgency.NORMAL, True),
            (True, Urgency.LOW, False),
            (True, Urgency.NORMAL, False),
            (True, Urgency.CRITICAL, True),
        ],
    )
    def test_allows_popup(self, dnd: bool, urgency: Urgency, allowed: bool) -> None:
        assert NotificationRules(do_not_disturb=dnd).allows_popup(urgency) is allowed


class TestAppRules:
    @pytest.fixture
    def rules(self) -> NotificationRules:
        return NotificationRules(
            app_rules=[
                AppRule(app_name="Firefox", enabled=False),
                AppRule(app_name="Firefox", desktop_entry="firefox-nightly", sound_enabled=False),
                AppRule(app_name="Chat", urgency_override=Urgency.CRITICAL),
            ]
        )

    def test_desktop_entry_wins(self, rules: NotificationRules) -> None:
        rule = rules.find_app_rule("Firefox", "firefox-nightly")
        assert rule.desktop_entry == "firefox-nightly"
        assert rules.is_app_enabled("Firefox", "firefox-nightly")
        assert not rules.is_sound_enabled_for_app("Firefox", "firefox-nightly")

    def test_app_name_fallback(self, rules: NotificationRules) -> None:
        assert rules.find_app_rule("Firefox").enabled is False
        assert rules.find_app_rule("Firefox", "firefox").enabled is False
        assert not rules.is_app_enabled("Firefox")

    def test_unknown_app(self, rules: NotificationRules) -> None:
        assert rules.find_app_rule("Other") is None
        assert rules.is_app_enabled("Other")
        assert rules.is_sound_enabled_for_app("Other")


class TestLoader:
    def test_project_rules_file(self, project_root: Path) -> None:
        rules = load_rules(project_root / "rules.yaml")
        assert rules.max_image_size == 128
        assert rules.find_app_rule("Spotify", "spotify").sound_enabled is False
        assert rules.find_app_rule("backup-daemon").urgency_override is Urgency.LOW
        assert rules.do_not_disturb is False

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("show_images: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_rules(path)

    def test_schema_violation(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("max_image_size: -3\n")
        with pytest.raises(ValueError, match="validation failed"):
            load_rules(path)

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("")
        assert load_rules(path) == NotificationRules()

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("show_images: false\nlegacy_option: 3\n")
        rules = load_rules(path)
        assert rules.show_images is False

    def test_markdown_fenced_block(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.md"
        path.write_text("# Rules\n\n```yaml\nenable_links: false\nmax_timeout_low: 1000\n```\n\ntrailing notes\n")
        rules = load_rules(path)
        assert rules.enable_links is False
        assert rules.max_timeout_low == 1000
