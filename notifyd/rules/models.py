from pydantic import BaseModel, ConfigDict, Field

from notifyd.domain.entities import Urgency

MIN_IMAGE_SIZE = 32
MAX_IMAGE_SIZE = 256


class AppRule(BaseModel):
    """Per-application overrides, matched by desktop entry or app name."""

    model_config = ConfigDict(extra="ignore")

    app_name: str
    desktop_entry: str | None = None
    enabled: bool = True
    urgency_override: Urgency | None = None
    sound_enabled: bool = True
    timeout_override: int | None = Field(default=None, ge=0)


class NotificationRules(BaseModel):
    model_config = ConfigDict(extra="ignore")

    show_images: bool = True
    show_actions: bool = True
    enable_links: bool = True
    enable_animations: bool = True
    max_image_size: int = Field(default=128, ge=1)

    # Non-critical notifications are kept but not popped up
    do_not_disturb: bool = False

    # Milliseconds; None means no cap
    max_timeout_urgent: int | None = Field(default=None, ge=1)
    max_timeout_normal: int | None = Field(default=5000, ge=1)
    max_timeout_low: int | None = Field(default=3000, ge=1)

    app_rules: list[AppRule] = Field(default_factory=list)

    @property
    def effective_max_image_size(self) -> int:
        return max(MIN_IMAGE_SIZE, min(MAX_IMAGE_SIZE, self.max_image_size))

    def max_timeout_for(self, urgency: Urgency) -> int | None:
        if urgency is Urgency.CRITICAL:
            return self.max_timeout_urgent
        if urgency is Urgency.LOW:
            return self.max_timeout_low
        return self.max_timeout_normal

    def allows_popup(self, urgency: Urgency) -> bool:
        return not self.do_not_disturb or urgency is Urgency.CRITICAL

    def find_app_rule(self, app_name: str, desktop_entry: str | None = None) -> AppRule | None:
        """
        Find the rule for an application.

        A rule naming the notification's desktop entry wins; otherwise a rule
        for the app name that does not pin a desktop entry.
        """
        if desktop_entry:
            for rule in self.app_rules:
                if rule.desktop_entry == desktop_entry:
                    return rule
        for rule in self.app_rules:
            if rule.app_name == app_name and rule.desktop_entry is None:
                return rule
        return None

    def is_app_enabled(self, app_name: str, desktop_entry: str | None = None) -> bool:
        rule = self.find_app_rule(app_name, desktop_entry)
        return rule.enabled if rule else True

    def is_sound_enabled_for_app(self, app_name: str, desktop_entry: str | None = None) -> bool:
        rule = self.find_app_rule(app_name, desktop_entry)
        return rule.sound_enabled if rule else True
