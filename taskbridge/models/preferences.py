"""Per-user notification preferences."""

from pydantic import BaseModel


class UserPreferences(BaseModel):
    """Notification preferences for a Slack user."""
    notifications: bool = True
    summary_time: str = "09:00"
    timezone: str = "America/Los_Angeles"
