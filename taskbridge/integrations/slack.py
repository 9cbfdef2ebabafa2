"""
Slack integration: user directory lookups and message delivery.

Wraps slack_sdk's AsyncWebClient. Directory failures surface as
DirectoryLookupError and delivery failures as DeliveryError so callers can
decide how to degrade.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from config.settings import Settings, get_settings
from ..exceptions import DeliveryError, DirectoryLookupError

logger = logging.getLogger(__name__)

SLACKBOT_USER_ID = "USLACKBOT"


@dataclass
class DirectoryUser:
    """A member of the Slack workspace directory."""
    id: str
    email: Optional[str] = None
    real_name: Optional[str] = None
    display_name: Optional[str] = None
    is_bot: bool = False
    deleted: bool = False
    email_confirmed: Optional[bool] = None

    @classmethod
    def from_slack(cls, member: Dict[str, Any]) -> "DirectoryUser":
        """Build from a Slack users.info / users.list member payload."""
        profile = member.get("profile") or {}
        return cls(
            id=member.get("id", ""),
            email=profile.get("email") or None,
            real_name=member.get("real_name") or profile.get("real_name") or None,
            display_name=profile.get("display_name") or None,
            is_bot=bool(member.get("is_bot")) or member.get("id") == SLACKBOT_USER_ID,
            deleted=bool(member.get("deleted")),
            email_confirmed=member.get("is_email_confirmed"),
        )

    @property
    def is_human(self) -> bool:
        """Active, non-bot account."""
        return not self.is_bot and not self.deleted


class SlackDirectory:
    """
    Slack user directory and messaging.

    Primary use: map Slack users to their email / name, and deliver
    summaries by direct message.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        client: Optional[AsyncWebClient] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.page_size = 200
        if client is not None:
            self.client = client
        else:
            token = token if token is not None else settings.slack_bot_token
            if not token:
                logger.warning("SLACK_BOT_TOKEN not set - Slack lookups will fail")
            self.client = AsyncWebClient(token=token or None, timeout=settings.slack_request_timeout)

    async def get_user(self, user_id: str) -> Optional[DirectoryUser]:
        """
        Fetch one user's profile.

        Returns:
            DirectoryUser, or None if Slack reports no such user

        Raises:
            DirectoryLookupError: On API or transport failure
        """
        try:
            response = await self.client.users_info(user=user_id)
        except SlackApiError as e:
            if e.response.get("error") == "user_not_found":
                return None
            raise DirectoryLookupError(f"users.info failed for {user_id}: {e.response.get('error')}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DirectoryLookupError(f"users.info failed for {user_id}: {e}") from e

        member = response.get("user")
        return DirectoryUser.from_slack(member) if member else None

    async def list_users(self) -> List[DirectoryUser]:
        """
        Enumerate the whole workspace directory, following cursors.

        Returns:
            Every member in directory order (bots and deleted accounts included)

        Raises:
            DirectoryLookupError: On API or transport failure
        """
        users: List[DirectoryUser] = []
        cursor: Optional[str] = None

        try:
            while True:
                kwargs: Dict[str, Any] = {"limit": self.page_size}
                if cursor:
                    kwargs["cursor"] = cursor
                response = await self.client.users_list(**kwargs)
                users.extend(DirectoryUser.from_slack(m) for m in response.get("members") or [])

                cursor = (response.get("response_metadata") or {}).get("next_cursor")
                if not cursor:
                    break
        except SlackApiError as e:
            raise DirectoryLookupError(f"users.list failed: {e.response.get('error')}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DirectoryLookupError(f"users.list failed: {e}") from e

        logger.info(f"Enumerated {len(users)} Slack directory members")
        return users

    async def post_message(
        self,
        channel: str,
        text: str,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> Optional[str]:
        """
        Post a message to a channel or user (a user id opens a DM).

        Returns:
            Message timestamp

        Raises:
            DeliveryError: If Slack rejects the message or the request fails
        """
        try:
            response = await self.client.chat_postMessage(channel=channel, text=text, blocks=blocks)
        except SlackApiError as e:
            raise DeliveryError(
                f"chat.postMessage failed: {e.response.get('error')}", recipient=channel
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DeliveryError(f"chat.postMessage failed: {e}", recipient=channel) from e

        return response.get("ts")
