"""
Identity resolution between Slack users and monday.com assignees.

monday.com person columns are free text, so a Slack user is identified there
by email (preferred) or display name. Both directions are cached for the
process lifetime:

- forward: Slack user id -> email / name
- reverse: normalized email / name -> Slack user id

Directory failures never propagate; they are logged and read as "no mapping".
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

import aiohttp
from slack_sdk.errors import SlackApiError

from ..cache.ttl_cache import TTLCache
from ..exceptions import DirectoryLookupError
from ..integrations.slack import DirectoryUser, SlackDirectory
from .classifier import normalize_identifier

logger = logging.getLogger(__name__)

# Failures mapped to "no mapping found"
LOOKUP_ERRORS = (DirectoryLookupError, SlackApiError, aiohttp.ClientError, asyncio.TimeoutError)


class DirectoryIndex:
    """
    Lookup tables over one directory enumeration.

    Only active human accounts are indexed. For each field the first user in
    enumeration order wins.
    """

    def __init__(self, users: Iterable[DirectoryUser]):
        self.by_email: Dict[str, str] = {}
        self.by_real_name: Dict[str, str] = {}
        self.by_display_name: Dict[str, str] = {}

        for user in users:
            if not user.is_human:
                continue
            if user.email:
                self.by_email.setdefault(normalize_identifier(user.email), user.id)
            if user.real_name:
                self.by_real_name.setdefault(normalize_identifier(user.real_name), user.id)
            if user.display_name:
                self.by_display_name.setdefault(normalize_identifier(user.display_name), user.id)

    def match(self, normalized: str) -> Optional[str]:
        """Email first, then real name, then display name."""
        return (
            self.by_email.get(normalized)
            or self.by_real_name.get(normalized)
            or self.by_display_name.get(normalized)
        )


class IdentityResolver:
    """
    Bidirectional Slack <-> monday.com identity mapping.

    Reverse lookups that miss the cache enumerate the whole directory; all
    callers that miss while an enumeration is running share it.
    """

    def __init__(self, directory: SlackDirectory, negative_ttl: int = 0):
        self.directory = directory
        self.negative_ttl = negative_ttl

        self._forward = TTLCache(default_ttl=None)
        self._reverse = TTLCache(default_ttl=None)
        self._negative = TTLCache(default_ttl=negative_ttl or None)

        self._inflight_scan: Optional[asyncio.Task] = None
        self.scan_count = 0

    # ==================== Slack id -> monday identifier ====================

    async def resolve_directory_identifier(self, slack_user_id: str) -> Optional[str]:
        """
        Get the monday.com identifier for a Slack user.

        Prefers the profile email; falls back to real name, then display name.
        A found email is also cached in the reverse direction.

        Args:
            slack_user_id: Slack user id (e.g. "U012ABC")

        Returns:
            Email or name, or None if the user can't be resolved
        """
        cached = self._forward.get(slack_user_id)
        if cached is not None:
            return cached

        try:
            user = await self.directory.get_user(slack_user_id)
        except LOOKUP_ERRORS as e:
            logger.error(f"Error fetching Slack profile for {slack_user_id}: {e}")
            return None

        if user is None:
            logger.warning(f"Slack user {slack_user_id} not found")
            return None

        if user.email and user.email_confirmed is not False:
            self._forward.set(slack_user_id, user.email)
            self._reverse.set(normalize_identifier(user.email), slack_user_id)
            logger.info(f"Mapped Slack user {slack_user_id} to email: {user.email}")
            return user.email

        name = user.real_name or user.display_name
        if name:
            self._forward.set(slack_user_id, name)
            logger.info(f"No email for Slack user {slack_user_id}, using name: {name}")
            return name

        logger.warning(f"No email or name found for Slack user {slack_user_id}")
        return None

    # ==================== monday identifier -> Slack id ====================

    async def resolve_messaging_user_id(self, identifier: str) -> Optional[str]:
        """
        Get the Slack user id for a monday.com email or name.

        Args:
            identifier: Email, real name or display name

        Returns:
            Slack user id, or None if no directory user matches
        """
        normalized = normalize_identifier(identifier)
        if not normalized:
            return None

        cached = self._reverse.get(normalized)
        if cached is not None:
            return cached
        if self._negative.has(normalized):
            return None

        index = await self._scan_directory()
        if index is None:
            return None

        user_id = index.match(normalized)
        self._remember(normalized, user_id)
        if user_id is None:
            logger.warning(f"No Slack user matches '{identifier}'")
        return user_id

    async def resolve_many_messaging_user_ids(self, identifiers: Iterable[str]) -> Dict[str, str]:
        """
        Batch reverse lookup with at most one directory enumeration.

        Args:
            identifiers: Emails and/or names

        Returns:
            Map of each resolvable identifier (as given) to its Slack user id;
            unresolvable identifiers are omitted
        """
        resolved: Dict[str, str] = {}
        unresolved: Dict[str, List[str]] = {}

        for identifier in identifiers:
            normalized = normalize_identifier(identifier)
            if not normalized:
                continue
            cached = self._reverse.get(normalized)
            if cached is not None:
                resolved[identifier] = cached
            elif not self._negative.has(normalized):
                unresolved.setdefault(normalized, []).append(identifier)

        if not unresolved:
            return resolved

        index = await self._scan_directory()
        if index is None:
            return resolved

        for normalized, originals in unresolved.items():
            user_id = index.match(normalized)
            self._remember(normalized, user_id)
            if user_id is None:
                logger.warning(f"No Slack user matches '{originals[0]}'")
                continue
            for identifier in originals:
                resolved[identifier] = user_id

        logger.info(f"Resolved {len(resolved)} identities ({len(unresolved)} needed a directory scan)")
        return resolved

    def clear_cache(self, slack_user_id: Optional[str] = None) -> None:
        """Drop one user's forward mapping, or every cached mapping."""
        if slack_user_id:
            self._forward.delete(slack_user_id)
            return
        self._forward.clear()
        self._reverse.clear()
        self._negative.clear()

    # ==================== Internals ====================

    def _remember(self, normalized: str, user_id: Optional[str]) -> None:
        if user_id is not None:
            self._reverse.set(normalized, user_id)
        elif self.negative_ttl > 0:
            self._negative.set(normalized, True)

    async def _scan_directory(self) -> Optional[DirectoryIndex]:
        """
        Enumerate the directory once, shared by concurrent callers.

        Returns:
            Index over active users, or None if the enumeration failed
        """
        if self._inflight_scan is None:
            scan = asyncio.ensure_future(self._enumerate())
            self._inflight_scan = scan
            scan.add_done_callback(self._clear_inflight_scan)

        try:
            return await asyncio.shield(self._inflight_scan)
        except LOOKUP_ERRORS as e:
            logger.error(f"Slack directory enumeration failed: {e}")
            return None

    async def _enumerate(self) -> DirectoryIndex:
        self.scan_count += 1
        users = await self.directory.list_users()
        return DirectoryIndex(users)

    def _clear_inflight_scan(self, scan: asyncio.Task) -> None:
        if self._inflight_scan is scan:
            self._inflight_scan = None
        if not scan.cancelled():
            # Retrieve so a failed scan nobody awaited isn't reported as unhandled
            scan.exception()
