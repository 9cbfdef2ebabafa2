"""
monday.com integration (GraphQL over HTTP).

Supports:
- Board catalog listing with transparent pagination
- Batched item retrieval with column schema
- Item create/update/delete and item comments (updates)
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from config.settings import Settings, get_settings
from ..exceptions import MondayAPIError
from ..models.board import Board

logger = logging.getLogger(__name__)


BOARDS_QUERY = """
query ($limit: Int, $page: Int) {
  boards(limit: $limit, page: $page) {
    id
    name
    state
    board_kind
  }
}
"""

BOARDS_WITH_ITEMS_QUERY = """
query ($boardIds: [ID!], $limit: Int) {
  boards(ids: $boardIds) {
    id
    name
    state
    columns {
      id
      title
      type
    }
    items_page(limit: $limit) {
      items {
        id
        name
        state
        column_values {
          id
          type
          text
          value
        }
        created_at
        updated_at
      }
    }
  }
}
"""

ITEM_QUERY = """
query ($itemIds: [ID!]) {
  items(ids: $itemIds) {
    id
    name
    state
    created_at
    updated_at
    board {
      id
      name
      state
      columns {
        id
        title
        type
      }
    }
    column_values {
      id
      type
      text
      value
    }
  }
}
"""

CREATE_ITEM_MUTATION = """
mutation ($boardId: ID!, $itemName: String!, $columnValues: JSON) {
  create_item(board_id: $boardId, item_name: $itemName, column_values: $columnValues) {
    id
    name
  }
}
"""

CHANGE_COLUMN_VALUES_MUTATION = """
mutation ($boardId: ID!, $itemId: ID!, $columnValues: JSON!) {
  change_multiple_column_values(board_id: $boardId, item_id: $itemId, column_values: $columnValues) {
    id
    name
  }
}
"""

DELETE_ITEM_MUTATION = """
mutation ($itemId: ID!) {
  delete_item(item_id: $itemId) {
    id
  }
}
"""

CREATE_UPDATE_MUTATION = """
mutation ($itemId: ID!, $body: String!) {
  create_update(item_id: $itemId, body: $body) {
    id
    body
  }
}
"""


class MondayClient:
    """
    Async client for the monday.com GraphQL API.

    Every failure (network error, timeout, non-2xx status, malformed body,
    GraphQL errors) is logged and raised as MondayAPIError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.api_key = api_key if api_key is not None else settings.monday_api_key
        self.api_url = api_url or settings.monday_api_url
        self.timeout = timeout or settings.monday_request_timeout
        self.page_size = settings.board_page_size

        if not self.api_key:
            logger.warning("MONDAY_API_KEY not set - monday.com requests will fail")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": self.api_key,
            "Content-Type": "application/json",
        }

    async def query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL query or mutation.

        Args:
            query: GraphQL document
            variables: Query variables

        Returns:
            The response's "data" object

        Raises:
            MondayAPIError: On any transport or API failure
        """
        payload = {"query": query, "variables": variables or {}}
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.api_url, json=payload, headers=self._headers()) as response:
                    if response.status >= 400:
                        error = await response.text()
                        logger.error(f"monday.com API error: {response.status} - {error[:500]}")
                        raise MondayAPIError(
                            f"monday.com request failed with status {response.status}",
                            status_code=response.status,
                        )
                    try:
                        body = await response.json(content_type=None)
                    except (json.JSONDecodeError, aiohttp.ContentTypeError) as e:
                        logger.error(f"monday.com returned malformed JSON: {e}")
                        raise MondayAPIError(
                            "monday.com returned a malformed response",
                            status_code=response.status,
                        ) from e
        except asyncio.TimeoutError as e:
            logger.error(f"monday.com request timed out after {self.timeout}s")
            raise MondayAPIError("monday.com request timed out") from e
        except aiohttp.ClientError as e:
            logger.error(f"monday.com transport error: {e}")
            raise MondayAPIError(f"monday.com transport error: {e}") from e

        if not isinstance(body, dict):
            raise MondayAPIError("monday.com returned a malformed response", status_code=response.status)

        if body.get("errors"):
            logger.error(f"monday.com GraphQL errors: {body['errors']}")
            raise MondayAPIError(
                json.dumps(body["errors"]),
                status_code=response.status,
                errors=body["errors"],
            )

        return body.get("data") or {}

    async def get_all_boards(self, page_size: Optional[int] = None) -> List[Board]:
        """
        Fetch the full board catalog, following pages until a short page.

        Returns:
            All boards visible to the API key, in catalog order
        """
        page_size = page_size or self.page_size
        boards: List[Board] = []
        page = 1

        while True:
            data = await self.query(BOARDS_QUERY, {"limit": page_size, "page": page})
            page_boards = data.get("boards") or []
            boards.extend(Board.model_validate(b) for b in page_boards)

            if len(page_boards) < page_size:
                break
            page += 1

        logger.debug(f"Fetched {len(boards)} boards over {page} page(s)")
        return boards

    async def get_boards_with_items(self, board_ids: List[str], limit: int = 50) -> List[Board]:
        """
        Fetch items and column schema for several boards in one request.

        Args:
            board_ids: Board IDs to fetch
            limit: Maximum items per board

        Returns:
            Boards with columns and items populated
        """
        data = await self.query(BOARDS_WITH_ITEMS_QUERY, {"boardIds": list(board_ids), "limit": limit})
        return [Board.model_validate(b) for b in data.get("boards") or []]

    async def get_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single item with its board's column schema, or None if missing."""
        data = await self.query(ITEM_QUERY, {"itemIds": [item_id]})
        items = data.get("items") or []
        return items[0] if items else None

    async def create_item(
        self,
        board_id: str,
        item_name: str,
        column_values: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Create an item on a board."""
        data = await self.query(CREATE_ITEM_MUTATION, {
            "boardId": board_id,
            "itemName": item_name,
            "columnValues": json.dumps(column_values or {}),
        })
        logger.info(f"Created item on board {board_id}: {item_name}")
        return data.get("create_item") or {}

    async def change_column_values(
        self,
        board_id: str,
        item_id: str,
        column_values: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Update several column values of an item."""
        data = await self.query(CHANGE_COLUMN_VALUES_MUTATION, {
            "boardId": board_id,
            "itemId": item_id,
            "columnValues": json.dumps(column_values),
        })
        logger.info(f"Updated item {item_id} on board {board_id}")
        return data.get("change_multiple_column_values") or {}

    async def delete_item(self, item_id: str) -> Dict[str, Any]:
        """Delete an item."""
        data = await self.query(DELETE_ITEM_MUTATION, {"itemId": item_id})
        logger.info(f"Deleted item {item_id}")
        return data.get("delete_item") or {}

    async def create_update(self, item_id: str, body: str) -> Dict[str, Any]:
        """Post a comment (update) on an item."""
        data = await self.query(CREATE_UPDATE_MUTATION, {"itemId": item_id, "body": body})
        return data.get("create_update") or {}
