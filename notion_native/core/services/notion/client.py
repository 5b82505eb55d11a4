"""Notion REST API client used as the migration block source."""

import asyncio
import logging

import httpx

from notion_native.core.interfaces import BlockSource
from notion_native.models.config import NotionConfig
from notion_native.models.domain import NotionPage, PageWithBlocks, RawBlock

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class NotionAPIError(Exception):
    """Exception raised when the Notion API returns an error."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotionClient(BlockSource):
    """Async Notion API client.

    Pages are fetched with ``GET /pages/{id}`` and block trees with
    paginated ``GET /blocks/{id}/children`` calls, recursing depth-first
    into blocks that have children up to ``config.max_depth`` levels.
    """

    def __init__(
        self,
        token: str | None,
        config: NotionConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or NotionConfig()
        self.token = token or self.config.token
        if not self.token:
            logger.warning("No Notion token provided. Notion requests will fail.")

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=self.config.timeout)

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Notion-Version": self.config.api_version,
            "Content-Type": "application/json",
        }

    @staticmethod
    def _retry_delay(response: httpx.Response | None, attempt: int) -> float:
        if response is not None:
            retry_after = response.headers.get("Retry-After")
            if retry_after:
                try:
                    return max(float(retry_after), 0.0)
                except ValueError:
                    logger.debug(f"Ignoring malformed Retry-After header: {retry_after}")
        return 1.0 * (2**attempt)

    async def _get(self, path: str, params: dict | None = None) -> dict:
        """GET a Notion API path, retrying rate limits and server errors."""
        url = f"{self.config.api_url}{path}"

        for attempt in range(self.config.max_retries + 1):
            try:
                response = await self.client.get(
                    url, params=params, headers=self._headers()
                )
            except httpx.TimeoutException as e:
                if attempt < self.config.max_retries:
                    delay = self._retry_delay(None, attempt)
                    logger.warning(
                        f"Timeout on {path}, retrying in {delay}s (attempt {attempt + 1}/{self.config.max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise NotionAPIError(f"Request timeout: {url}") from e
            except httpx.RequestError as e:
                raise NotionAPIError(f"Request failed: {e}") from e

            if (
                response.status_code in RETRYABLE_STATUS_CODES
                and attempt < self.config.max_retries
            ):
                delay = self._retry_delay(response, attempt)
                logger.warning(
                    f"Notion API returned {response.status_code} for {path}, retrying in {delay}s (attempt {attempt + 1}/{self.config.max_retries})"
                )
                await asyncio.sleep(delay)
                continue

            return self._handle_response(response)

        # Unreachable: the final attempt always returns or raises
        raise NotionAPIError(f"Request failed after retries: {url}")

    @staticmethod
    def _handle_response(response: httpx.Response) -> dict:
        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            details = error_data if isinstance(error_data, dict) else {}
            message = details.get("message", f"HTTP {response.status_code}")
            raise NotionAPIError(
                message, status_code=response.status_code, details=details
            )

        try:
            data = response.json()
        except ValueError as e:
            raise NotionAPIError(f"Failed to parse response: {e}") from e
        if not isinstance(data, dict):
            raise NotionAPIError("Unexpected response shape from Notion API")
        return data

    async def get_page(self, page_id: str) -> NotionPage:
        data = await self._get(f"/pages/{page_id}")
        return NotionPage(**data)

    async def list_block_children(self, block_id: str) -> list[dict]:
        """Fetch every direct child of a block, following pagination."""
        results: list[dict] = []
        params: dict = {"page_size": self.config.page_size}

        while True:
            data = await self._get(f"/blocks/{block_id}/children", params=params)
            results.extend(data.get("results", []))
            if not data.get("has_more") or not data.get("next_cursor"):
                break
            params = {"page_size": self.config.page_size, "start_cursor": data["next_cursor"]}

        return results

    async def get_blocks_recursive(self, block_id: str, depth: int = 0) -> list[RawBlock]:
        """Fetch a block tree flattened depth-first (parent before children).

        Blocks at ``depth`` are only fetched while ``depth < max_depth``.
        """
        if depth >= self.config.max_depth:
            logger.warning(
                f"Depth limit reached ({self.config.max_depth}) for block {block_id}"
            )
            return []

        flattened: list[RawBlock] = []
        for data in await self.list_block_children(block_id):
            block = RawBlock.from_notion(data, depth=depth)
            flattened.append(block)
            if block.has_children and depth + 1 < self.config.max_depth:
                flattened.extend(await self.get_blocks_recursive(block.id, depth + 1))

        return flattened

    async def fetch_page_with_blocks(self, page_id: str) -> PageWithBlocks:
        page = await self.get_page(page_id)
        blocks = await self.get_blocks_recursive(page_id)
        logger.debug(f"Fetched {len(blocks)} blocks for page {page_id}")
        return PageWithBlocks(page=page, blocks=blocks)


__all__ = ["NotionAPIError", "NotionClient", "RETRYABLE_STATUS_CODES"]
