"""Bungie.net Platform API HTTP client with error mapping and authentication."""

import asyncio
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import httpx
import structlog
from pydantic import BaseModel, ValidationError as PydanticValidationError

from sparos.core.config import get_global_settings
from .constants import MembershipType, PlatformErrorCode, THROTTLE_ERROR_CODES
from .endpoints import BungieAPIEndpoints
from .errors import (
    AuthenticationError,
    BadRequestError,
    BungieAPIError,
    EndpointNotFoundError,
    ForbiddenError,
    RateLimitError,
    ServiceUnavailableError,
)
from .models import (
    AccountStatsDTO,
    BungieResponse,
    UserInfoCardDTO,
    UserSearchResponseDTO,
)

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class BungieAPIClient:
    """Bungie API client.

    Every request is a single attempt: failures are mapped to a
    ``BungieAPIError`` subclass and raised to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Bungie API client.

        Args:
            api_key: Bungie API key (uses config if None)
            base_url: Platform base URL (uses config if None)
            timeout: Read timeout in seconds (uses config if None)
            transport: Optional httpx transport, used by tests to fake Bungie
        """
        settings = get_global_settings()
        self.api_key = api_key if api_key is not None else settings.bungie_api_key
        self.base_url = (base_url or settings.bungie_api_base_url).rstrip("/")
        self.timeout = timeout or settings.bungie_request_timeout
        self.endpoints = BungieAPIEndpoints()

        self._transport = transport
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    headers = {
                        "X-API-Key": self.api_key,
                        "Content-Type": "application/json",
                        "User-Agent": "Sparos/1.0",
                    }

                    timeout = httpx.Timeout(
                        connect=5.0, read=self.timeout, write=10.0, pool=30.0
                    )

                    self.session = httpx.AsyncClient(
                        base_url=self.base_url,
                        headers=headers,
                        timeout=timeout,
                        transport=self._transport,
                    )

                    logger.info(
                        "Bungie API client session started",
                        base_url=self.base_url,
                        api_key_prefix="[REDACTED]" if self.api_key else "None",
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()
            logger.info("Bungie API client session closed")

    @staticmethod
    def _safe_json(response: httpx.Response) -> Dict[str, Any]:
        """Parse a response body, returning an empty dict for non-JSON bodies."""
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _parse_retry_after(value: Optional[str]) -> Optional[float]:
        """Read a Retry-After header given as delta-seconds or an HTTP date."""
        if not value:
            return None
        try:
            return max(0.0, float(value))
        except ValueError:
            pass
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())

    @staticmethod
    def _parse_envelope(model: Type[M], data: Dict[str, Any], path: str) -> M:
        """Validate a response envelope, mapping shape errors to BungieAPIError."""
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(
                "Bungie API response failed validation",
                path=path,
                error_count=e.error_count(),
            )
            raise BungieAPIError(
                "Bungie API returned an unexpected response shape",
                status_code=200,
                response_data=data,
            ) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise specific BungieAPIError subclass for HTTP error statuses."""
        status = response.status_code
        if status < 400:
            return

        data = self._safe_json(response)
        message = data.get("Message") or response.reason_phrase or f"HTTP {status}"
        kwargs: Dict[str, Any] = {
            "status_code": status,
            "error_code": data.get("ErrorCode"),
            "error_status": data.get("ErrorStatus"),
            "response_data": data,
        }

        if status == 400:
            raise BadRequestError(message, **kwargs)
        elif status == 401:
            raise AuthenticationError(message, **kwargs)
        elif status == 403:
            raise ForbiddenError(message, **kwargs)
        elif status == 404:
            raise EndpointNotFoundError(message, **kwargs)
        elif status == 429:
            raise RateLimitError(
                message,
                retry_after=self._parse_retry_after(
                    response.headers.get("Retry-After")
                ),
                **kwargs,
            )
        elif status == 503:
            raise ServiceUnavailableError(message, **kwargs)
        raise BungieAPIError(message, **kwargs)

    @staticmethod
    def _check_envelope(data: Dict[str, Any], status_code: int) -> None:
        """Raise when a 200 response carries a non-success ``ErrorCode``."""
        error_code = data.get("ErrorCode")
        if error_code is None or error_code == PlatformErrorCode.SUCCESS:
            return

        message = data.get("Message") or "Bungie API returned an error."
        kwargs: Dict[str, Any] = {
            "status_code": status_code,
            "error_code": error_code,
            "error_status": data.get("ErrorStatus"),
            "response_data": data,
        }
        if error_code in THROTTLE_ERROR_CODES:
            raise RateLimitError(
                message, retry_after=data.get("ThrottleSeconds") or None, **kwargs
            )
        raise BungieAPIError(message, **kwargs)

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make one request against the Platform API.

        Args:
            path: Endpoint path relative to the base URL
            method: HTTP method
            body: JSON request body

        Returns:
            The parsed response envelope

        Raises:
            BungieAPIError: For transport failures, HTTP errors and
                non-success envelopes
        """
        await self.start_session()

        if self.session is None:
            raise BungieAPIError("Session not initialized")

        logger.debug("Bungie API request", method=method, path=path)

        try:
            response = await self.session.request(method, path, json=body)
        except (httpx.RequestError, asyncio.TimeoutError) as e:
            logger.warning(
                "Bungie API request failed",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise BungieAPIError(f"Request failed: {str(e)}") from e

        try:
            self._raise_for_status(response)
            data = self._safe_json(response)
            if not data:
                raise BungieAPIError(
                    "Bungie API returned an unreadable response",
                    status_code=response.status_code,
                )
            self._check_envelope(data, response.status_code)
            return data
        finally:
            await response.aclose()

    # Destiny2 endpoints
    async def search_destiny_player(self, display_name: str) -> List[UserInfoCardDTO]:
        """Search Destiny players by full Bungie name across all platforms."""
        path = self.endpoints.search_destiny_player(display_name)
        data = await self.request(path)
        envelope = self._parse_envelope(
            BungieResponse[List[UserInfoCardDTO]], data, path
        )
        return envelope.response or []

    async def get_account_stats(
        self,
        membership_type: Union[int, MembershipType],
        membership_id: str,
    ) -> AccountStatsDTO:
        """Get historical account stats; an empty dict means no game data."""
        path = self.endpoints.account_stats(membership_type, membership_id)
        data = await self.request(path)
        stats = data.get("Response")
        return stats if isinstance(stats, dict) else {}

    # User endpoints
    async def search_by_global_name_prefix(
        self, prefix: str, page: int = 0
    ) -> UserSearchResponseDTO:
        """Get one page of users whose global display name starts with prefix."""
        path = self.endpoints.search_by_global_name_prefix(page)
        data = await self.request(path, "POST", {"displayNamePrefix": prefix})
        envelope = self._parse_envelope(
            BungieResponse[UserSearchResponseDTO], data, path
        )
        return envelope.response or UserSearchResponseDTO()
