"""
Partner API Client
Handles HTTP communication with the partner login and quote endpoints
"""

import json
import logging

import aiohttp

from shared.errors import AuthError, UpstreamError
from shared.models import QuoteResponse

logger = logging.getLogger(__name__)


class PartnerApiClient:
    """
    Client for the partner origination API

    Features:
    - Password-grant login returning a bearer token
    - Authenticated quote POST returning the raw status and body
    - Single attempt per call (callers decide whether to call again)
    """

    def __init__(self, timeout: float | None = None):
        """
        Initialize partner API client

        Args:
            timeout: Total request timeout in seconds (None keeps aiohttp's default)
        """
        self.timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None
        logger.debug(f"PartnerApiClient initialized (timeout={timeout})")

    def _session(self) -> aiohttp.ClientSession:
        connector = aiohttp.TCPConnector(force_close=True)
        if self.timeout is not None:
            return aiohttp.ClientSession(timeout=self.timeout, connector=connector)
        return aiohttp.ClientSession(connector=connector)

    async def request_password_token(self, login_url: str, username: str, password: str) -> str:
        """
        Log in with the password grant and return the access token

        Args:
            login_url: Token endpoint
            username: Login user name
            password: Login password

        Returns:
            The access_token string

        Raises:
            AuthError: If the endpoint is unreachable, rejects the login,
                or returns a body without an access_token
        """
        payload = {
            "grant_type": "password",
            "username": username,
            "password": password,
        }

        logger.info(f"Requesting password-grant token at {login_url}")

        try:
            async with self._session() as session:
                async with session.post(
                    login_url,
                    data=payload,
                    headers={
                        "Content-Type": "application/x-www-form-urlencoded",
                        "Cache-Control": "no-cache",
                    }
                ) as response:
                    status = response.status
                    response_body = await response.text()
        except (aiohttp.ClientError, TimeoutError) as e:
            raise AuthError(f"Login endpoint unreachable: {e}") from e

        if not 200 <= status < 300:
            raise AuthError(f"Login failed with status code: {status}")

        try:
            response_data = json.loads(response_body)
        except ValueError as e:
            raise AuthError("Login response is not valid JSON") from e

        token = response_data.get("access_token") if isinstance(response_data, dict) else None
        if not token:
            raise AuthError("Login response does not contain an access_token")

        logger.info(f"Token request successful (status={status})")
        return str(token)

    async def post_quote(self, quote_url: str, token: str, body_content: str) -> QuoteResponse:
        """
        POST a quote request with the bearer token

        Args:
            quote_url: Quote endpoint
            token: Bearer token
            body_content: JSON request body

        Returns:
            QuoteResponse with the HTTP status and body text

        Raises:
            UpstreamError: If the endpoint cannot be reached
        """
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {token}",
            "Cache-Control": "no-cache",
            "Content-Type": "application/json; charset=utf-8",
        }

        try:
            async with self._session() as session:
                async with session.post(
                    quote_url,
                    data=body_content.encode("utf-8"),
                    headers=headers
                ) as response:
                    status = response.status
                    response_body = await response.text()
        except (aiohttp.ClientError, TimeoutError) as e:
            raise UpstreamError(f"Quote endpoint unreachable: {e}") from e

        logger.info(f"Quote service responded with status code {status}")
        return QuoteResponse(status=status, body=response_body)
