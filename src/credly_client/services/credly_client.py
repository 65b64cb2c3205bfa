import base64
import logging
from collections.abc import Callable, Iterable
from contextlib import closing
from dataclasses import dataclass, field
from datetime import datetime
from typing import TypeVar

import httpx
from pydantic import ValidationError

from credly_client.errors import APIRequestError, BadgeAlreadyIssuedError, DecodeError
from credly_client.models.credly import BadgeInfo, BadgeTemplate, Envelope, IssueBadgeRequest
from credly_client.services.filters import BadgeFilter

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.credly.com/v1"
DEFAULT_TIMEOUT = 30.0
JSON_MEDIA_TYPE = "application/json"
ISSUED_AT_FORMAT = "%Y-%m-%d %H:%M:%S %z"

T = TypeVar("T")


def encode_token(api_token: str) -> str:
    return base64.b64encode(f"{api_token}|".encode()).decode("ascii")


def local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class CredlyClient:
    auth_token: str = field(repr=False)
    organization_id: str
    http_client: httpx.Client
    base_url: str = DEFAULT_BASE_URL
    clock: Callable[[], datetime] = field(default=local_now, repr=False, compare=False)

    @classmethod
    def create(
        cls,
        api_token: str,
        organization_id: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
        clock: Callable[[], datetime] = local_now,
    ) -> "CredlyClient":
        if http_client is None:
            http_client = httpx.Client(timeout=timeout)
        return cls(
            auth_token=encode_token(api_token),
            organization_id=organization_id,
            http_client=http_client,
            base_url=base_url.rstrip("/"),
            clock=clock,
        )

    def __enter__(self) -> "CredlyClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.http_client.close()

    def do(self, request: httpx.Request) -> httpx.Response:
        request.headers["Authorization"] = f"Basic {self.auth_token}"
        request.headers["Content-Type"] = JSON_MEDIA_TYPE
        request.headers["Accept"] = JSON_MEDIA_TYPE
        logger.debug("%s %s", request.method, request.url)
        response = self.http_client.send(request)
        logger.debug("%s %s -> %s", request.method, request.url, response.status_code)
        return response

    def _url(self, path: str, query: str | None = None) -> str:
        url = f"{self.base_url}/organizations/{self.organization_id}/{path.lstrip('/')}"
        if query:
            url = f"{url}?{query}"
        return url

    def _fetch(self, operation: str, url: str, model: type[Envelope[T]]) -> T:
        with closing(self.do(httpx.Request("GET", url))) as response:
            if response.status_code != httpx.codes.OK:
                logger.warning("%s failed with status %s", operation, response.status_code)
                raise APIRequestError(operation, response.status_code, response.text)
            return _decode(operation, response, model)

    def _issued_at(self) -> str:
        now = self.clock()
        if now.tzinfo is None:
            # naive clocks are local time
            now = now.astimezone()
        return now.strftime(ISSUED_AT_FORMAT)

    def issue_badge(self, template_id: str, email: str, first_name: str, last_name: str) -> BadgeInfo:
        operation = "issue_badge"
        payload = IssueBadgeRequest(
            badge_template_id=template_id,
            recipient_email=email,
            issued_to_first_name=first_name,
            issued_to_last_name=last_name,
            issued_at=self._issued_at(),
        )
        request = httpx.Request("POST", self._url("badges"), json=payload.model_dump())

        with closing(self.do(request)) as response:
            if response.status_code == httpx.codes.UNPROCESSABLE_ENTITY:
                logger.info("%s already holds badge template %s", email, template_id)
                raise BadgeAlreadyIssuedError(operation)
            if response.status_code != httpx.codes.CREATED:
                logger.warning("%s failed with status %s", operation, response.status_code)
                raise APIRequestError(operation, response.status_code, response.text)
            return _decode(operation, response, Envelope[BadgeInfo])

    def get_badges(self, email: str, collections: Iterable[str] | None = None) -> list[BadgeInfo]:
        badge_filter = BadgeFilter.recipient_email(email).with_reporting_tags(collections)
        return self._fetch("get_badges", self._url("badges", badge_filter.query()), Envelope[list[BadgeInfo]])

    def get_badge(self, email: str, template_id: str) -> BadgeInfo | None:
        badge_filter = BadgeFilter.recipient_email(email).with_template_id(template_id)
        badges = self._fetch("get_badge", self._url("badges", badge_filter.query()), Envelope[list[BadgeInfo]])
        if not badges:
            return None
        return badges[0]

    def get_badge_template(self, template_id: str) -> BadgeTemplate:
        return self._fetch(
            "get_badge_template", self._url(f"badge_templates/{template_id}"), Envelope[BadgeTemplate]
        )

    def get_badge_templates(self) -> list[BadgeTemplate]:
        return self._fetch("get_badge_templates", self._url("badge_templates"), Envelope[list[BadgeTemplate]])


def _decode(operation: str, response: httpx.Response, model: type[Envelope[T]]) -> T:
    try:
        return model.model_validate_json(response.content).data
    except ValidationError as e:
        logger.warning("%s returned an undecodable body", operation)
        raise DecodeError(operation, str(e)) from e
