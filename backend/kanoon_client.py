"""
kanoon_client.py — Kanoon Gateway
Talks to the Indian Kanoon API (api.indiankanoon.org) on behalf of the browser.

Every call:
  - refuses to go out when no API token is configured (ConfigurationError)
  - attaches `Authorization: Token <token>` plus fixed JSON headers
  - opens its own httpx.AsyncClient with the configured timeout
  - requires HTTP 200 and a JSON object body
  - is normalized into a shape-stable model (SearchResultSet / DocumentRecord)

Failures are raised as GatewayError subclasses carrying the status code,
message and optional upstream payload that main.py returns to the client.
Nothing is cached and nothing is retried.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from schemas import (
    DocumentRecord,
    DocumentRequest,
    SearchDoc,
    SearchQuery,
    SearchResultSet,
    UpstreamDocumentPayload,
    UpstreamSearchPayload,
)
from settings import Settings

logger = logging.getLogger("kanoon.client")

MAX_LOGGED_BODY: int = 2000

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "User-Agent": "Mozilla/5.0",
    "Cache-Control": "no-cache",
}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class GatewayError(Exception):
    """Base for every failure that ends up as an `{error, details}` response."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class ConfigurationError(GatewayError):
    pass


class InvalidQueryError(GatewayError):
    status_code = 400


class UpstreamTransportError(GatewayError):
    pass


class UpstreamStatusError(GatewayError):
    pass


class ShapeValidationError(GatewayError):
    pass


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


def ensure_configured(settings: Settings) -> None:
    if not settings.kanoon_api_token:
        raise ConfigurationError("API token not configured")


def _request_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Token {token}", **_HEADERS}


def _error_payload(resp: httpx.Response) -> Any:
    """Upstream error body as JSON if it parses, raw text otherwise, None if empty."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _error_message(payload: Any, status_code: int) -> str:
    if isinstance(payload, dict):
        for key in ("message", "errmsg", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Upstream returned status {status_code}"


async def _post(
    path: str,
    params: Union[Dict[str, str], List[Tuple[str, str]]],
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """POST to the upstream API and return the JSON object it answered with."""
    ensure_configured(settings)

    url = f"{settings.kanoon_base_url}{path}"
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(settings.kanoon_timeout),
            transport=transport,
        ) as client:
            logger.info("POST %s params=%s", url, params)
            resp = await client.post(
                url,
                params=params,
                headers=_request_headers(settings.kanoon_api_token),
            )
    except httpx.HTTPError as exc:
        message = str(exc) or type(exc).__name__
        logger.error("Transport error: POST %s: %s", url, message)
        raise UpstreamTransportError(message) from exc

    if resp.status_code != 200:
        payload = _error_payload(resp)
        logger.error(
            "Upstream error: POST %s status=%d body=%s",
            url, resp.status_code, resp.text[:MAX_LOGGED_BODY],
        )
        raise UpstreamStatusError(
            _error_message(payload, resp.status_code),
            # 1xx/2xx/3xx other than 200 are not errors a browser can act on
            status_code=resp.status_code if resp.status_code >= 400 else 502,
            details=payload if settings.expose_upstream_details else None,
        )

    try:
        body = resp.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        logger.error(
            "Invalid response format: POST %s body=%s",
            url, resp.text[:MAX_LOGGED_BODY],
        )
        raise ShapeValidationError("Invalid response format")
    return body


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_search(payload: Dict[str, Any], form_input: str) -> SearchResultSet:
    """Fill in docs/categories/found and echo the query text."""
    try:
        upstream = UpstreamSearchPayload.model_validate(payload)
    except ValidationError as exc:
        logger.error("Search payload failed validation: %s", exc)
        raise ShapeValidationError("Invalid response format") from exc

    docs = []
    for index, entry in enumerate(upstream.docs or []):
        try:
            docs.append(SearchDoc.model_validate(entry))
        except ValidationError as exc:
            logger.warning("Skipping malformed search doc #%d: %s", index, exc)

    return SearchResultSet(
        docs=docs,
        categories=upstream.categories or [],
        found=upstream.found or 0,
        encoded_form_input=form_input,
    )


def normalize_document(payload: Dict[str, Any], doc_id: str) -> DocumentRecord:
    """Echo the requested id and default the body, title and citation lists."""
    try:
        upstream = UpstreamDocumentPayload.model_validate(payload)
    except ValidationError as exc:
        logger.error("Document payload failed validation: %s", exc)
        raise ShapeValidationError("Invalid response format") from exc

    return DocumentRecord(
        doc=upstream.doc or "",
        tid=doc_id,
        title=upstream.title or "",
        cite_list=upstream.citeList or [],
        citedby_list=upstream.citedbyList or [],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def search(
    query: SearchQuery,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SearchResultSet:
    """Run a case-law search: POST /search/?formInput=...&pagenum=...&maxcites=..."""
    payload = await _post("/search/", query.upstream_params(), settings, transport)
    result = normalize_search(payload, query.form_input)
    logger.info(
        "Search %r page %d: %d docs (found=%s)",
        query.form_input, query.pagenum, len(result.docs), result.found,
    )
    return result


async def fetch_document(
    request: DocumentRequest,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DocumentRecord:
    """Fetch one judgment / statute section: POST /doc/<docId>/"""
    path = f"/doc/{quote(request.doc_id, safe='')}/"
    payload = await _post(path, request.params, settings, transport)
    record = normalize_document(payload, request.doc_id)
    logger.info(
        "Document %s: %d chars, %d cites, %d cited-by",
        record.tid, len(record.doc), len(record.cite_list), len(record.citedby_list),
    )
    return record
