"""
Client for the remote host-scoring service.

    build_request(topic, num_leads, platforms, filters) → SearchRequest
    find_hosts(request)                                 → list[Candidate]

build_request() validates the form before anything touches the network.
find_hosts() issues exactly one POST; every failure (transport, HTTP status,
unparseable body, service-reported error) surfaces as SearchError.
"""

import logging
import time
from collections.abc import Iterable, Mapping
from typing import Any

import requests
from pydantic import ValidationError

from hostfinder.config import API_URL, REQUEST_TIMEOUT
from hostfinder.errors import SearchError, SearchValidationError
from hostfinder.models import PLATFORMS, Candidate, SearchRequest, default_filters

log = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No results returned"


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

def build_request(
    topic: str,
    num_leads: int,
    platforms: Iterable[str],
    filters: Mapping[str, Any] | None = None,
) -> SearchRequest:
    """
    Validate form input and assemble a SearchRequest.

    Filters are kept only for selected platforms; a selected platform with no
    filters gets its defaults.
    """
    topic = (topic or "").strip()
    if not topic:
        raise SearchValidationError("Please enter a topic or community")

    selected = list(dict.fromkeys(platforms))
    if not selected:
        raise SearchValidationError("Please select at least one platform")

    unknown = [p for p in selected if p not in PLATFORMS]
    if unknown:
        raise SearchValidationError(f"Unsupported platform: {', '.join(unknown)}")

    filters = filters or {}
    chosen = {}
    for platform in selected:
        f = filters.get(platform)
        if f is None:
            f = default_filters(platform)
        elif isinstance(f, Mapping):
            f = {**f, "platform": platform}
        elif f.platform != platform:
            raise SearchValidationError(f"Filters for {f.platform} given under {platform}")
        chosen[platform] = f

    try:
        return SearchRequest(topic=topic, num_leads=num_leads, platforms=selected, filters=chosen)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = ".".join(str(part) for part in err["loc"])
        raise SearchValidationError(f"Invalid {field}: {err['msg']}") from exc


# ---------------------------------------------------------------------------
# Service call
# ---------------------------------------------------------------------------

def _service_message(body: Any) -> str | None:
    if isinstance(body, dict):
        for key in ("error", "detail"):
            if body.get(key):
                return str(body[key])
    return None


def _json_or_none(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def find_hosts(
    request: SearchRequest,
    api_url: str = API_URL,
    timeout: float = REQUEST_TIMEOUT,
) -> list[Candidate]:
    t0 = time.perf_counter()
    log.info("Searching: topic=%r  platforms=%s  n=%d", request.topic, request.platforms, request.num_leads)

    try:
        resp = requests.post(api_url, json=request.to_payload(), timeout=timeout)
    except requests.RequestException as exc:
        log.warning("Search transport failure: %s", exc)
        raise SearchError(f"Could not reach the search service: {exc}") from exc

    body = _json_or_none(resp)

    if not resp.ok:
        message = _service_message(body) or f"API error: {resp.status_code} {resp.reason or ''}".strip()
        log.warning("Search failed with HTTP %d: %s", resp.status_code, message)
        raise SearchError(message)

    if not isinstance(body, dict):
        log.warning("Search response was not a JSON object")
        raise SearchError("The search service returned an unreadable response")

    results = body.get("results")
    if body.get("success") is not True or not isinstance(results, list):
        message = _service_message(body) or NO_RESULTS_MESSAGE
        log.warning("Search reported failure: %s", message)
        raise SearchError(message)

    candidates = []
    for item in results:
        if not isinstance(item, dict):
            log.warning("Skipping malformed result: %r", item)
            continue
        try:
            candidates.append(Candidate.model_validate(item))
        except ValidationError as exc:
            log.warning("Skipping unreadable result %r: %s", item, exc)

    elapsed = time.perf_counter() - t0
    log.info("topic=%r  hits=%d  %.2fs", request.topic, len(candidates), elapsed)
    return candidates
