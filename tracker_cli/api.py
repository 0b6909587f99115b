"""
HTTP request layer and security helpers for tracker-cli.
"""

import json
import re
import sys
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid

from tracker_cli import config
from tracker_cli.exceptions import CliError, HTTPError

# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    if not token:
        return ""
    return token[:6] + "..." if len(token) > 6 else token


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _error_envelope(message, status=None, request_id=None, detail=None):
    """Build a consistent CLI-safe HTTP error message."""
    meta = []
    if status is not None:
        meta.append(f"status={status}")
    if request_id:
        meta.append(f"request_id={request_id}")
    suffix = f" ({', '.join(meta)})" if meta else ""
    body = f"[ERROR] {message}{suffix}"
    if detail:
        body += f"\n{detail}"
    return body


def build_url(base_url, path, params=None):
    url = base_url.rstrip("/") + path
    if params:
        url += "?" + urllib.parse.urlencode(params)
    return url


def _http_request(url, data=None, headers=None, method="GET", timeout=None):
    """Make one HTTP request with standard error handling.
    Returns parsed JSON on success (None for an empty body).
    Raises HTTPError for HTTP errors (caller handles specific codes).
    Raises CliError on network/timeout/parse errors. Never retries."""
    body = json.dumps(data).encode("utf-8") if data is not None else None
    request_id = (headers or {}).get("X-Request-Id")
    timeout = max(1, timeout or config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    req = urllib.request.Request(url, data=body, headers=headers or {}, method=method)
    _log_http_event(
        phase="request",
        method=method,
        url=url,
        request_id=request_id,
        timeout_seconds=timeout,
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            content_type = resp.headers.get("Content-Type", "")
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
            if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                raise CliError(
                    "[ERROR] Response too large from tracker API "
                    f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
                )
            _log_http_event(
                phase="response",
                method=method,
                url=url,
                status=getattr(resp, "status", 200),
                content_type=content_type,
                bytes=len(raw),
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
                request_id=request_id,
            )
            if not raw.strip():
                return None
            try:
                return json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                if content_type and "json" not in content_type.lower():
                    raise CliError(
                        f"[ERROR] Unexpected Content-Type from server "
                        f"({content_type}). This may be a proxy or "
                        "network issue."
                    ) from None
                raise CliError(
                    "[ERROR] Unexpected response from tracker API (not valid JSON)."
                ) from None
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        _log_http_event(
            phase="response",
            method=method,
            url=url,
            status=e.code,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            request_id=request_id,
        )
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except TimeoutError as e:
        _log_http_event(
            phase="network_error",
            method=method,
            url=url,
            error="timeout",
            request_id=request_id,
        )
        raise CliError(
            _error_envelope(
                f"Request timed out after {timeout} seconds. Is the tracker API reachable?",
                request_id=request_id,
            )
        ) from e
    except urllib.error.URLError as e:
        _log_http_event(
            phase="network_error",
            method=method,
            url=url,
            error=f"url_error: {e.reason}",
            request_id=request_id,
        )
        raise CliError(
            _error_envelope(f"Connection failed: {e.reason}", request_id=request_id)
        ) from e


def request_headers(api_key):
    return {
        "X-TrackerToken": api_key,
        "Content-Type": "application/json",
        "Accept": "application/json",
        "X-Request-Id": str(uuid.uuid4()),
    }


def tracker_request(settings, path, data=None, method="GET", params=None):
    """Make an authenticated request against the configured tracker API.
    Raises HTTPError for HTTP error statuses and CliError for transport failures."""
    url = build_url(settings.api_url, path, params)
    headers = request_headers(settings.require_api_key())
    return _http_request(url, data, headers, method, timeout=settings.timeout)


def extract_errors(err):
    """Turn an HTTPError into the list of error strings the service reported."""
    try:
        parsed = json.loads(err.body) if err.body else None
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list) and errors:
            return [str(e.get("error", e)) if isinstance(e, dict) else str(e) for e in errors]
        if isinstance(errors, dict) and errors.get("error"):
            return [str(errors["error"])]
        for key in ("error", "message"):
            if parsed.get(key):
                return [str(parsed[key])]
    detail = _sanitize_error(err.body)
    message = f"HTTP {err.code}: {err.reason}"
    return [f"{message} {detail}" if detail else message]
