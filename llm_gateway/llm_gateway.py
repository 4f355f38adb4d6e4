from __future__ import annotations  # LLM request gateway module

import json
import logging
import os
import threading
import time
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import LlmRoute, settings

from .throttle import FixedIntervalThrottle


logger = logging.getLogger(__name__)  # Module logger setup


_MODEL_LOCKS: Dict[str, threading.Lock] = {}
_MODEL_LOCKS_GUARD = threading.Lock()


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class RateLimitedError(LlmGatewayError):  # Upstream kept answering 429 after all retries
    pass


class GatewayTimeout(LlmGatewayError):  # Upstream did not answer within the route timeout
    pass


T = TypeVar("T", bound=BaseModel)


def _lock_for(cfg: LlmRoute) -> threading.Lock:
    key = cfg.name or f"{cfg.base_url}{cfg.endpoint}"
    with _MODEL_LOCKS_GUARD:
        lock = _MODEL_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _MODEL_LOCKS[key] = lock
    return lock


def complete(
    messages: Sequence[Dict[str, str]],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    throttle: Optional[FixedIntervalThrottle] = None,
    sleep: Callable[[float], None] = time.sleep,
    rate_limit_retries: Optional[int] = None,
) -> str:  # Send a chat request and return the raw reply text
    def _execute() -> str:
        payload: Dict[str, Any] = {"model": cfg.model, "messages": _normalize_messages(messages)}
        payload.update(cfg.options)
        preview = _short_preview(payload["messages"])
        logger.info("LLM completion start route=%s model=%s preview=%s", cfg.name, cfg.model, preview)
        data = _post_with_backoff(
            payload, cfg=cfg, client=client, throttle=throttle, sleep=sleep, retries=rate_limit_retries
        )
        content = _extract_content(data).strip()
        logger.info("LLM completion done route=%s model=%s chars=%d", cfg.name, cfg.model, len(content))
        return content

    if cfg.sequential:
        with _lock_for(cfg):
            return _execute()
    return _execute()


def call(
    task: str,
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    throttle: Optional[FixedIntervalThrottle] = None,
    sleep: Callable[[float], None] = time.sleep,
    rate_limit_retries: Optional[int] = None,
) -> T:  # Invoke configured LLM route and validate output
    return chat(
        [{"role": "user", "content": task}],
        schema,
        cfg=cfg,
        client=client,
        throttle=throttle,
        sleep=sleep,
        rate_limit_retries=rate_limit_retries,
    )


def chat(
    messages: Sequence[Dict[str, str]],
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    throttle: Optional[FixedIntervalThrottle] = None,
    sleep: Callable[[float], None] = time.sleep,
    rate_limit_retries: Optional[int] = None,
) -> T:
    def _execute() -> T:
        input_messages = _normalize_messages(messages)
        base_messages: list[Dict[str, str]] = []
        if cfg.enforce_json:
            schema_json = json.dumps(schema.model_json_schema(), indent=2)
            system_prompt = "Reply with a single JSON object matching this schema:\n" + schema_json
            base_messages.append({"role": "system", "content": system_prompt})
        base_messages.extend(input_messages)
        attempts = cfg.max_retries + 1
        last_error: Optional[Exception] = None
        last_error_text: Optional[str] = None
        preview = _short_preview(base_messages)
        logger.info(
            "LLM request start route=%s model=%s attempts=%d preview=%s",
            cfg.name,
            cfg.model,
            attempts,
            preview,
        )
        for attempt in range(attempts):
            attempt_messages = list(base_messages)
            if attempt > 0:
                attempt_messages.append(
                    {
                        "role": "system",
                        "content": _retry_hint(last_error_text, cfg.enforce_json),
                    }
                )
            payload: Dict[str, Any] = {"model": cfg.model, "messages": attempt_messages}
            payload.update(cfg.options)
            if cfg.response_format:
                payload["response_format"] = {"type": cfg.response_format}
            data = _post_with_backoff(
                payload, cfg=cfg, client=client, throttle=throttle, sleep=sleep, retries=rate_limit_retries
            )
            content = _extract_content(data)
            try:
                parsed = _validate(schema, content)
                logger.info(
                    "LLM request done route=%s model=%s attempt=%d",
                    cfg.name,
                    cfg.model,
                    attempt + 1,
                )
                return parsed
            except (json.JSONDecodeError, ValidationError) as exc:
                logger.warning("LLM output validation failed: %s", exc)
                last_error = exc
                last_error_text = str(exc)
                continue
        raise LlmGatewayError("LLM output validation failed") from last_error

    if cfg.sequential:
        with _lock_for(cfg):
            return _execute()
    return _execute()


def _post_with_backoff(
    payload: Dict[str, Any],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient],
    throttle: Optional[FixedIntervalThrottle],
    sleep: Callable[[float], None],
    retries: Optional[int] = None,
) -> Any:  # Dispatch request, retrying 429 replies with linear backoff
    url = f"{cfg.base_url}{cfg.endpoint}"
    headers = _headers(cfg)
    if retries is None:
        retries = settings.RATE_LIMIT_RETRIES
    for attempt in range(retries + 1):
        if throttle is not None:
            throttle.wait()
        try:
            response, close_cb = _post(url, payload, headers, cfg.timeout_s, client)
        except httpx.TimeoutException as exc:
            logger.error("LLM request timed out after %.1fs route=%s", cfg.timeout_s, cfg.name)
            raise GatewayTimeout(f"LLM request timed out after {cfg.timeout_s}s") from exc
        except Exception as exc:  # noqa: BLE001
            logger.error("LLM transport failure: %s", exc)
            raise LlmGatewayError("LLM transport failed") from exc
        try:
            if response.status_code == 429:
                if attempt < retries:
                    wait_s = (attempt + 1) * settings.RATE_LIMIT_BACKOFF_SECONDS
                    logger.warning(
                        "LLM rate limited route=%s, retrying in %.1fs (attempt %d/%d)",
                        cfg.name,
                        wait_s,
                        attempt + 1,
                        retries,
                    )
                    sleep(wait_s)
                    continue
                raise RateLimitedError(f"LLM still rate limited after {retries} retries")
            if response.status_code >= 400:
                logger.error("LLM error status: %s body=%s", response.status_code, _body_preview(response))
                raise LlmGatewayError(f"LLM returned status {response.status_code}")
            try:
                return response.json()
            except Exception as exc:  # noqa: BLE001
                logger.error("Invalid JSON payload from LLM: %s", exc)
                raise LlmGatewayError("LLM payload was not JSON") from exc
        finally:
            _close_safely(close_cb)
    raise RateLimitedError("LLM rate limited")  # pragma: no cover


def _headers(cfg: LlmRoute) -> Dict[str, str]:  # Build request headers including bearer token
    headers = {"Content-Type": "application/json"}
    if cfg.api_key_env:
        api_key = os.getenv(cfg.api_key_env)
        if not api_key:
            raise LlmGatewayError(f"API key not configured ({cfg.api_key_env})")
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)
    return headers


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        return client.post(url, json=payload, headers=headers, timeout=timeout), None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _body_preview(response: HttpResponse) -> str:  # First line of an error body for logs
    text = getattr(response, "text", "") or ""
    return text.strip().splitlines()[0][:200] if text.strip() else ""


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> list[Dict[str, str]]:  # Ensure message payload shape
    normalized: list[Dict[str, str]] = []
    for item in messages:
        if not isinstance(item, dict):
            raise TypeError("Each chat message must be a dict with role/content")
        role = str(item.get("role", "")).strip()
        content = str(item.get("content", ""))
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": content})
    return normalized


def _short_preview(messages: Sequence[Dict[str, str]]) -> str:  # Build preview string for logging
    preview = ""
    for message in messages:
        text = message.get("content", "").strip()
        if text:
            preview = text.splitlines()[0]
            break
    if len(preview) > 120:
        preview = preview[:117] + "..."
    return preview


def _extract_content(data: Any) -> str:  # Extract message content from LLM response
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
        if isinstance(data.get("content"), str):
            return data["content"]
    raise LlmGatewayError("LLM response missing content")


def _validate(schema: Type[T], content: str) -> T:  # Parse JSON content with schema
    cleaned = _strip_code_fences(content)
    return schema.model_validate_json(cleaned)


def _strip_code_fences(content: str) -> str:  # Remove common markdown fences from LLM output
    text = content.strip()
    if text.startswith("```"):
        lines = text.splitlines()
        if lines:
            lines = lines[1:]
            while lines and lines[0].strip() == "":
                lines = lines[1:]
            while lines and lines[-1].strip() == "":
                lines = lines[:-1]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            text = "\n".join(lines).strip()
    return text


def _retry_hint(error_text: Optional[str], enforce_json: bool) -> str:  # Compose retry instructions including last error
    base = "The previous reply failed validation."
    if error_text:
        truncated = error_text.splitlines()[0].strip()
        if len(truncated) > 200:
            truncated = truncated[:197] + "..."
        base += f" Reason: {truncated}."
    if enforce_json:
        return base + " Return a single JSON object that matches the schema."
    return base + " Follow the requested format precisely."
