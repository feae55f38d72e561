"""
repolink logging utilities.

Provides configurable logging for hosting API requests/responses, git
invocations and workflow progress. Ensures no credentials (access tokens,
basic-auth headers, passwords) are logged.
"""

import logging
import re
from typing import Any

# Create package loggers
_sdk_logger = logging.getLogger("repolink")
_http_logger = logging.getLogger("repolink.http")
_git_logger = logging.getLogger("repolink.git")

# Handler installed by the last configure_logging() call
_configured_handler: logging.Handler | None = None

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Private key patterns (PEM / OpenSSH format)
    (re.compile(r"-----BEGIN[^-]*PRIVATE KEY-----.*?-----END[^-]*PRIVATE KEY-----", re.DOTALL), "[PRIVATE_KEY_REDACTED]"),
    # GitHub token formats
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"), "[TOKEN_REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}\b"), "[TOKEN_REDACTED]"),
    # Authorization header values
    (re.compile(r"(Authorization:\s*(?:Bearer|Basic|token))\s+\S+", re.IGNORECASE), r"\1 [REDACTED]"),
    # Credentials embedded in URLs
    (re.compile(r"(https?://)[^/@\s:]+:[^/@\s]+@"), r"\1[REDACTED]@"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {"authorization", "token", "password", "secret", "api_key"}


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    git_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure repolink logging.

    Args:
        level: Default log level for all repolink loggers (default: INFO)
        http_level: Log level for hosting API request/response logging (default: same as level)
        git_level: Log level for git command logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Calling it again replaces the handler installed by the previous call.

    Example:
        ```python
        import logging
        from repolink.logging import configure_logging

        # Show every git command and API call
        configure_logging(level=logging.INFO, http_level=logging.DEBUG, git_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    global _configured_handler
    if _configured_handler is not None:
        _sdk_logger.removeHandler(_configured_handler)
    _configured_handler = handler

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _git_logger.setLevel(git_level if git_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a repolink logger.

    Args:
        name: Logger name suffix (e.g., "http", "git"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"repolink.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces access tokens, authorization header values, URL-embedded
    credentials and private keys with redacted placeholders.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: authorization, token, password, secret, api_key)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with sensitive data masked.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        headers: Request headers (optional)
        body: Request body (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {mask_sensitive_data(url)}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    body: Any = None,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log an HTTP response at DEBUG level with sensitive data masked.

    Args:
        status_code: HTTP status code
        url: Request URL
        body: Response body (optional); lists are summarized by length
        elapsed_ms: Request duration in milliseconds (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {mask_sensitive_data(url)}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if isinstance(body, dict) and body:
        log_parts.append(f"body={safe_log_dict(body)}")
    elif isinstance(body, list):
        log_parts.append(f"items={len(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_git_command(args: list[str], cwd: str | None = None) -> None:
    """
    Log a git invocation at DEBUG level with credentials masked.

    Args:
        args: Full argv, including the leading "git"
        cwd: Working directory of the invocation (optional)
    """
    if not _git_logger.isEnabledFor(logging.DEBUG):
        return

    line = mask_sensitive_data(" ".join(args))
    if cwd:
        line = f"{line} (cwd={cwd})"
    _git_logger.debug(line)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_git_command",
]
