from __future__ import annotations

import os
import sys

from guideline_qa.core import config


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def _is_pytest() -> bool:
    return bool(os.getenv("PYTEST_CURRENT_TEST")) or "pytest" in sys.modules


def openai_api_key() -> str:
    api_key_obj = getattr(config.settings, "openai_api_key", None)
    if api_key_obj is None:
        return ""
    if hasattr(api_key_obj, "get_secret_value"):
        return (api_key_obj.get_secret_value() or "").strip()
    return str(api_key_obj or "").strip()


def openai_key_present() -> bool:
    return bool(openai_api_key())


def is_openai_offline() -> bool:
    """
    True when the provider must not be called: explicit OPENAI_OFFLINE,
    no key configured, or running under pytest/CI.
    """
    override = os.getenv("OPENAI_OFFLINE")
    if override is not None:
        return _truthy(override)
    if getattr(config.settings, "openai_offline", False):
        return True
    if not openai_key_present():
        return True
    return _is_pytest() or _truthy(os.getenv("CI")) or _truthy(os.getenv("GITHUB_ACTIONS"))


def is_llm_enabled() -> bool:
    return openai_key_present() and not is_openai_offline()
