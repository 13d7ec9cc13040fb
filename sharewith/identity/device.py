# sharewith/identity/device.py
from __future__ import annotations

from typing import Any, Dict, Optional

from user_agents import parse

UNKNOWN_DEVICE = "Unknown Device"


def _known(value: Optional[str]) -> Optional[str]:
    # ua-parser reports "Other" for anything it could not classify
    if not value or value == "Other":
        return None
    return value


def describe_device(user_agent: Optional[str]) -> Dict[str, Any]:
    """Human-facing device fields derived from a User-Agent header."""
    ua = parse(user_agent or "")

    os_name = _known(ua.os.family)
    browser = _known(ua.browser.family)
    # desktops report a generic model ("Mac"), only handhelds have a useful one
    model = _known(ua.device.model) if (ua.is_mobile or ua.is_tablet) else None
    if ua.is_tablet:
        device_type = "tablet"
    elif ua.is_mobile:
        device_type = "mobile"
    else:
        device_type = None

    device_name = ""
    if os_name:
        device_name = os_name.replace("Mac OS X", "Mac").replace("Mac OS", "Mac") + " "
    device_name += model or browser or ""
    device_name = device_name.strip() or UNKNOWN_DEVICE

    return {
        "model": model,
        "os": os_name,
        "browser": browser,
        "type": device_type,
        "deviceName": device_name,
    }
