from __future__ import annotations
import json
from urllib.request import Request, urlopen
from urllib.error import URLError, HTTPError

from ..models import NotificationField, Severity

SEVERITY_ORDER = [Severity.DANGER, Severity.WARNING, Severity.GOOD, Severity.INFO]

def build_attachments(notifications: dict[Severity, list[NotificationField]]) -> list[dict]:
    """One attachment per non-empty severity bucket, colored by severity."""
    attachments = []
    for severity in SEVERITY_ORDER:
        fields = notifications.get(severity) or []
        if not fields:
            continue
        attachments.append({
            "color": severity.value,
            "fields": [{"title": f.title, "value": f.value, "short": False} for f in fields],
        })
    return attachments

def send_slack(webhook_url: str, text: str, attachments: list[dict] | None = None, timeout: int = 10) -> tuple[bool, str]:
    """
    Post a message to a Slack webhook. Returns (ok, detail).
    """
    payload = {"text": text}
    if attachments:
        payload["attachments"] = attachments
    data = json.dumps(payload).encode("utf-8")
    req = Request(
        webhook_url,
        data=data,
        headers={"Content-Type": "application/json; charset=utf-8"},
        method="POST",
    )
    try:
        with urlopen(req, timeout=timeout) as resp:
            return True, f"HTTP {resp.status}"
    except HTTPError as e:
        return False, f"HTTPError {e.code}: {e.read().decode('utf-8', 'ignore')}"
    except URLError as e:
        return False, f"URLError: {e.reason}"
    except (OSError, ValueError) as e:
        return False, f"Error: {e}"
