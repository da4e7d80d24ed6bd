import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from notifyd.app_shell.context import ServiceContext
from notifyd.components.ingest import NotifyInput, run_notify
from notifyd.components.richtext import SanitizeBodyInput, run_sanitize
from notifyd.components.url_safety import check_url
from notifyd.domain.entities import NotificationRequest, TypedHint, ValidatedNotification
from notifyd.rules.loader import load_rules
from notifyd.rules.models import NotificationRules

logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"


def get_rules(path: str | None) -> NotificationRules:
    if path is None:
        default = Path(RULES_PATH)
        return load_rules(default) if default.exists() else NotificationRules()
    return load_rules(Path(path))


def parse_hint(raw: Any) -> TypedHint:
    """
    Build a hint from its JSON form.

    ``{"signature": "y", "value": 2}`` tags by D-Bus signature (use
    ``(iiibiiay)`` with a 7-item list for raw images);
    ``{"type": "byte", "value": 2}`` tags by hint type name.
    """
    if isinstance(raw, dict) and "signature" in raw:
        return TypedHint.from_signature(str(raw["signature"]), raw.get("value"))
    return TypedHint.model_validate(raw)


def load_request(path: Path) -> NotificationRequest:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Request file must contain a JSON object")

    hints = {str(key): parse_hint(value) for key, value in (data.get("hints") or {}).items()}
    actions = data.get("actions") or []
    return NotificationRequest.model_validate(
        {**data, "hints": hints, "actions": tuple(actions) if isinstance(actions, list) else ()}
    )


def describe(notification: ValidatedNotification) -> dict[str, Any]:
    """JSON-safe view of a notification; pixel buffers are summarized."""
    data = notification.model_dump(mode="json", exclude={"image", "hints"})
    data["hints"] = {key: hint.type.value for key, hint in notification.hints.items()}
    if notification.image is not None:
        image = notification.image
        data["image"] = {
            "width": image.width,
            "height": image.height,
            "pixel_format": image.pixel_format,
            "bytes": len(image.pixels),
            "frames": len(image.frames),
            "duration_ms": image.total_duration_ms,
        }
    return data


def handle_notify(args: argparse.Namespace) -> int:
    try:
        rules = get_rules(args.rules)
        request = load_request(Path(args.request))
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Invalid input: {e}")
        return 1

    ctx = ServiceContext.create(rules)
    try:
        output = run_notify(NotifyInput(request=request), ctx.service)
    finally:
        ctx.shutdown()

    result: dict[str, Any] = {
        "success": output.success,
        "id": output.notification_id,
        "suppressed": output.suppressed,
        "warnings": [f"{w.stage}:{w.code}" for w in output.warnings],
        "errors": [f"{e.stage}:{e.code}" for e in output.errors],
    }
    if output.notification is not None:
        result["notification"] = describe(output.notification)
    print(json.dumps(result, indent=2))
    return 0 if output.success else 2


def handle_sanitize(args: argparse.Namespace) -> int:
    output = run_sanitize(SanitizeBodyInput(body=args.body, enable_links=not args.no_links))
    print(
        json.dumps(
            {
                "markup": output.body.markup,
                "links": [link.model_dump(mode="json") for link in output.body.links],
                "removed": [e.code for e in output.errors],
            },
            indent=2,
        )
    )
    return 0


def handle_check_url(args: argparse.Namespace) -> int:
    verdict = check_url(args.url, allow_file=args.image)
    print(json.dumps({"accepted": verdict.accepted, "scheme": verdict.scheme, "reason": verdict.reason}))
    return 0 if verdict.accepted else 1


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Notification ingestion pipeline")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # notify
    notify_parser = subparsers.add_parser("notify", help="Run a JSON request through the pipeline")
    notify_parser.add_argument("request", help="Path to a JSON NotificationRequest")
    notify_parser.add_argument("--rules", help=f"Rules file (default: ./{RULES_PATH} if present)")

    # sanitize
    sanitize_parser = subparsers.add_parser("sanitize", help="Sanitize a notification body")
    sanitize_parser.add_argument("body", help="Raw body text")
    sanitize_parser.add_argument("--no-links", action="store_true", help="Disable link emission")

    # check-url
    url_parser = subparsers.add_parser("check-url", help="Check a URL against the scheme allow-list")
    url_parser.add_argument("url")
    url_parser.add_argument("--image", action="store_true", help="Also admit file:// (image loading)")

    args = parser.parse_args(argv)

    if args.command == "notify":
        code = handle_notify(args)
    elif args.command == "sanitize":
        code = handle_sanitize(args)
    else:
        code = handle_check_url(args)
    sys.exit(code)


if __name__ == "__main__":
    main()
