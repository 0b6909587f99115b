"""Core output dispatchers and the error renderer."""

import json
import sys

from tracker_cli import config

ERROR_HEADER = "Unable to process request:"


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="text"):
    """Output data in requested format."""
    if fmt == "text" and formatter:
        print(formatter(data))
    else:
        pretty_print(data)


def format_errors(errors):
    lines = [ERROR_HEADER]
    lines.extend(f"  {error}" for error in errors)
    return "\n".join(lines)


def print_api_errors(errors, fmt="text"):
    """Print a service-reported failure to stderr."""
    if fmt == "json":
        payload = {
            "ok": False,
            "schema_version": config.CONTRACT_SCHEMA_VERSION,
            "errors": list(errors),
        }
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(format_errors(errors), file=sys.stderr)


def message_response(message, fmt="text"):
    """Print a plain confirmation message from the service."""
    if fmt == "json":
        pretty_print({"ok": True, "message": message})
        return
    print(message)
