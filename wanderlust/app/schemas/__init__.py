"""
Pydantic schema definitions for form payloads and records.

Each domain (listings, reviews, users) defines its own models for
incoming form data and for records read back from the store.
"""

from pydantic import ValidationError


def validation_message(exc: ValidationError, prefix: str = "") -> str:
    """Join all validation errors into one human-readable message.

    Each error is rendered as ``"<prefix>.<field>" <message>`` and the
    errors are separated by ", ".
    """
    messages = []
    for err in exc.errors():
        path = [str(part) for part in err["loc"]]
        if prefix:
            path.insert(0, prefix)
        messages.append(f'"{".".join(path)}" {err["msg"]}')
    return ", ".join(messages)
