"""Translate embedded protocol error codes into readable text."""
from typing import Optional

import kafka.errors as Errors


def error_message(code: int) -> Optional[str]:
    """Return ``"NAME: description"`` for *code*, or None when it is 0."""
    if not code:
        return None
    error_type = Errors.for_code(code)
    name = error_type.message
    if code not in Errors.kafka_errors:
        # keep the number when kafka-python has no name for it
        name = f"{name} (error code {code})"
    if error_type.description:
        return f"{name}: {error_type.description}"
    return name
