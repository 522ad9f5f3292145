"""Request parsing helpers for message endpoints.

Send requests arrive as multipart forms, so recipients come in as a JSON
array encoded in a single form field.
"""

import json
from typing import List

from ....core.exceptions import ValidationError


def parse_recipients(raw: str) -> List[str]:
    """Decode the ``recipients`` form field into a list of identifiers."""
    try:
        recipients = json.loads(raw)
    except ValueError:
        raise ValidationError("Recipients must be a JSON array", field="recipients")

    if not isinstance(recipients, list):
        raise ValidationError("Recipients must be a JSON array", field="recipients")
    return [
        str(recipient) if isinstance(recipient, int) and not isinstance(recipient, bool) else recipient
        for recipient in recipients
    ]
