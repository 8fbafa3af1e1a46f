from jsonschema import validate as jsonschema_validate, ValidationError
from typing import Any, Dict, Optional, Type

from logscrubber.core.exceptions import ConfigurationError, ScrubberError


def validate_document(
    document: Any,
    schema: Optional[Dict[str, Any]],
    where: str,
    error: Type[ScrubberError] = ConfigurationError,
) -> None:
    """
    Validate a document against its JSON Schema: config files before any
    value from them is used, exports before they are written.
    """
    if not schema:
        return
    try:
        jsonschema_validate(instance=document, schema=schema)
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise error(f"{where} failed schema validation at {location}: {e.message}") from e
