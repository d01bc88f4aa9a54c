from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Union


ErrorDetails = Union[Dict[str, Any], List[Any]]


class LeaseLinkApiException(RuntimeError):
    """
    The single error raised by the LeaseLink library.

    Carries either a plain message or structured errors returned by the API
    (a mapping of field -> message(s), or a list of messages). Structured
    errors are kept in `errors` and rendered into the display message.
    """

    DEFAULT_MESSAGE = "Unknown error occurred"

    def __init__(
        self,
        message: Union[str, Mapping[str, Any], List[Any], tuple] = "",
        status_code: Optional[int] = None,
    ) -> None:
        self.errors: ErrorDetails = []
        self.status_code = status_code

        if isinstance(message, Mapping):
            self.errors = dict(message)
            text = self._format_errors(self.errors)
        elif isinstance(message, (list, tuple)):
            self.errors = list(message)
            text = self._format_errors(self.errors)
        else:
            text = str(message)

        self.message = text
        super().__init__(text)

    @classmethod
    def _format_errors(cls, errors: ErrorDetails) -> str:
        if not errors:
            return cls.DEFAULT_MESSAGE

        if isinstance(errors, dict):
            pairs = errors.items()
        else:
            pairs = enumerate(errors)

        parts = []
        for key, value in pairs:
            if isinstance(value, (list, dict)):
                value = json.dumps(value, ensure_ascii=False)
            parts.append(f"{key}: {value}" if isinstance(key, str) else str(value))
        return "; ".join(parts)

    @classmethod
    def from_validation_error(
        cls, exc: Any, field_names: Optional[Mapping[str, str]] = None
    ) -> "LeaseLinkApiException":
        """
        Build from a pydantic ValidationError, one entry per failing field.

        `field_names` renames the leading location part (attribute -> wire name).
        """
        field_names = field_names or {}
        errors: Dict[str, str] = {}
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ())]
            if loc:
                loc[0] = field_names.get(loc[0], loc[0])
            errors[".".join(loc) or exc.title] = err.get("msg", "Invalid value")
        return cls(errors)
