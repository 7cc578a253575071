"""Request-scoped deployment log."""

import json
import logging
from collections.abc import MutableMapping
from typing import Any


def _render(msg: Any) -> str:
    if isinstance(msg, (dict, list)):
        return json.dumps(msg)
    if msg is None:
        return "null"
    return str(msg)


class DeploymentLog(logging.LoggerAdapter):
    """
    Logger adapter that also keeps the lines of one deployment request.

    Lines go to the wrapped logger with the request's correlation id. Lines at
    or above ``capture_level`` are additionally appended to ``lines`` so they
    can be returned to the caller alongside the deployment result. Each
    request gets its own adapter, so nothing is shared across invocations.
    """

    def __init__(
        self,
        logger: logging.Logger,
        correlation_id: str | None = None,
        capture_level: int = logging.INFO,
    ) -> None:
        super().__init__(logger, {"correlation_id": correlation_id})
        self.capture_level = capture_level
        self.lines: list[str] = []

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        if self.extra.get("correlation_id"):
            extra.setdefault("correlation_id", self.extra["correlation_id"])
        kwargs["extra"] = extra
        return msg, kwargs

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        text = _render(msg)
        if args:
            text = text % args
        if level >= self.capture_level:
            self.lines.append(text)
        super().log(level, text, **kwargs)

    def getvalue(self) -> str:
        """Return the captured lines as one text block."""
        return "\n".join(self.lines)
