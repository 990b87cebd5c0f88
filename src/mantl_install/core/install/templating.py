"""Deployment template rendering.

Templates are mustache: ``{{key}}`` placeholders with dotted lookups into the
merged configuration (``{{marathon.cpus}}``, ``{{framework-name}}``),
sections (``{{#key}}...{{/key}}``), inverted sections (``{{^key}}``) and
unescaped values (``{{{key}}}``). Rendering is a pure function of the
template text and the configuration.

Goals:
- Missing values render as empty text, never as an error
- Scalars print the way JSON spells them: booleans ``true``/``false``,
  integral floats without a fraction, ``None`` as nothing
- Mappings and lists print as JSON (use triple braces to skip HTML escaping)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import chevron
from chevron.tokenizer import ChevronError

from mantl_install.core.exceptions import TemplateParseError

logger = logging.getLogger(__name__)


class _JsonBool(int):
    """Keeps mustache truthiness for sections, prints as a JSON boolean."""

    def __str__(self) -> str:
        return "true" if self else "false"


class _JsonObject(dict):
    def __init__(self, raw: Mapping[str, Any]) -> None:
        super().__init__((key, _view(value)) for key, value in raw.items())
        self.raw = raw

    def __str__(self) -> str:
        return json.dumps(self.raw, sort_keys=True, default=str)


class _JsonArray(list):
    def __init__(self, raw: Any) -> None:
        super().__init__(_view(item) for item in raw)
        self.raw = raw

    def __str__(self) -> str:
        return json.dumps(list(self.raw), sort_keys=True, default=str)


def _view(value: Any) -> Any:
    if isinstance(value, bool):
        return _JsonBool(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return _JsonObject(value)
    if isinstance(value, (list, tuple)):
        return _JsonArray(value)
    return value


def render_template(text: str, config: Mapping[str, Any], *, key: str = "<template>") -> str:
    """Render ``text`` with ``config`` values substituted.

    Raises:
        TemplateParseError: if ``text`` is not a valid template.
    """
    try:
        # No partials: templates never read from the filesystem.
        return chevron.render(
            template=text,
            data=_view(dict(config)),
            partials_path=None,
            partials_dict={},
        )
    except ChevronError as exc:
        logger.error("Could not parse template %s: %s", key, exc)
        raise TemplateParseError(
            f"Could not parse template {key}: {exc}",
            key=key,
            details=str(exc),
        ) from exc


__all__ = ["render_template"]
