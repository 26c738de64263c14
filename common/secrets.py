import json
import os
from pathlib import Path
from typing import Any, Callable, Optional

from .errors import ConfigInvalid, ConfigMissing, TemplateInvalid, TemplateMissing

DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_TEMPLATE_PATH = "leadModel.json"


def load_json_object(
    path: str | Path,
    *,
    missing: Callable[[str], Exception] = TemplateMissing,
    invalid: Callable[[str, str], Exception] = TemplateInvalid,
) -> dict[str, Any]:
    """Read *path* and return its top-level JSON object.

    Raises ``missing(path)`` when the file does not exist and
    ``invalid(path, reason)`` when it does not parse or is not an object.
    Defaults to the template errors; credential loading passes the config ones.
    """

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        raise missing(str(path)) from None
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise invalid(str(path), str(exc)) from exc
    if not isinstance(data, dict):
        raise invalid(str(path), f"expected an object, got {type(data).__name__}")
    return data


def template_path(path: str | Path | None = None) -> Path:
    """Resolve the record template location (argument, env, then default)."""

    return Path(path or os.getenv("CRM_TEMPLATE_PATH", DEFAULT_TEMPLATE_PATH))


class SecretsManager:
    """Load the OAuth credential document pointed to by ``CRM_CONFIG_PATH``.

    The file is read on first access and cached for the life of the manager.
    Unlike template loading there is no fallback: a missing file raises
    :class:`ConfigMissing` and a malformed one :class:`ConfigInvalid`.
    Tests may replace the cache via :meth:`set_override`.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path or os.getenv("CRM_CONFIG_PATH", DEFAULT_CONFIG_PATH))
        self._cache: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        if self._cache is None:
            self._cache = load_json_object(
                self._path, missing=ConfigMissing, invalid=ConfigInvalid
            )
        return dict(self._cache)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return secret value for *key* or *default* if missing."""

        return self.load().get(key, default)

    def set_override(self, data: dict[str, Any] | None) -> None:
        """Replace the entire secret cache; ``None`` forces a re-read (test helper)."""

        self._cache = dict(data) if data is not None else None
