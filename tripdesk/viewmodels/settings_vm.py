from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional

from ..adapters.records_rest import DEFAULT_ENDPOINTS
from ..utils.logging import env_requests_debug

BASE_URL_ENV_VAR = "TRIPDESK_API_BASE_URL"
DEFAULT_BASE_URL = "http://localhost:8080/api"
ENDPOINT_KINDS = ("list", "delete")


def _default_base_url() -> str:
    return (os.getenv(BASE_URL_ENV_VAR) or "").strip() or DEFAULT_BASE_URL


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    api_base_url: str = field(default_factory=_default_base_url)
    request_timeout_s: int = 10
    retries: int = 2
    page_size: int = 10
    endpoints: Dict[str, Dict[str, str]] = field(default_factory=dict)


class SettingsVM:
    """Keeps admin settings form state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save
        self.api_key: str = ""
        self.debug_logging: bool = env_requests_debug()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def api_base_url(self) -> str:
        return self.config.api_base_url

    @api_base_url.setter
    def api_base_url(self, value: str) -> None:
        self.config = replace(self.config, api_base_url=self._coerce_url(value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: int) -> None:
        self.config = replace(
            self.config, request_timeout_s=self._coerce_int("request_timeout_s", value, minimum=1)
        )

    @property
    def retries(self) -> int:
        return self.config.retries

    @retries.setter
    def retries(self, value: int) -> None:
        self.config = replace(self.config, retries=self._coerce_int("retries", value, minimum=0))

    @property
    def page_size(self) -> int:
        return self.config.page_size

    @page_size.setter
    def page_size(self, value: int) -> None:
        self.config = replace(self.config, page_size=self._coerce_int("page_size", value, minimum=1))

    @property
    def endpoints(self) -> Dict[str, Dict[str, str]]:
        return self.config.endpoints

    @endpoints.setter
    def endpoints(self, value: Mapping[str, Any]) -> None:
        self.config = replace(self.config, endpoints=self._coerce_endpoints(value))

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        url = self.api_base_url
        if not url.startswith(("http://", "https://")):
            return False
        return self.request_timeout_s > 0 and self.page_size > 0 and self.retries >= 0

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_flat_keys = {*SettingsConfig.__annotations__.keys(), "api_key", "debug_logging"}
        unknown = set(payload.keys()) - allowed_flat_keys
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates: Dict[str, Any] = {}
        for cfg_key in SettingsConfig.__annotations__.keys():
            if cfg_key in payload:
                updates[cfg_key] = self._coerce_config_value(cfg_key, payload[cfg_key])

        if updates:
            self.config = replace(self.config, **updates)

        if "api_key" in payload:
            self.api_key = self._coerce_optional_str(payload["api_key"])

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot.update(
            {
                "api_key": self.api_key,
                "debug_logging": bool(self.debug_logging),
            }
        )
        return snapshot

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key == "api_base_url":
            return self._coerce_url(raw)
        if key == "request_timeout_s":
            return self._coerce_int(key, raw, minimum=1)
        if key == "retries":
            return self._coerce_int(key, raw, minimum=0)
        if key == "page_size":
            return self._coerce_int(key, raw, minimum=1)
        if key == "endpoints":
            return self._coerce_endpoints(raw)
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_url(value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("api_base_url must be a string URL.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("api_base_url must not be empty.")
        return normalized

    @staticmethod
    def _coerce_optional_str(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, minimum: Optional[int] = None) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if minimum is not None and coerced < minimum:
            raise ValueError(f"{name} must be >= {minimum}.")
        return coerced

    @staticmethod
    def _coerce_endpoints(value: Any) -> Dict[str, Dict[str, str]]:
        """Validate ``{"bookings": {"list": "/...", "delete": "/.../{id}"}}`` overrides."""
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("endpoints must be a mapping.")
        normalized: Dict[str, Dict[str, str]] = {}
        for raw_entity, raw_paths in value.items():
            entity = str(raw_entity)
            if entity not in DEFAULT_ENDPOINTS:
                raise ValueError(f"endpoints contains unsupported entity '{entity}'.")
            if not isinstance(raw_paths, Mapping):
                raise ValueError(f"endpoints['{entity}'] must be a mapping.")
            paths: Dict[str, str] = {}
            for kind, raw_path in raw_paths.items():
                if kind not in ENDPOINT_KINDS:
                    raise ValueError(f"endpoints['{entity}'] has unsupported key '{kind}'.")
                path = "" if raw_path is None else str(raw_path).strip()
                if not path:
                    continue
                if not path.startswith("/"):
                    raise ValueError(f"endpoints['{entity}']['{kind}'] must start with '/'.")
                if kind == "delete" and "{id}" not in path:
                    raise ValueError(f"endpoints['{entity}']['delete'] must contain '{{id}}'.")
                paths[kind] = path
            if paths:
                normalized[entity] = paths
        return normalized


def default_settings_payload() -> dict:
    """Return a fresh snapshot containing the default settings payload."""
    return SettingsVM().to_dict()


__all__ = ["BASE_URL_ENV_VAR", "DEFAULT_BASE_URL", "SettingsConfig", "SettingsVM", "default_settings_payload"]
