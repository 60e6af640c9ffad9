"""Engine settings: matrix, controls, experts, margins, thresholds, test mode."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for settings loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, Field, ValidationError

from raise_engine.authorization.matrix import DEFAULT_AUTHORIZATION_MATRIX, AuthorizationMatrix
from raise_engine.experts import DEFAULT_EXPERTS, ExpertConfig
from raise_engine.margins import DEFAULT_MARGIN_THRESHOLDS, MarginThreshold
from raise_engine.models.controls import ControlConfig
from raise_engine.models.thresholds import RuleThresholds

# Build/deploy-time switch, set for end-to-end test environments
TEST_MODE_ENV_VAR = "RAISE_ENGINE_E2E_MODE"
# Well-known key in the runtime key-value store
TEST_MODE_KEY = "testMode"

_TRUTHY = ("1", "true", "yes", "on")


class SettingsError(ValueError):
    """Settings file unreadable, not valid YAML, or not a valid settings mapping."""


def build_test_mode_flag(environ: Optional[Mapping[str, str]] = None) -> Optional[bool]:
    """Build-time test-mode flag from the environment; None when unset."""
    env = os.environ if environ is None else environ
    raw = env.get(TEST_MODE_ENV_VAR)
    if raw is None or not raw.strip():
        return None
    return raw.strip().lower() in _TRUTHY


def resolve_test_mode(
    build_flag: Optional[bool] = None,
    store: Optional[Mapping[str, str]] = None,
) -> bool:
    """
    Build flag wins when set to true; otherwise the runtime store decides
    (key 'testMode' equal to 'true').
    """
    if build_flag:
        return True
    if not store:
        return False
    value = store.get(TEST_MODE_KEY)
    return value is not None and str(value).strip().lower() == "true"


class EngineSettings(BaseModel):
    """Snapshot of everything the settings collaborator owns. Read-only for the engine."""

    authorization_matrix: AuthorizationMatrix = Field(
        default_factory=lambda: DEFAULT_AUTHORIZATION_MATRIX.model_copy(deep=True)
    )
    controls: list[ControlConfig] = Field(default_factory=list)
    experts: list[ExpertConfig] = Field(default_factory=lambda: list(DEFAULT_EXPERTS))
    margin_thresholds: list[MarginThreshold] = Field(
        default_factory=lambda: list(DEFAULT_MARGIN_THRESHOLDS)
    )
    thresholds: RuleThresholds = Field(default_factory=RuleThresholds)
    runtime_flags: dict[str, str] = Field(
        default_factory=dict,
        description="Key-value store snapshot, e.g. {'testMode': 'true'}",
    )

    def test_mode_active(self, environ: Optional[Mapping[str, str]] = None) -> bool:
        return resolve_test_mode(build_test_mode_flag(environ), self.runtime_flags)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EngineSettings":
        """
        Load settings from YAML. Every section is optional. Threshold keys may
        sit under 'rules' or at top level; the matrix under 'authorization_matrix'
        or 'matrix'.
        """
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except OSError as e:
            raise SettingsError(f"Cannot read settings file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")

        rules = data.get("rules") or {}
        flags = data.get("runtime_flags") or {}
        for section, value in (("rules", rules), ("runtime_flags", flags)):
            if not isinstance(value, dict):
                raise SettingsError(f"Section '{section}' in {path} must be a mapping")
        flat: dict = {}

        matrix = data.get("authorization_matrix", data.get("matrix"))
        if matrix is not None:
            flat["authorization_matrix"] = matrix
        for key in ("controls", "experts", "margin_thresholds"):
            if data.get(key) is not None:
                flat[key] = data[key]

        thresholds = {}
        for key in ("services_escalation_min", "fast_track_max_raise_tcv"):
            value = rules.get(key, data.get(key))
            if value is not None:
                thresholds[key] = value
        if thresholds:
            flat["thresholds"] = thresholds

        # YAML turns `true` into a bool; the store holds strings
        runtime: dict[str, str] = {}
        for key, value in flags.items():
            runtime[str(key)] = str(value).lower() if isinstance(value, bool) else str(value)
        flat["runtime_flags"] = runtime
        try:
            return cls.model_validate(flat)
        except ValidationError as e:
            raise SettingsError(f"Invalid settings in {path}: {e}") from e
