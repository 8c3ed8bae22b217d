"""Binder options."""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_LIST_SEPARATOR = ","


@dataclass
class BindOptions:
    """Options shared by every bind call of a binder.

    Attributes:
        list_separator: Separator for list values. Exporters join with it
            too, so it must not be empty.
        use_environment: Consult ``env_var`` overrides. Disable for
            reproducible binds that ignore the process environment.
        log_resolutions: Debug-log which source resolved each key.
            Raw values are never logged.
    """
    list_separator: str = DEFAULT_LIST_SEPARATOR
    use_environment: bool = True
    log_resolutions: bool = False

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise ValueError("; ".join(errors))

    @classmethod
    def from_dict(cls, data: dict) -> "BindOptions":
        """Create options from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown bind option(s): {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: str | Path) -> "BindOptions":
        """Load options from a YAML file. A missing file gives defaults."""
        path = Path(path).expanduser()
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Top-level YAML must be a mapping, got: {type(data).__name__}")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, prefix: str = "PROPS_UTIL") -> "BindOptions":
        """Load options from environment variables.

        Environment variables:
            {prefix}_LIST_SEPARATOR: Separator for list values
            {prefix}_USE_ENVIRONMENT: true|false
            {prefix}_LOG_RESOLUTIONS: true|false
        """
        def get(key: str, default: Optional[str] = None) -> Optional[str]:
            return os.environ.get(f"{prefix}_{key}", default)

        def get_bool(key: str, default: bool) -> bool:
            val = get(key)
            if val is None:
                return default
            return val.strip().lower() in ("true", "1", "yes")

        return cls(
            list_separator=get("LIST_SEPARATOR", DEFAULT_LIST_SEPARATOR),
            use_environment=get_bool("USE_ENVIRONMENT", True),
            log_resolutions=get_bool("LOG_RESOLUTIONS", False),
        )

    def validate(self) -> list[str]:
        """Validate options, return list of errors."""
        errors = []
        if not isinstance(self.list_separator, str) or not self.list_separator:
            errors.append("list_separator must be a non-empty string")
        elif self.list_separator.strip() == "":
            errors.append("list_separator must not be whitespace")
        return errors
