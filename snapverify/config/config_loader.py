"""
Purpose:
    - Load verifier settings from a TOML file ([tool.snapverify] table)
    - Validate them into VerifierSettings
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from snapverify.config.configs import VerifierSettings
from snapverify.errors.errors import ConfigurationError

_LOGGER = logging.getLogger(__name__)

TOOL_TABLE: tuple[str, ...] = ("tool", "snapverify")


def validation_error_parser(error: ValidationError) -> list[dict[str, str]]:
    parsed_error = [
        {
            "component": "config.settings",
            "path": ".".join(map(str, err["loc"])),
            "message": err["msg"],
            "error_type": err["type"],
        }
        for err in error.errors()
    ]
    return parsed_error


class ConfigLoader:
    """
    Reads the [tool.snapverify] table of a TOML file, relative to `base_dir`.
    A file without the table yields the default settings.
    """

    def __init__(self, base_dir: Union[str, Path] = ".") -> None:
        self._base_dir = Path(base_dir)

    def resolve(self, file_name: Union[str, Path]) -> Path:
        path = Path(file_name)
        return path if path.is_absolute() else self._base_dir / path

    def load_table(self, file_name: Union[str, Path] = "pyproject.toml") -> dict[str, Any]:
        path = self.resolve(file_name)
        if not path.is_file():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with path.open("rb") as f:
            section: Any = tomllib.load(f)
        for key in TOOL_TABLE:
            section = section.get(key, {}) if isinstance(section, dict) else {}

        if not isinstance(section, dict):
            raise ConfigurationError(
                f"[{'.'.join(TOOL_TABLE)}] in {path} is not a table",
                field=".".join(TOOL_TABLE),
                value=section,
                component="config.settings",
            )
        return section

    def load_settings(self, file_name: Union[str, Path] = "pyproject.toml") -> VerifierSettings:
        return self.validate(self.load_table(file_name))

    def validate(self, raw: dict[str, Any]) -> VerifierSettings:
        try:
            settings = VerifierSettings.model_validate(raw)
        except ValidationError as exc:
            issues = validation_error_parser(exc)
            first = issues[0]
            raise ConfigurationError(
                f"invalid snapshot settings: {first['message']}",
                field=first["path"],
                component=first["component"],
                details={"issues": issues},
            ) from exc

        _LOGGER.debug(
            "settings_loaded",
            extra={
                "event": "settings_loaded",
                "timeout": settings.timeout,
                "keys_total": len(raw),
            },
        )
        return settings
