# src/docaudit/model.py (Shell Layer)
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from linkcheck.exceptions import ConfigurationError
from linkcheck.model import FilterSettings, ProbeSettings, ScanSettings


class ReportSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "report.html"
    open: bool = True
    show_progress: bool = True
    export_path: Optional[str] = None


class AuditSettings(BaseModel):
    """
    Immutable settings for one run, built once at startup and handed
    explicitly to the scanner, extractor, filter and prober.
    """
    model_config = ConfigDict(frozen=True)

    scan: ScanSettings = Field(default_factory=ScanSettings)
    filter: FilterSettings = Field(default_factory=FilterSettings)
    probe: ProbeSettings = Field(default_factory=ProbeSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)

    @classmethod
    def from_config(cls, config: Dict[str, Any], overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> "AuditSettings":
        """
        Builds settings from the raw settings.json dictionary.
        `overrides` holds per-section values (e.g. from the CLI) that win over the file;
        None values are ignored.

        Raises:
            ConfigurationError: If a value fails validation.
        """
        sections: Dict[str, Dict[str, Any]] = {
            "scan": dict(config.get("scan") or {}),
            "filter": dict(config.get("filter") or {}),
            "probe": dict(config.get("probe") or {}),
            "report": dict(config.get("report") or {}),
        }

        chrome_version = (config.get("user_agent") or {}).get("chrome_version")
        if chrome_version:
            sections["probe"].setdefault("chrome_version", chrome_version)

        for section, values in (overrides or {}).items():
            sections.setdefault(section, {}).update(
                {key: value for key, value in values.items() if value is not None}
            )

        try:
            return cls.model_validate(sections)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e
