# src/reporter/services/report_render_service.py
import logging
import os
from pathlib import Path
from typing import Union

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from linkcheck.exceptions import ReportWriteFailed
from linkcheck.model import Report
from reporter.utils.path_display import displayable_path

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def absolute_path(path: str) -> str:
    """Template filter: absolute, displayable form of a path."""
    if not os.path.isabs(path):
        try:
            path = os.path.abspath(path)
        except (OSError, ValueError):
            pass
    return displayable_path(path)


class ReportRenderService:
    """
    Renders a Report into a single self-contained HTML file.
    """

    def __init__(self, template_name: str = "report.html.j2", template_dir: Path = TEMPLATE_DIR):
        self.template_name = template_name
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["absolute_path"] = absolute_path
        self.env.filters["display_path"] = displayable_path

    def render(self, report: Report) -> str:
        try:
            template = self.env.get_template(self.template_name)
            return template.render(report=report)
        except TemplateError as e:
            raise ReportWriteFailed(f"Could not fill the template with report data: {e}") from e

    def write(self, report: Report, output_path: Union[str, Path]) -> Path:
        """
        Renders and writes the report.

        Raises:
            ReportWriteFailed: If rendering fails or the file cannot be written.
        """
        output_path = Path(output_path)
        html = self.render(report)
        try:
            output_path.write_text(html, encoding="utf-8", errors="replace")
        except (OSError, UnicodeError) as e:
            raise ReportWriteFailed(f"Could not write report to {output_path}: {e}") from e

        logger.info("Report written to %s", output_path.resolve())
        return output_path
