# src/reporter/services/report_export_service.py
import logging
from pathlib import Path
from typing import Union

import pandas as pd

from linkcheck.exceptions import ReportWriteFailed
from linkcheck.model import Report
from reporter.utils.path_display import displayable_path

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "document", "kind", "document_valid", "extraction_error",
    "url", "state", "status_code", "error",
]


class ReportExportService:
    """
    Flattens the link results of a Report into a table and exports it.
    The format follows the file suffix: '.json' writes records, anything else CSV.
    """

    @staticmethod
    def to_dataframe(report: Report) -> pd.DataFrame:
        rows = []
        for document in report.documents:
            base = {
                "document": displayable_path(document.path),
                "kind": document.kind.value,
                "document_valid": document.is_valid,
                "extraction_error": document.extraction_error,
            }
            if not document.links:
                # Keep link-less documents visible in the export
                rows.append({**base, "url": None, "state": None, "status_code": None, "error": None})
                continue
            for link in document.links:
                rows.append({
                    **base,
                    "url": link.url,
                    "state": link.state.value,
                    "status_code": link.status_code,
                    "error": link.error,
                })
        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        df["status_code"] = df["status_code"].astype("Int64")
        return df

    def export(self, report: Report, output_path: Union[str, Path]) -> Path:
        output_path = Path(output_path)
        df = self.to_dataframe(report)
        try:
            if output_path.suffix.lower() == ".json":
                df.to_json(output_path, orient="records", indent=2)
            else:
                df.to_csv(output_path, index=False)
        except (OSError, UnicodeError) as e:
            raise ReportWriteFailed(f"Could not export results to {output_path}: {e}") from e

        logger.info("Exported %d row(s) to %s", len(df), output_path.resolve())
        return output_path
