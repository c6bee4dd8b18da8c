"""
docaudit - hyperlink audit for office documents.

Scans a directory tree for .docx/.pptx files, probes every hyperlink they
contain and writes a self-contained HTML report.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List, Optional, Sequence

from docaudit.core.managers.config_manager import config_manager
from docaudit.core.utils.configure_logging import configure_logger
from docaudit.core.utils.path_utils import PathUtils
from docaudit.model import AuditSettings
from linkcheck.controllers.validation_controller import ValidationController
from linkcheck.exceptions import ConfigurationError, ReportWriteFailed
from linkcheck.model import Document, Report
from linkcheck.services.document_scan_service import DocumentScanService
from linkcheck.services.generate_default_user_agent_service import generate_default_user_agent
from linkcheck.services.link_extract_service import LinkExtractService
from linkcheck.services.link_filter_service import LinkFilterService
from linkcheck.services.reachability_probe_service import ReachabilityProbeService
from linkcheck.utils.run_timers import RunTimers
from reporter.services.report_export_service import ReportExportService
from reporter.services.report_render_service import ReportRenderService
from reporter.utils.launcher import open_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_BROKEN_LINKS = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docaudit",
        description="Check the hyperlinks in .docx and .pptx documents and write an HTML report.",
    )
    parser.add_argument(
        "roots", nargs="*", default=["."], metavar="ROOT",
        help="Directories to scan recursively (default: the current directory).",
    )
    parser.add_argument("--timeout", type=float, help="Seconds to wait for each link (default from settings: 5).")
    parser.add_argument("--concurrency", type=int, help="Maximum number of links checked at the same time.")
    parser.add_argument(
        "--keep-mailto", dest="exclude_mailto", action="store_const", const=False, default=None,
        help="Also check mailto: links (they are skipped by default).",
    )
    parser.add_argument("--output", "-o", help="Report file (default: report.html in the working directory).")
    parser.add_argument("--export", help="Also export the link results as CSV, or JSON if the name ends in .json.")
    parser.add_argument(
        "--no-open", dest="open_report", action="store_const", const=False, default=None,
        help="Do not open the report in the default viewer.",
    )
    parser.add_argument(
        "--no-progress", dest="show_progress", action="store_const", const=False, default=None,
        help="Hide the progress bar.",
    )
    parser.add_argument("--config", help="Alternative settings.json file.")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...).")
    parser.add_argument(
        "--fail-on-broken", action="store_true",
        help=f"Exit with status {EXIT_BROKEN_LINKS} when broken links are found.",
    )
    return parser


def build_settings(args: argparse.Namespace) -> AuditSettings:
    overrides = {
        "filter": {"exclude_mailto": args.exclude_mailto},
        "probe": {"timeout": args.timeout, "concurrency": args.concurrency},
        "report": {
            "name": args.output,
            "open": args.open_report,
            "show_progress": args.show_progress,
            "export_path": args.export,
        },
    }
    return AuditSettings.from_config(config_manager.get_all(), overrides)


def scan_documents(settings: AuditSettings, roots: Sequence[str]) -> List[Document]:
    extractor = LinkExtractService(settings.scan)
    link_filter = LinkFilterService(settings.filter)
    scanner = DocumentScanService(settings.scan, extractor, link_filter)
    return scanner.scan_many(roots)


async def validate_documents(settings: AuditSettings, documents: List[Document], roots: Sequence[str]) -> Report:
    user_agent = generate_default_user_agent(settings.probe.chrome_version)
    async with ReachabilityProbeService(settings.probe, user_agent) as prober:
        controller = ValidationController(prober, show_progress=settings.report.show_progress)
        try:
            return await controller.validate(documents, roots)
        finally:
            await controller.shutdown()


def run_audit(settings: AuditSettings, roots: Sequence[str]) -> Report:
    """Scans all roots and validates the documents found. Returns the finished report."""
    documents = scan_documents(settings, roots)
    return asyncio.run(validate_documents(settings, documents, roots))


def publish_report(settings: AuditSettings, report: Report) -> None:
    """
    Writes the HTML report (and the optional export), then opens it.

    Raises:
        ReportWriteFailed: If an artifact cannot be written.
    """
    output_path = PathUtils.resolve_output_path(settings.report.name)
    ReportRenderService().write(report, output_path)

    if settings.report.export_path:
        ReportExportService().export(report, PathUtils.resolve_output_path(settings.report.export_path))

    if settings.report.open:
        open_report(output_path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.config:
        config_manager.reset(args.config)
    if args.log_level:
        config_manager.set_nested("debug.level", args.log_level.upper())
    configure_logger(
        config_manager.get_nested("debug.level", "INFO"),
        module_specific_levels=config_manager.get_nested("debug.modules"),
    )

    try:
        settings = build_settings(args)
    except ConfigurationError as e:
        logger.error("%s", e)
        return EXIT_FATAL

    timer = RunTimers()
    timer.start()
    print("Checking documents. Please wait ..")

    try:
        report = run_audit(settings, args.roots)
    except KeyboardInterrupt:
        logger.warning("Interrupted, outstanding link checks were cancelled.")
        return EXIT_INTERRUPTED

    try:
        publish_report(settings, report)
    except ReportWriteFailed as e:
        logger.error("%s", e)
        return EXIT_FATAL

    timer.stop()
    logger.info("Finished! (it took %s)", timer.format())

    if args.fail_on_broken and not report.all_valid:
        return EXIT_BROKEN_LINKS
    return EXIT_OK
