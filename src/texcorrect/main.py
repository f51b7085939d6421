import argparse
import sys
from pathlib import Path
from typing import List, Optional

from texcorrect.config import load_runtime_config
from texcorrect.config.runtime import RuntimeConfig
from texcorrect.core.client import CorrectionClient, PollingPolicy
from texcorrect.core.logging_setup import configure_logging, get_logger
from texcorrect.core.markers import scan_markers
from texcorrect.core.pipeline import CorrectionPipeline
from texcorrect.core.state import DocumentState, ProcessingStatus
from texcorrect.drivers.process import DriverProcess
from texcorrect.drivers.webdriver import WebDriverOracle
from texcorrect.exceptions import DocumentIOError, TexCorrectError

logger = get_logger(__name__)


def read_document(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentIOError(f"Cannot read {path}: {exc}", path=str(path)) from exc


def write_document(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise DocumentIOError(f"Cannot write {path}: {exc}", path=str(path)) from exc


def correct_with_browser(cfg: RuntimeConfig, text: str, source: Path) -> DocumentState:
    """Bracket the run with the driver process and the browser session."""
    policy = PollingPolicy.from_millis(cfg.oracle.poll_interval_ms, cfg.oracle.poll_attempts)
    with DriverProcess(cfg.driver.binary, cfg.driver.endpoint):
        with WebDriverOracle(cfg.oracle, cfg.driver) as oracle:
            pipeline = CorrectionPipeline(CorrectionClient(oracle, policy), cfg.segmentation)
            return pipeline.run(text, source_path=source)


def run(cfg: RuntimeConfig, source: Path, output: Path) -> DocumentState:
    text = read_document(source)

    regions = scan_markers(text, cfg.segmentation.start_marker, cfg.segmentation.end_marker)
    if regions.has_working:
        state = correct_with_browser(cfg, text, source)
    else:
        # Nothing to correct: skip the browser entirely.
        logger.info("no_working_region", start_marker=cfg.segmentation.start_marker)
        state = DocumentState(source_path=source, output=text, status=ProcessingStatus.COMPLETED)

    write_document(output, state.output)
    logger.info("document_written", path=str(output), chunks=state.chunks, batches=state.batches)
    return state


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Correct the prose between %CORRECT_START and %CORRECT_END in a LaTeX file"
    )
    parser.add_argument("input", type=Path, help="Path to the LaTeX document")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output path (default: corrected.tex)")
    parser.add_argument("-c", "--config", type=Path, default=None, help="YAML overlay for the runtime config")
    parser.add_argument("--log-level", default=None, help="Log level")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_runtime_config(args.config)
    except TexCorrectError as e:
        configure_logging()
        logger.error("config_invalid", error=str(e))
        return 1

    configure_logging(
        args.log_level or cfg.output.log_level,
        json_logs=args.json_logs or cfg.output.log_format == "json",
        driver_log_level=cfg.output.driver_log_level,
    )

    output = args.output or cfg.output.path
    logger.info("opening", path=str(args.input))
    try:
        state = run(cfg, args.input, output)
    except TexCorrectError as e:
        logger.error("correction_failed", error=str(e))
        return 1

    for line in state.processing_log:
        logger.info("summary", message=line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
