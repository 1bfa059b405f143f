"""
Entry point: preview the "make parallel" rotation on a model snapshot.

Usage:
    python main.py <model.json> --reference ID --target ID [--config PATH] [--tolerance RAD] [--json] [-v]
    python main.py --init-config [PATH]

Example:
    python main.py "level1.json" --reference 101 --target 205
    python main.py "level1.json" -r 101 -t 205 --json          # machine-readable
    python main.py "level1.json" -r 101 -t 205 -c team.make_parallel.json
    python main.py "level1.json" -r 101 -t 205 --tolerance 0.01
    python main.py --init-config                               # writes .make_parallel.json
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

import numpy as np

from make_parallel.analysis.direction import DirectionExtractor
from make_parallel.command import CommandResult, CommandStatus, MakeParallelCommand
from make_parallel.errors import ModelLoadError
from make_parallel.geometry.rotation import rotate_direction
from make_parallel.geometry.vectors import Line
from make_parallel.io.model_loader import load_model
from make_parallel.logging_config import configure_default_logging, setup_logging
from make_parallel.model.document import Document
from make_parallel.model.elements import Element
from make_parallel.project_config import (
    CONFIG_FILENAME,
    ProjectConfig,
    apply_config_to_globals,
    create_sample_config,
    load_config,
    merge_configs,
)

logger = logging.getLogger("make_parallel.main")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNEXPECTED = 2
EXIT_CANCELLED = 130


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def run_preview(
    document: Document,
    reference_id: int,
    target_id: int,
    config: Optional[ProjectConfig] = None,
) -> Dict[str, Any]:
    """Run the command against a snapshot without modifying it.

    The rotator records what the host would do: which element turns, about
    which axis, and the target direction after the turn.

    Returns:
        Report dict with status, message, instruction and preview fields.
    """
    if config is not None:
        apply_config_to_globals(config)

    ids = iter((reference_id, target_id))
    extractor = DirectionExtractor(document)
    preview: Dict[str, Any] = {}

    def pick(prompt: str) -> Optional[Element]:
        element_id = next(ids)
        element = document.get_element(element_id)
        logger.info("%s: %s", prompt, element if element is not None else f"no element {element_id}")
        return element

    def rotate(element: Element, axis: Line, angle: float) -> None:
        target = document.get_element(target_id)
        direction = extractor.get_direction(target)
        preview["rotated_element_id"] = element.id
        preview["target_direction_before"] = direction.tolist()
        preview["target_direction_after"] = rotate_direction(direction, axis, angle).tolist()

    result = MakeParallelCommand(document).execute(pick, rotate)
    return _report(result, preview)


def _report(result: CommandResult, preview: Dict[str, Any]) -> Dict[str, Any]:
    report: Dict[str, Any] = {
        "status": result.status.value,
        "message": result.message,
        "instruction": None if result.instruction is None else result.instruction.to_dict(),
    }
    report.update(preview)
    return report


def _format_report(report: Dict[str, Any]) -> str:
    lines = [f"Status: {report['status']}", report["message"]]
    instruction = report.get("instruction")
    if instruction and instruction["axis"] is not None:
        axis = instruction["axis"]
        lines.append(f"Angle: {instruction['angle']:.6f} rad ({instruction['degrees']:.3f}°)")
        lines.append(f"Axis origin: {np.round(axis['origin'], 6).tolist()}")
        lines.append(f"Axis direction: {np.round(axis['direction'], 6).tolist()}")
    if "target_direction_after" in report:
        lines.append(f"Rotated element: {report['rotated_element_id']}")
        lines.append(f"Target direction after: {np.round(report['target_direction_after'], 6).tolist()}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Preview the rotation that makes a target element parallel to a reference.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "model_file",
        nargs="?",
        help="Path to the JSON model snapshot.",
    )
    parser.add_argument(
        "--reference", "-r",
        type=int,
        help="Id of the reference element (stays put).",
    )
    parser.add_argument(
        "--target", "-t",
        type=int,
        help="Id of the element to rotate.",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to a .make_parallel.json configuration file.",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        metavar="RAD",
        help="Parallel tolerance in radians (overrides the config file).",
    )
    parser.add_argument(
        "--init-config",
        nargs="?",
        const=CONFIG_FILENAME,
        default=None,
        metavar="PATH",
        help=f"Write a sample configuration file (default: {CONFIG_FILENAME}) and exit.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log strategy resolution at DEBUG level.",
    )
    args = parser.parse_args(argv)
    if args.init_config is None:
        missing = [name for name in ("model_file", "reference", "target") if getattr(args, name) is None]
        if missing:
            parser.error("the following arguments are required: " + ", ".join(missing))
    return args


def main(argv=None) -> int:
    args = _parse_args(argv)

    if args.init_config is not None:
        configure_default_logging(args.verbose)
        try:
            create_sample_config(args.init_config)
        except OSError as exc:
            logger.critical("Cannot write config: %s", exc)
            return EXIT_FAILED
        return EXIT_OK

    config = load_config(model_path=args.model_file, explicit_config=args.config)
    if args.tolerance is not None:
        override = ProjectConfig()
        override.calculator.parallel_tolerance_rad = args.tolerance
        config = merge_configs(config, override)
    level = logging.DEBUG if args.verbose else config.log_level
    setup_logging(level=level, json_file=config.logging.json_file, use_colors=config.logging.use_colors)

    try:
        document, _info = load_model(args.model_file)
        report = run_preview(document, args.reference, args.target, config=config)
    except ModelLoadError as exc:
        logger.critical("Model load error: %s", exc)
        return EXIT_FAILED
    except ValueError as exc:
        logger.critical("Configuration error: %s", exc)
        return EXIT_FAILED
    except Exception as exc:
        logger.critical("Unexpected error: %s", exc, exc_info=True)
        return EXIT_UNEXPECTED

    print(json.dumps(report, indent=2, ensure_ascii=False) if args.json else _format_report(report))

    status = CommandStatus(report["status"])
    if status is CommandStatus.CANCELLED:
        return EXIT_CANCELLED
    return EXIT_OK if status is CommandStatus.SUCCEEDED else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
