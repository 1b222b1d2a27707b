"""
SafeSpace Detection CLI
Run safety-equipment detection or a degraded-conditions simulation on an image.

Commands:
  detect IMAGE      Detect equipment and write an annotated copy
  simulate IMAGE    Apply lighting/occlusion, then detect
  presets           List environment presets
  --validate        Check configuration validity
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2

from .config import (
    Config,
    get_preset,
    load_config,
    simulation_parameters,
)
from .config.presets import ENVIRONMENT_PRESETS
from .core import DetectionSession, OverlayStyle, PassOutcome
from .core.estimates import estimate
from .errors import ConfigurationError, ConfigValidationError
from .models import EffectParameters
from .utils.timefmt import time_ago

logger = logging.getLogger(__name__)


def setup_logging(quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
    """
    level = logging.WARNING if quiet else logging.INFO

    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("safespace.", "ss.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="safespace",
        description="SafeSpace - detect safety-critical equipment in images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  safespace detect station.jpg                      # Annotated copy in output/
  safespace simulate station.jpg --preset "Dim Lighting"
  safespace simulate station.jpg --lighting 0.2 --occlusion 0.5
  safespace presets
  safespace --validate

Environment Variables:
  SAFESPACE_MODEL_FILE - Override detection.model_file
  SAFESPACE_DEVICE     - Override detection.device
        """,
    )
    parser.add_argument("-c", "--config", help="Path to config file")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument(
        "--validate", action="store_true", help="Validate configuration and exit"
    )

    sub = parser.add_subparsers(dest="command")

    detect = sub.add_parser("detect", help="Detect equipment in an image")
    detect.add_argument("image", help="Input image path")
    detect.add_argument("-o", "--output", help="Annotated output path")

    simulate = sub.add_parser("simulate", help="Simulate conditions, then detect")
    simulate.add_argument("image", help="Input image path")
    simulate.add_argument("--preset", help="Environment preset name")
    simulate.add_argument("--lighting", type=float, help="Lighting level 0-1")
    simulate.add_argument("--occlusion", type=float, help="Occlusion level 0-1")
    simulate.add_argument("-o", "--output", help="Annotated output path")

    sub.add_parser("presets", help="List environment presets")

    args = parser.parse_args(argv)
    if not args.validate and args.command is None:
        parser.error("a command is required (detect, simulate, presets) or --validate")
    return args


def build_session(config: Config) -> DetectionSession:
    """Create a session from config. Detection may come back disabled."""
    style = OverlayStyle(
        line_width=config.overlay.line_width,
        label_height=config.overlay.label_height,
        label_alpha=config.overlay.label_alpha,
    )
    session = DetectionSession.with_model_file(
        config.detection.model_file,
        config.detection.device,
        backend_confidence=config.detection.backend_confidence,
        threshold=config.detection.confidence_threshold,
        overlay_style=style,
    )
    session.set_simulation(simulation_parameters(config))
    return session


def resolve_effects(args: argparse.Namespace, defaults: EffectParameters) -> EffectParameters:
    """Preset first, then explicit levels on top."""
    params = defaults
    if args.preset:
        params = get_preset(args.preset).parameters
    return EffectParameters(
        lighting=params.lighting if args.lighting is None else args.lighting,
        occlusion=params.occlusion if args.occlusion is None else args.occlusion,
    )


def default_output_path(config: Config, image_path: str, suffix: str) -> Path:
    stem = Path(image_path).stem
    return Path(config.output.image_dir) / f"{stem}_{suffix}.jpg"


def print_outcome(session: DetectionSession, outcome: PassOutcome) -> None:
    """Print detections, alerts and metrics for one pass."""
    print("\n" + "=" * 70)
    if outcome.error is not None and not outcome.applied:
        print(f"PASS FAILED: {type(outcome.error).__name__}: {outcome.error}")
        print("=" * 70)
        return

    print(f"DETECTIONS ({len(outcome.detections)})")
    print("=" * 70)
    for detection in outcome.detections:
        box = detection.box
        hazard = "  [HAZARD]" if detection.is_hazard else ""
        print(
            f"  {detection.name:<24} {detection.confidence_pct:>3}%  "
            f"x={box.x:.3f} y={box.y:.3f} w={box.width:.3f} h={box.height:.3f}{hazard}"
        )

    snapshot = session.aggregator.snapshot()
    print(f"\nDetection accuracy: {snapshot.detection_accuracy * 100:.0f}%")
    print(f"Processing time:    {snapshot.processing_time_ms:.1f} ms")

    if outcome.alerts:
        print("\nALERTS")
        for alert in outcome.alerts:
            print(f"  [{alert.severity.value}] {alert.title} - {alert.message} ({time_ago(alert.timestamp)})")
    print("=" * 70 + "\n")


def write_image(path: Path, image) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), image):
        logger.error(f"Failed to write {path}")
        return
    print(f"Annotated image: {path}")


def run_validate(config_path: str | None) -> int:
    """Validate configuration and report."""
    try:
        config = load_config(config_path)
    except ConfigValidationError as e:
        print(f"INVALID: {e}")
        return 1

    print("Configuration valid")
    print(f"  Model:       {config.detection.model_file} ({config.detection.device})")
    print(f"  Threshold:   {config.detection.confidence_threshold}")
    params = simulation_parameters(config)
    print(
        f"  Environment: {config.simulation.environment} "
        f"(lighting={params.lighting}, occlusion={params.occlusion})"
    )
    if not Path(config.detection.model_file).exists():
        print(f"  Warning: model file not found: {config.detection.model_file}")
    return 0


def run_presets() -> int:
    print(f"{'Environment':<22}{'Lighting':>10}{'Occlusion':>11}")
    for preset in ENVIRONMENT_PRESETS:
        print(f"{preset.name:<22}{preset.lighting:>10.1f}{preset.occlusion:>11.1f}")
    return 0


def run_detection_command(args: argparse.Namespace, config: Config) -> int:
    """Run detect or simulate against a single image."""
    with build_session(config) as session:
        if not session.available:
            logger.error(f"Detection unavailable: {session.disabled_reason}")
            return 2

        if args.command == "simulate":
            try:
                params = resolve_effects(args, session.simulation)
            except ValueError as e:
                logger.error(str(e))
                return 1
            print(f"Simulating lighting={params.lighting:.2f}, occlusion={params.occlusion:.2f}")
            outcome = session.simulate(args.image, params.lighting, params.occlusion).result()
            suffix = "simulated"
        else:
            session.start()
            outcome = session.submit(args.image).result()
            suffix = "annotated"

        print_outcome(session, outcome)
        if args.command == "simulate" and outcome.applied:
            est = estimate(params, outcome.detections)
            print(
                f"Estimate: accuracy {est.accuracy_pct}%, objects {est.objects_found}, "
                f"time {est.detection_time_ms} ms, failure rate {est.failure_rate_pct}%"
            )

        if outcome.overlay is not None:
            output = Path(args.output) if args.output else default_output_path(
                config, args.image, suffix
            )
            write_image(output, outcome.overlay)
        return 0 if outcome.applied else 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(quiet=args.quiet or args.validate or args.command == "presets")

    if args.validate:
        sys.exit(run_validate(args.config))

    if args.command == "presets":
        sys.exit(run_presets())

    try:
        config = load_config(args.config)
    except ConfigValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        sys.exit(run_detection_command(args, config))
    except ConfigurationError as e:
        logger.error(f"Detection unavailable: {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
