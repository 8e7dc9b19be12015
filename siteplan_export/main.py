"""
Site Plan Exporter - Main CLI

Exports a sketched site plan (scene JSON) to a 3D OBJ model and a 2D DXF
drawing.

Usage:
    python -m siteplan_export.main --scene <path> [--format obj|dxf|all]

Example:
    python -m siteplan_export.main --scene ./plan.json --output-dir ./output --site-width 30
"""

import argparse
import json
import logging
import os
import sys
import time
from dataclasses import dataclass, field, asdict
from typing import Any, List, Dict, Optional

from . import __version__
from .config import ExportConfig, DEFAULT_OUTPUT_NAME, SUPPORTED_FORMATS
from .errors import SceneFormatError
from .io.scene_loader import load_scene
from .io.obj_exporter import build_obj_document, write_obj, write_text, validate_obj_text
from .io.dxf_exporter import build_dxf_document
from .processing.area_stats import compute_area_stats


@dataclass
class PipelineStats:
    """Statistics from the export run."""
    boundary_points: int = 0
    zones: int = 0
    roads: int = 0
    elevations: int = 0
    obj_vertices: int = 0
    obj_faces: int = 0
    obj_lines: int = 0
    obj_groups: int = 0
    dxf_entities: int = 0
    skipped_entities: int = 0
    processing_time_ms: int = 0
    warnings: List[str] = field(default_factory=list)


@dataclass
class PipelineReport:
    """Report from export run."""
    name: str
    version: str
    success: bool
    stats: PipelineStats
    output_files: List[str]
    errors: List[str] = field(default_factory=list)
    skipped: List[Dict[str, Any]] = field(default_factory=list)
    area_stats: Dict[str, float] = field(default_factory=dict)
    dxf_layer_counts: Dict[str, int] = field(default_factory=dict)
    mesh_bounds: Optional[List[List[float]]] = None
    config_used: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PipelineResult:
    """
    Complete result of an export run.

    Attributes:
        success: Whether every requested format was written
        report: Detailed statistics and metadata
        obj_path: Path to the OBJ file (if exported)
        dxf_path: Path to the DXF file (if exported)
        report_path: Path to the JSON report
    """
    success: bool
    report: PipelineReport
    obj_path: Optional[str] = None
    dxf_path: Optional[str] = None
    report_path: Optional[str] = None


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging to console and optionally to file.

    Args:
        verbose: If True, use DEBUG level; otherwise INFO
        log_file: Optional path to log file. If provided, logs will be written to file.
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)


def run_export(scene_path: str, config: ExportConfig) -> PipelineResult:
    """
    Run the complete export pipeline for one scene file.

    Steps:
    1. Load the scene JSON
    2. Build and write the OBJ + MTL (if requested)
    3. Build and write the DXF (if requested)
    4. Compute area statistics
    5. Write the JSON report

    Args:
        scene_path: Path to scene JSON
        config: Export configuration

    Returns:
        PipelineResult with report and file paths

    Raises:
        FileNotFoundError: If the scene file doesn't exist
        SceneFormatError: If the scene document is invalid
    """
    logger = logging.getLogger(__name__)

    start_time = time.time()
    stats = PipelineStats()
    errors: List[str] = []
    output_files: List[str] = []

    os.makedirs(config.output_dir, exist_ok=True)

    # Step 1: Load scene
    scene = load_scene(scene_path, site_width_meters=config.site_width_meters)
    stats.boundary_points = len(scene.boundary)
    stats.zones = len(scene.zones)
    stats.roads = len(scene.roads)
    stats.elevations = len(scene.elevations)

    skipped = []
    dxf_layer_counts: Dict[str, int] = {}
    mesh_bounds = None
    obj_path = None
    dxf_path = None

    # Step 2: OBJ
    if 'obj' in config.formats:
        logger.info("Exporting OBJ mesh")
        try:
            document = build_obj_document(scene, config)
            obj_path = os.path.join(config.output_dir, f"{config.name}.obj")
            output_files.extend(write_obj(document, obj_path))

            stats.obj_vertices = document.stats.total_vertices
            stats.obj_faces = document.stats.total_faces
            stats.obj_lines = document.stats.total_lines
            stats.obj_groups = document.stats.total_groups
            stats.warnings.extend(document.result.warnings)
            skipped = document.result.skipped

            bounds = document.result.mesh.compute_bounds()
            if bounds:
                mesh_bounds = [list(bounds[0]), list(bounds[1])]

            obj_errors = validate_obj_text(document.obj_text)
            if obj_errors:
                stats.warnings.extend([f"OBJ: {e}" for e in obj_errors])

        except (OSError, ValueError) as e:
            errors.append(f"Failed to export OBJ: {e}")
            obj_path = None

    # Step 3: DXF
    if 'dxf' in config.formats:
        logger.info("Exporting DXF drawing")
        try:
            drawing = build_dxf_document(scene, config)
            dxf_path = os.path.join(config.output_dir, f"{config.name}.dxf")
            size = write_text(drawing.text, dxf_path)
            logger.info(f"Wrote {dxf_path} ({size} bytes)")
            output_files.append(dxf_path)

            dxf_layer_counts = drawing.entity_counts
            stats.dxf_entities = sum(drawing.entity_counts.values())
            if not skipped:
                skipped = drawing.skipped

        except (OSError, ValueError) as e:
            errors.append(f"Failed to export DXF: {e}")
            dxf_path = None

    stats.skipped_entities = len(skipped)
    if skipped:
        logger.info(f"Skipped {len(skipped)} degenerate entities")
        for entity in skipped:
            logger.debug(f"  {entity.describe()}")

    # Step 4: Area statistics
    area_stats = compute_area_stats(scene)
    logger.info(
        f"Site area {area_stats.site_total:.1f} m^2, "
        f"zoned {area_stats.zoned_total:.1f} m^2"
    )

    # Step 5: Report
    elapsed_ms = int((time.time() - start_time) * 1000)
    stats.processing_time_ms = elapsed_ms

    config_used = asdict(config)
    config_used['pixel_to_meter_scale'] = scene.pixel_to_meter_scale

    report = PipelineReport(
        name=config.name,
        version=__version__,
        success=len(errors) == 0,
        stats=stats,
        output_files=output_files,
        errors=errors,
        skipped=[
            {
                'kind': s.kind.value,
                'index': s.index,
                'point_count': s.point_count,
                'reason': s.reason.value,
            }
            for s in skipped
        ],
        area_stats=area_stats.to_dict(),
        dxf_layer_counts=dxf_layer_counts,
        mesh_bounds=mesh_bounds,
        config_used=config_used,
    )

    report_path = os.path.join(config.output_dir, f"{config.name}_report.json")
    with open(report_path, 'w', encoding='utf-8') as f:
        json.dump(asdict(report), f, indent=2)
    output_files.append(report_path)
    logger.info(f"Report saved to {report_path}")

    logger.info(f"Export completed in {elapsed_ms}ms")

    return PipelineResult(
        success=report.success,
        report=report,
        obj_path=obj_path,
        dxf_path=dxf_path,
        report_path=report_path,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Site Plan Exporter - Export a sketched site plan to OBJ and DXF'
    )

    parser.add_argument(
        '--scene',
        required=True,
        help='Scene JSON file (boundary, roads, zones, elevations in pixels)'
    )

    parser.add_argument(
        '--output-dir',
        default='./output',
        help='Output directory for generated files (default: ./output)'
    )

    parser.add_argument(
        '--name',
        default=DEFAULT_OUTPUT_NAME,
        help=f'Output file stem (default: {DEFAULT_OUTPUT_NAME})'
    )

    parser.add_argument(
        '--format',
        choices=['obj', 'dxf', 'all'],
        default='all',
        help='Output format (default: all)'
    )

    parser.add_argument(
        '--site-width',
        type=float,
        default=0.0,
        help='Real site width in meters across the canvas (default: from scene)'
    )

    parser.add_argument(
        '--dimension-labels',
        action='store_true',
        help='Label boundary edge lengths in the DXF drawing'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--no-log-file',
        action='store_true',
        help='Disable log file output (only console)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    args = parser.parse_args(argv)

    # Create output directory early so we can put log file there
    os.makedirs(args.output_dir, exist_ok=True)

    log_file = None
    if not args.no_log_file:
        log_file = os.path.join(args.output_dir, f"{args.name}.log")

    setup_logging(args.verbose, log_file)

    formats = SUPPORTED_FORMATS if args.format == 'all' else (args.format,)

    try:
        config = ExportConfig(
            name=args.name,
            output_dir=args.output_dir,
            formats=formats,
            material_library=f"{args.name}.mtl",
            dimension_labels=args.dimension_labels,
            site_width_meters=args.site_width,
            verbose=args.verbose,
        )
    except ValueError as e:
        print(f"Invalid arguments: {e}")
        return 1

    try:
        result = run_export(args.scene, config)
        report = result.report

        if result.success:
            print(f"\nSuccess! Exported {args.scene}")
            if result.obj_path:
                print(
                    f"OBJ: {report.stats.obj_vertices} vertices, "
                    f"{report.stats.obj_faces} faces, {report.stats.obj_lines} lines"
                )
            if result.dxf_path:
                print(f"DXF: {report.stats.dxf_entities} entities")
            if report.skipped:
                print(f"Skipped entities: {report.stats.skipped_entities}")

            print(f"\nArea (m^2):")
            for bucket, value in report.area_stats.items():
                print(f"  {bucket}: {value:.1f}")

            print(f"Output files: {', '.join(report.output_files)}")
            if log_file:
                print(f"Log file: {log_file}")
            return 0
        else:
            print(f"\nExport failed with errors:")
            for error in report.errors:
                print(f"  - {error}")
            if log_file:
                print(f"See log file for details: {log_file}")
            return 1

    except (FileNotFoundError, SceneFormatError) as e:
        logging.getLogger(__name__).error(f"Cannot load scene: {e}")
        print(f"\nCannot load scene: {e}")
        return 1

    except Exception as e:
        logging.exception(f"Export failed: {e}")
        if log_file:
            print(f"See log file for details: {log_file}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
