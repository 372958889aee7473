#!/usr/bin/env python3
"""Command line front end: encode a payload, build the solid, export STL.

Usage:
    qrsolid text [TEXT] [-o DIR] [--ascii] [--dxf] [--view]
    qrsolid wifi --ssid NAME [--security WPA] [--password SECRET] [--hidden]
    qrsolid inspect FILE.stl

Examples:
    # Print the default "Hello World" code into ./QR Code.stl
    qrsolid text

    # Guest network, hidden SSID, larger plate
    qrsolid wifi --ssid Guest --security WPA --password hunter2 --hidden \
        --footprint 100 --border 8 -o out/

    # Stream the mesh to another tool
    qrsolid text "https://example.org" -o - > code.stl
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from pathlib import Path
from typing import List, Optional

from qrsolid import __version__
from qrsolid.app import BarcodeModel
from qrsolid.config import CONFIG_FILENAME, ModelConfig
from qrsolid.errors import QrSolidError
from qrsolid.geometry_checks import check_layout
from qrsolid.io.sink import DirectorySink, StreamSink
from qrsolid.io.stl import read_stl, write_stl
from qrsolid.logging_config import setup_logging
from qrsolid.payload import WifiNetwork

logger = logging.getLogger("qrsolid.cli")


def _add_model_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None,
                        help=f"YAML configuration file (default: ./{CONFIG_FILENAME} if present).")
    parser.add_argument("--footprint", type=float, default=None, dest="footprint_mm",
                        help="Edge length of the module field in mm.")
    parser.add_argument("--border", type=float, default=None, dest="border_mm",
                        help="Margin around the module field in mm.")
    parser.add_argument("--module-thickness", type=float, default=None, dest="module_thickness_mm",
                        help="Height of each dark module in mm.")
    parser.add_argument("--base-thickness", type=float, default=None, dest="base_thickness_mm",
                        help="Height of the base plate in mm.")
    parser.add_argument("--ecc", choices=["LOW", "MEDIUM", "QUARTILE", "HIGH"], default=None,
                        help="Error correction level (default LOW).")
    parser.add_argument("-o", "--output", default=".",
                        help="Output directory, or '-' to write the STL to stdout.")
    parser.add_argument("--name", default=None, dest="export_name",
                        help="File name of the exported mesh.")
    parser.add_argument("--ascii", action="store_true", help="Write ASCII instead of binary STL.")
    parser.add_argument("--dxf", action="store_true", help="Also write a flat DXF drawing.")
    parser.add_argument("--overwrite", action="store_true",
                        help="Allow replacing existing files in the output directory.")
    parser.add_argument("--view", action="store_true",
                        help="Open the interactive viewer instead of exporting right away.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qrsolid",
        description="Turn QR codes into printable 3D models.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")

    sub = parser.add_subparsers(dest="command", required=True)

    text = sub.add_parser("text", help="Encode arbitrary text.")
    text.add_argument("text", nargs="?", default=None, help="Payload (default from configuration).")
    _add_model_options(text)

    wifi = sub.add_parser("wifi", help="Encode Wi-Fi credentials.")
    wifi.add_argument("--ssid", required=True)
    wifi.add_argument("--security", default="WPA", help="WPA, WEP, or 'none' (default WPA).")
    wifi.add_argument("--password", default="")
    wifi.add_argument("--hidden", action="store_true", help="The network does not broadcast its SSID.")
    _add_model_options(wifi)

    inspect = sub.add_parser("inspect", help="Summarize an existing STL file.")
    inspect.add_argument("path", type=Path)

    return parser


def _load_config(args: argparse.Namespace) -> ModelConfig:
    path = args.config
    if path is None and Path(CONFIG_FILENAME).exists():
        path = Path(CONFIG_FILENAME)
    config = ModelConfig.load(path) if path is not None else ModelConfig()
    return config.replace(
        footprint_mm=args.footprint_mm,
        border_mm=args.border_mm,
        module_thickness_mm=args.module_thickness_mm,
        base_thickness_mm=args.base_thickness_mm,
        ecc=args.ecc,
        export_name=args.export_name,
    )


def _export(model: BarcodeModel, args: argparse.Namespace) -> None:
    if args.output == "-":
        sink = StreamSink(sys.stdout.buffer)
    else:
        sink = DirectorySink(args.output, overwrite=args.overwrite)

    if args.ascii:
        text = io.StringIO()
        write_stl(model.mesh(), text, binary=False)
        sink.write(text.getvalue().encode("ascii"), model.config.export_name)
    else:
        model.export(sink)

    if args.dxf:
        if args.output == "-":
            logger.warning("--dxf is ignored when the mesh goes to stdout")
        else:
            model.export_sketch(sink)


def _run_model(args: argparse.Namespace) -> int:
    config = _load_config(args)
    model = BarcodeModel(config)

    if args.command == "wifi":
        network = WifiNetwork(ssid=args.ssid, security=args.security,
                              password=args.password, hidden=args.hidden)
        model.draw_network(network)
    else:
        model.draw(args.text if args.text is not None else config.initial_text)

    layout = check_layout(model.scene.current())
    for warning in layout.warnings:
        logger.warning("layout: %s", warning)

    if args.view:
        from qrsolid.viewer import view_scene  # imported lazily; needs a display

        sink = DirectorySink(args.output if args.output != "-" else ".", overwrite=True)

        def export_from_viewer() -> None:
            try:
                model.export(sink)
            except QrSolidError as exc:
                logger.error("export failed: %s", exc)

        view_scene(model.scene, on_export=export_from_viewer)
        return 0

    _export(model, args)
    return 0


def _run_inspect(args: argparse.Namespace) -> int:
    buffer = read_stl(args.path)
    size = args.path.stat().st_size
    print(f"{args.path}: {buffer.triangle_count} triangles, header {buffer.name!r}")
    if size == buffer.byte_size:
        print(f"binary layout ok ({size} bytes)")
    else:
        print(f"size {size} bytes does not match binary layout ({buffer.byte_size} bytes)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    setup_logging(level, args.log_file)

    try:
        if args.command == "inspect":
            return _run_inspect(args)
        return _run_model(args)
    except (QrSolidError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
