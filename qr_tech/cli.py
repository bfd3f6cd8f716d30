"""CLI entry point for QR Tech Generator."""

import argparse
import logging
import sys
import threading
import time

from qr_tech import __version__


INTERACTIVE_HELP = """\
Enter a URL to generate its QR code. Other commands:
  :download   save the current QR code as a PNG file
  :copy       copy the current QR code to the clipboard
  :quit       exit
"""


class Spinner:
    """Simple terminal spinner shown while a QR code is being generated."""

    FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

    def __init__(self, message: str = "Generating...", enabled: bool = True):
        self._message = message
        self._enabled = enabled
        self._running = False
        self._thread: threading.Thread | None = None

    def start(self) -> "Spinner":
        if not self._enabled:
            return self
        self._running = True
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._thread:
            self._thread.join()
        # Clear spinner line
        sys.stderr.write("\r\033[K")
        sys.stderr.flush()

    def _spin(self) -> None:
        idx = 0
        while self._running:
            frame = self.FRAMES[idx % len(self.FRAMES)]
            sys.stderr.write(f"\r  {frame} {self._message}")
            sys.stderr.flush()
            time.sleep(0.1)
            idx += 1


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qr-tech",
        description="Turn a URL into a QR code you can save or copy to the clipboard.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate and preview a QR code in the terminal
  python -m qr_tech "https://example.com"

  # Save it as qr-tech-<timestamp>.png in ./codes and copy it to the clipboard
  python -m qr_tech "https://example.com" --download --output-dir codes --copy

  # Classic black-on-white, rendered with segno
  python -m qr_tech "https://example.com" --dark "#000000" --light "#ffffff" --backend segno

  # Interactive mode (enter URLs one per line)
  python -m qr_tech
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help="URL to encode (http:// or https://). Omit for interactive mode",
    )

    # Optional: export actions
    parser.add_argument(
        "--download", "-d",
        action="store_true",
        help="Save the QR code as qr-tech-<unix-millis>.png",
    )
    parser.add_argument(
        "--copy", "-c",
        action="store_true",
        help="Copy the QR code to the clipboard as image/png",
    )
    parser.add_argument(
        "--output-dir", "-o",
        default=None,
        help="Directory for downloaded files (default: $QR_TECH_OUTPUT_DIR or .)",
    )

    # Optional: rendering
    parser.add_argument(
        "--backend",
        default=None,
        choices=["qrcode", "segno"],
        help="QR encoding library (default: $QR_TECH_BACKEND or qrcode)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels. Default: 300",
    )
    parser.add_argument(
        "--margin",
        type=int,
        default=None,
        help="Quiet zone width in modules. Default: 2",
    )
    parser.add_argument(
        "--dark",
        default=None,
        help="Module colour. Default: #00f5ff",
    )
    parser.add_argument(
        "--light",
        default=None,
        help="Background colour. Default: #1a1a2e",
    )
    parser.add_argument(
        "--error-correction",
        default=None,
        choices=["L", "M", "Q", "H"],
        help="Error correction level. Default: M",
    )

    # Flags
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Decode the generated image to check it scans (requires pyzbar)",
    )
    parser.add_argument(
        "--no-preview",
        action="store_true",
        help="Do not print the QR code to the terminal",
    )
    parser.add_argument(
        "--drop-stale",
        action="store_true",
        help="Ignore results of generate requests superseded by a newer one",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def build_config(args: argparse.Namespace):
    """Apply CLI overrides on top of the environment-derived configuration."""
    from dataclasses import replace
    from qr_tech.config import load_config_from_env

    config = load_config_from_env()

    render_overrides = {
        name: value
        for name, value in (
            ("backend", args.backend),
            ("width", args.width),
            ("margin", args.margin),
            ("dark", args.dark),
            ("light", args.light),
            ("error_correction", args.error_correction),
        )
        if value is not None
    }
    if render_overrides:
        config = replace(config, render=replace(config.render, **render_overrides))
    if args.output_dir:
        config = replace(config, output_dir=args.output_dir)
    if args.drop_stale:
        config = replace(config, drop_stale=True)
    return config


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def _notify(message: str, ok: bool = True) -> None:
    """Transient notification; kept out of the result region."""
    if ok:
        print(f"  ✓ {message}")
    else:
        print(f"  ⚠️  {message}", file=sys.stderr)


def _generate(controller, text: str, args) -> bool:
    import asyncio
    from qr_tech.errors import QRTechError
    from qr_tech.image_utils import VerifyResult, verify_qr_scannable
    from qr_tech.state import LOADING_MESSAGE

    spinner = Spinner(LOADING_MESSAGE, enabled=sys.stderr.isatty()).start()
    try:
        artifact = asyncio.run(controller.submit(text))
    except QRTechError:
        spinner.stop()
        print(f"\n  ERROR: {controller.state.message}", file=sys.stderr)
        return False
    spinner.stop()

    if not args.no_preview:
        print(artifact.preview)
    created = time.strftime("%H:%M:%S", time.localtime(artifact.created_at))
    print(f"  ✓ QR code ready for: {artifact.url} (generated {created})")

    if args.verify:
        result, decoded = verify_qr_scannable(artifact.image)
        if result == VerifyResult.SCANNABLE:
            print(f"  ✓ QR code is SCANNABLE! Decoded: {decoded}")
        elif result == VerifyResult.SKIPPED:
            print(f"  ⊘ Verification skipped (pyzbar not installed)")
            print(f"    Install with: pip install pyzbar")
        else:
            print(f"  ⚠️  WARNING: QR code may not be scannable.", file=sys.stderr)
            print(f"     Try higher-contrast --dark/--light colours", file=sys.stderr)
    return True


def _download(controller) -> bool:
    from qr_tech.errors import ExportError

    try:
        path = controller.export_download()
    except ExportError as e:
        _notify(e.user_message, ok=False)
        return False
    _notify(f"Saved: {path}")
    return True


def _copy(controller) -> bool:
    import asyncio
    from qr_tech.errors import ExportError

    try:
        asyncio.run(controller.export_clipboard())
    except ExportError as e:
        _notify(e.user_message, ok=False)
        return False
    _notify("QR Code copied to clipboard!")
    return True


def run_interactive(controller, args, stdin=None) -> int:
    stdin = stdin or sys.stdin
    print(INTERACTIVE_HELP)

    while True:
        print("> ", end="", flush=True)
        line = stdin.readline()
        if not line:
            print()
            return 0

        command = line.strip()
        if command in (":quit", ":q"):
            return 0
        elif command in (":download", ":d"):
            _download(controller)
        elif command in (":copy", ":c"):
            _copy(controller)
        elif command in (":help", ":h"):
            print(INTERACTIVE_HELP)
        else:
            _generate(controller, line, args)


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Lazy imports for faster --help
    from qr_tech.controller import GeneratorController

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"\n  ERROR: {e}", file=sys.stderr)
        return 1

    controller = GeneratorController(config)

    if args.url is None:
        print(f"QR Tech Generator v{__version__}")
        print("=" * 50)
        return run_interactive(controller, args)

    if not _generate(controller, args.url, args):
        return 1

    ok = True
    if args.download:
        ok = _download(controller) and ok
    if args.copy:
        ok = _copy(controller) and ok
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
