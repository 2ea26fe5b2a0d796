"""qrtistry CLI: render styled QR codes from the command line."""

import argparse
import sys
from datetime import datetime
from pathlib import Path

from qrtistry.errors import QrtistryError
from qrtistry.logging import audit, get_logger, setup_logging

log = get_logger("cli")


def _build_style(args):
    """Base style (preset file or defaults) with explicit flags layered on top."""
    from qrtistry.assets import load_image
    from qrtistry.colors import parse_hex_color
    from qrtistry.presets import load_preset
    from qrtistry.style import (
        BackgroundOverlay,
        GradientFill,
        LogoOverlay,
        SolidFill,
        apply_preset,
        default_style,
    )

    style = load_preset(args.preset) if args.preset else default_style()
    if args.scheme:
        style = apply_preset(style, args.scheme)

    changes = {}
    for flag, key in (("size", "output_size_pixels"), ("border", "border_modules"),
                      ("shape", "module_shape"), ("corner_radius", "corner_radius"),
                      ("eye_shape", "eye_shape"), ("opacity", "qr_opacity")):
        value = getattr(args, flag)
        if value is not None:
            changes[key] = value
    if args.eye_color:
        changes["eye_color"] = parse_hex_color(args.eye_color)

    fg = parse_hex_color(args.fg) if args.fg else style.fill.foreground
    bg = parse_hex_color(args.bg) if args.bg else style.fill.background
    if args.gradient:
        color_b = parse_hex_color(args.color_b) if args.color_b else GradientFill.color_b
        changes["fill"] = GradientFill(gradient_type=args.gradient, color_a=fg, color_b=color_b, background=bg)
    elif args.fg or args.bg:
        if isinstance(style.fill, GradientFill):
            changes["fill"] = GradientFill(style.fill.gradient_type, fg, style.fill.color_b, bg)
        else:
            changes["fill"] = SolidFill(foreground=fg, background=bg)

    if args.logo:
        size = args.logo_size if args.logo_size is not None else (
            style.logo.size_fraction if style.logo else LogoOverlay.size_fraction)
        changes["logo"] = LogoOverlay(image=load_image(args.logo), size_fraction=size)
    if args.background:
        opacity = args.background_opacity if args.background_opacity is not None else (
            style.background.opacity if style.background else BackgroundOverlay.opacity)
        changes["background"] = BackgroundOverlay(image=load_image(args.background), opacity=opacity)

    return style.replace(**changes) if changes else style


def cmd_render(args):
    """Encode text and render a styled symbol."""
    from qrtistry.assets import save_png
    from qrtistry.encoder import encode_matrix
    from qrtistry.pipeline import RenderPipeline
    from qrtistry.presets import preset_filename, save_preset

    style = _build_style(args)
    matrix = encode_matrix(args.text, ecc=args.ecc)
    result = RenderPipeline(supersample=args.supersample).render(matrix, style)

    output = Path(args.output) if args.output else Path(preset_filename("qrcode", datetime.now(), ".png"))
    save_png(result.image, output)
    print(f"Rendered: {output} ({result.size[0]}x{result.size[1]}, "
          f"{len(matrix)}x{len(matrix)} modules, {result.layout.module_size:.2f}px/module)")

    if args.save_preset:
        saved = save_preset(style, args.save_preset)
        print(f"Preset saved: {saved}")

    if args.verify:
        from qrtistry.verify import verify

        results = verify(result.image, expected_data=args.text)
        for r in results:
            status = "PASS" if r.success else "FAIL"
            print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")
        if not any(r.success for r in results):
            log.warning("No decoder could read the rendered symbol")
            return 2
    return 0


def cmd_presets(args):
    """List the built-in color schemes."""
    from qrtistry.style import COLOR_PRESETS

    for p in COLOR_PRESETS:
        fg = "#%02x%02x%02x" % p.fg
        bg = "#%02x%02x%02x" % p.bg
        print(f"  {p.name:8s} fg={fg} bg={bg}")
    return 0


def cmd_verify(args):
    """Verify a QR code image."""
    from qrtistry.assets import load_image
    from qrtistry.verify import verify

    results = verify(load_image(args.image), expected_data=args.expected)
    for r in results:
        status = "PASS" if r.success else "FAIL"
        print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")
    return 0 if any(r.success for r in results) else 1


def build_parser() -> argparse.ArgumentParser:
    from qrtistry.style import EyeShape, GradientType, ModuleShape

    parser = argparse.ArgumentParser(prog="qrtistry", description="Styled QR code renderer")
    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- render ---
    p = subparsers.add_parser("render", help="Render a styled QR code")
    p.add_argument("text", help="Text or URL to encode")
    p.add_argument("-o", "--output", default=None, help="Output PNG path (timestamped name if omitted)")
    p.add_argument("-e", "--ecc", default="M", choices=["L", "M", "Q", "H"], help="Error correction level")
    p.add_argument("--preset", default=None, help="Load base style from a JSON preset")
    p.add_argument("--save-preset", default=None, help="Write the effective style to a JSON preset")
    p.add_argument("--scheme", default=None, help="Built-in color scheme (see 'presets')")
    p.add_argument("--size", type=int, default=None, help="Output size in pixels (128-2048)")
    p.add_argument("--border", type=int, default=None, help="Quiet zone in modules (0-10)")
    p.add_argument("--shape", default=None, choices=[s.value for s in ModuleShape], help="Module shape")
    p.add_argument("--corner-radius", type=float, default=None, help="Rounded-square corner radius (0-0.5)")
    p.add_argument("--eye-shape", default=None, choices=[s.value for s in EyeShape], help="Finder pattern shape")
    p.add_argument("--fg", default=None, help="Dark color (hex), gradient start if --gradient")
    p.add_argument("--bg", default=None, help="Light color (hex)")
    p.add_argument("--gradient", default=None, choices=[g.value for g in GradientType], help="Gradient direction")
    p.add_argument("--color-b", default=None, help="Gradient end color (hex)")
    p.add_argument("--eye-color", default=None, help="Finder pattern color (hex)")
    p.add_argument("--logo", default=None, help="Logo image path")
    p.add_argument("--logo-size", type=float, default=None, help="Logo size fraction (0.05-0.35)")
    p.add_argument("--background", default=None, help="Background image path")
    p.add_argument("--background-opacity", type=float, default=None, help="Background opacity (0-1)")
    p.add_argument("--opacity", type=float, default=None, help="Symbol opacity (0-1)")
    p.add_argument("--supersample", type=int, default=4, help="Anti-aliasing samples per axis (1 = hard edges)")
    p.add_argument("--verify", action="store_true", help="Decode the result with pyzbar/OpenCV")

    # --- presets ---
    subparsers.add_parser("presets", help="List built-in color schemes")

    # --- verify ---
    p_ver = subparsers.add_parser("verify", help="Verify a QR code image")
    p_ver.add_argument("image", help="Path to QR code image")
    p_ver.add_argument("--expected", default=None, help="Expected decoded data (fails if mismatch)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else "INFO", log_file=args.log_file)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "render": cmd_render,
        "presets": cmd_presets,
        "verify": cmd_verify,
    }
    try:
        code = commands[args.command](args)
    except QrtistryError as e:
        print(f"Error: {e}", file=sys.stderr)
        audit("cli.failed", logger=log, command=args.command, error=str(e))
        return 1
    audit("cli.done", logger=log, command=args.command, code=code)
    return code


if __name__ == "__main__":
    sys.exit(main())
