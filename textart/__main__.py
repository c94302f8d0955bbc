"""CLI entry point for textart."""

import argparse
import logging
import sys
from pathlib import Path

from . import FontConfig, FontStyle, RenderError, Renderer


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Render text as an image or as ASCII art"
    )
    parser.add_argument("text", help="Single line of text to render")
    parser.add_argument(
        "--family", "-f", default="Serif",
        help="Font family or path to a font file (default: Serif)"
    )
    parser.add_argument(
        "--size", "-s", type=int, default=12,
        help="Font size in points (default: 12)"
    )
    parser.add_argument(
        "--style", action="append", default=None,
        choices=[style.value for style in FontStyle],
        help="Font style, may be repeated (default: bold)"
    )
    parser.add_argument(
        "--output", "-o", default=None,
        help="Write an image here instead of printing ASCII art; "
             "the format follows the file extension"
    )
    parser.add_argument(
        "--format", default=None,
        help="Image format to write to stdout, e.g. png (binary output)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log font resolution and encoding details"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    kwargs = {"family": args.family}
    if args.style:
        kwargs["styles"] = [FontStyle(style) for style in args.style]
    try:
        config = FontConfig(size=args.size, **kwargs)
    except ValueError as exc:
        parser.error(str(exc))

    renderer = Renderer()
    try:
        if args.output:
            output = Path(args.output)
            output.parent.mkdir(parents=True, exist_ok=True)
            width, height = renderer.encode_to_file(args.text, config, output)
            print(f"Saved text ({width}x{height}) to {output}")
        elif args.format:
            renderer.encode_to_stream(args.text, config, args.format,
                                      sys.stdout.buffer)
        else:
            sys.stdout.write(renderer.to_ascii_art(args.text, config, "\n"))
    except RenderError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
