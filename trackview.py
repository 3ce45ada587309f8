import os
import sys
import argparse

try:
    from rich.console import Console
    from rich.table import Table
    from rich.panel import Panel
    from rich import box
except ImportError:
    print("Error: The 'rich' library is required for the CLI but not installed.", file=sys.stderr)
    print("Please install it with: pip install trackview[cli]", file=sys.stderr)
    sys.exit(1)

from trackviewlib import __version__
from trackviewlib.audio import format_time
from trackviewlib.config import ConfigError, load_preset, merge_configs
from trackviewlib.document import DocumentError, load_track_document
from trackviewlib.layout import LayoutError, TrackLayoutEngine, track_extent

console = Console()


def positive_float(value):
    fvalue = float(value)
    if not fvalue > 0:
        raise argparse.ArgumentTypeError("must be a positive number")
    return fvalue


def positive_int(value):
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return ivalue


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="TrackView: lay out and render multi-segment RMS waveform tracks",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--version", action="version",
                        version=f"trackview {__version__}")

    parser.add_argument("document", type=str,
                        help="Track document (.tvtrack JSON)")

    # Track parameters (unset options keep the document / preset values)
    parser.add_argument("--preset", type=str, default=None,
                        help="JSON preset with track parameters, applied over the document's")
    parser.add_argument("--rms_frames_per_second", type=positive_float, default=None,
                        help="RMS sampling rate used for all index math")
    parser.add_argument("--pixels_per_rms", type=positive_float, default=None,
                        help="Pixel width of one RMS sample (zoom)")
    parser.add_argument("--track_background_color", type=str, default=None,
                        help="Fill behind all segments (#RRGGBB or #AARRGGBB)")
    parser.add_argument("--fill_color", type=str, default=None,
                        help="Fill for segment waveform shapes (#RRGGBB or #AARRGGBB)")

    # Output
    parser.add_argument("--png", type=str, default=None,
                        help="Render the composited track to this PNG file")
    parser.add_argument("--height", type=positive_int, default=120,
                        help="Image height in pixels for --png")

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help(sys.stderr)
        sys.exit(1)

    return parser.parse_args(argv)


def print_layout_table(track, windows):
    table = Table(box=box.SIMPLE_HEAVY, title="Segment layout")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Segment")
    table.add_column("Playback", justify="right")
    table.add_column("File range", justify="right")
    table.add_column("Samples", justify="right")
    table.add_column("Offset px", justify="right", style="cyan")
    table.add_column("Width px", justify="right", style="cyan")

    for idx, (seg, win) in enumerate(zip(track.segments, windows), start=1):
        label = os.path.basename(getattr(seg, "source", "") or "") or seg.id[:8]
        rng = win.sample_range
        table.add_row(
            str(idx),
            label,
            f"{format_time(seg.playback_start_time)} - {format_time(seg.playback_end_time)}",
            f"{format_time(seg.file_start_time)} - {format_time(seg.file_end_time)}",
            f"{len(rng)} [dim]({rng.start}..{rng.end})[/]",
            f"{win.pixel_offset:.1f}",
            f"{win.pixel_width:.1f}",
        )
    console.print(table)


def main(argv=None):
    args = parse_arguments(argv)

    # --- BUILD CONFIG FROM PRESET + CLI ARGS ---
    try:
        preset = load_preset(args.preset) if args.preset else {}
        cli_overrides = {
            "rms_frames_per_second": args.rms_frames_per_second,
            "pixels_per_rms": args.pixels_per_rms,
            "track_background_color": args.track_background_color,
            "fill_color": args.fill_color,
        }
        overrides = merge_configs(
            preset,
            {k: v for k, v in cli_overrides.items() if v is not None},
        )
        track = load_track_document(args.document, overrides)
    except (ConfigError, DocumentError) as e:
        console.print(f"[bold red]Error:[/] {e}")
        return 1

    console.print(Panel.fit(
        f"[bold]TrackView[/] {__version__}\n"
        f"Document: [cyan]{args.document}[/]\n"
        f"Segments: [cyan]{len(track.segments)}[/] | "
        f"RMS rate: [cyan]{track.rms_frames_per_second:g} fps[/] | "
        f"Zoom: [cyan]{track.pixels_per_rms:g} px/RMS[/]",
        title="Configuration"
    ))

    # --- LAYOUT & COMPOSITE ---
    try:
        engine = TrackLayoutEngine(track.rms_frames_per_second, track.pixels_per_rms)
        windows = engine.layout(track.segments)
        composited = track.composite()
    except LayoutError as e:
        console.print(f"[bold red]Layout failed ({type(e).__name__}):[/] {e}")
        return 1

    print_layout_table(track, windows)
    console.print(f"Track extent: [bold cyan]{track_extent(windows):.1f} px[/]")

    # --- OPTIONAL IMAGE EXPORT ---
    if args.png:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        try:
            from trackviewgui.export import save_png
        except ImportError as e:
            console.print(f"[bold red]Error:[/] PNG export needs PySide6 ({e})")
            return 1
        try:
            save_png(composited, args.png, height=args.height)
        except (OSError, ValueError) as e:
            console.print(f"[bold red]Error:[/] {e}")
            return 1
        console.print(f"\n[dim]Image saved to: {args.png}[/]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
