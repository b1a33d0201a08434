import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table

from oxibloom.bloom.params import BloomParams
from oxibloom.config import CONFIG
from oxibloom.driver import run_smoke_test
from oxibloom.entropy.buffer import ENTROPY_BUFFER, EntropyBuffer
from oxibloom.entropy.errors import SysError

console = Console()

_WIDTHS = (8, 16, 32, 64, 128)


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _show_info() -> None:
    table = Table(title="oxibloom - System Info")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_row("Platform", sys.platform)
    table.add_row("Entropy source", ENTROPY_BUFFER.source.name)
    table.add_row("Byte order", sys.byteorder)
    table.add_row("Buffer length", f"{ENTROPY_BUFFER.buffer_length} bytes")
    console.print(table)


def _show_params(item_count: int, fp_rate: float) -> None:
    params = BloomParams.from_capacity(item_count, fp_rate)
    table = Table(title="Bloom filter sizing")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Items (n)", f"{params.item_count:,}")
    table.add_row("Target fp rate (p)", f"{params.fp_rate}")
    table.add_row("Optimal bits (m)", f"{params.optimal_m:,}")
    table.add_row("Hash rounds (k)", str(params.optimal_k))
    table.add_row("Allocated bytes", f"{params.byte_count:,}")
    table.add_row("Expected fp rate", f"{params.expected_fp_rate:.5f}")
    console.print(table)


def _run(args: argparse.Namespace) -> int:
    buffer = EntropyBuffer(buffer_length=args.buffer_length)
    total = args.items * 2 + args.samples
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed:,}/{task.total:,}"),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Running", total=total)

        def advance(phase: str, count: int) -> None:
            progress.update(task, description=phase.capitalize(), advance=count)

        result = run_smoke_test(
            args.items,
            args.fp_rate,
            args.samples,
            buffer=buffer,
            batch_size=args.batch_size,
            progress=advance,
        )
    ok = result.passed(args.tolerance)
    style = "green" if ok else "red"
    console.print(
        f"[bold {style}]{'PASS' if ok else 'FAIL'}[/bold {style}] "
        f"false negatives: {result.false_negatives}, "
        f"observed fp rate: {result.observed_fp_rate:.5f} "
        f"(target {result.fp_rate}, tolerance {args.tolerance}), "
        f"fill ratio: {result.fill_ratio:.4f}"
    )
    return 0 if ok else 1


def _random(args: argparse.Namespace) -> None:
    for _ in range(args.count):
        console.print(ENTROPY_BUFFER.get_random_int(args.width, signed=args.signed))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="oxibloom - Bloom filters over a buffered OS entropy source",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="\nExamples:\n  oxibloom params 1000000 0.01    Show filter sizing\n  oxibloom run                    Run the end-to-end smoke test\n  oxibloom random 64 --count 4    Print random u64 values\n        ",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("info", help="Show platform and entropy source")
    params_parser = subparsers.add_parser(
        "params", help="Show optimal filter sizing"
    )
    params_parser.add_argument("items", type=int, help="Expected item count")
    params_parser.add_argument("fp_rate", type=float, help="Target fp rate")
    run_parser = subparsers.add_parser(
        "run", help="Insert random values and measure the fp rate"
    )
    run_parser.add_argument("--items", type=int, default=CONFIG.item_count)
    run_parser.add_argument("--fp-rate", type=float, default=CONFIG.fp_rate)
    run_parser.add_argument("--samples", type=int, default=CONFIG.sample_count)
    run_parser.add_argument("--tolerance", type=float, default=CONFIG.tolerance)
    run_parser.add_argument("--batch-size", type=int, default=CONFIG.batch_size)
    run_parser.add_argument(
        "--buffer-length", type=int, default=CONFIG.buffer_length
    )
    random_parser = subparsers.add_parser(
        "random", help="Print random integers from the entropy buffer"
    )
    random_parser.add_argument("width", type=int, choices=_WIDTHS)
    random_parser.add_argument("--count", type=int, default=1)
    random_parser.add_argument(
        "--signed", action="store_true", help="Interpret as signed"
    )
    args = parser.parse_args()
    _setup_logging(args.debug)
    try:
        if args.command == "info" or args.command is None:
            _show_info()
        elif args.command == "params":
            _show_params(args.items, args.fp_rate)
        elif args.command == "run":
            sys.exit(_run(args))
        elif args.command == "random":
            _random(args)
        else:
            parser.print_help()
    except SysError as exc:
        console.print(f"[bold red]Entropy source failure:[/bold red] {exc}")
        sys.exit(2)
    except ValueError as exc:
        console.print(f"[bold red]Invalid argument:[/bold red] {exc}")
        sys.exit(2)


if __name__ == "__main__":
    main()
