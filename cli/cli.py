import argparse
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config.settings import get_settings
from engine.oracle.adapter import AnomalyOracleAdapter
from engine.oracle.provider import load_oracles
from engine.scheduler.task import Task
from engine.scheduler.types import PipelineName
from engine.scoring.registry import available_strategies
from engine.services.priority_service import PriorityService
from engine.topology.devices import DeviceDescriptor, build_default_topology
from engine.topology.exceptions import TopologyError

console = Console()


def print_header():
    title = "Fog Priority Engine\n... task scoring & anomaly escalation ..."
    console.print(Panel.fit(Text(title, style="bold cyan"), border_style="blue"))


def print_error(message, details=None):
    console.print(f"[bold red]Error:[/bold red] {message}")
    if details:
        console.print(Panel(str(details), title="Details", border_style="red"))


# --- Argument helpers ---

def parse_device(raw: str) -> DeviceDescriptor:
    """NAME:LATENCY_MS:RELIABILITY, e.g. FogNode1:12:0.93"""
    try:
        name, latency, reliability = raw.split(":")
        return DeviceDescriptor(name=name, latency=int(latency), reliability=float(reliability))
    except (ValueError, TopologyError) as e:
        raise argparse.ArgumentTypeError(
            f"Invalid device '{raw}', expected NAME:LATENCY:RELIABILITY"
        ) from e


# --- Commands ---

def handle_score(args) -> int:
    settings = get_settings()

    task = Task(
        task_id=args.task_id,
        deadline_ms=args.deadline_ms,
        urgency=args.urgency,
        energy_est=args.energy,
        cpu_req_mi=args.cpu,
        data_size_bytes=args.data_size,
    )

    adapter = None
    oracles = None
    if not args.no_oracle:
        oracles = load_oracles(settings)
        adapter = AnomalyOracleAdapter.from_oracle_set(
            oracles, timeout_sec=settings.ORACLE_TIMEOUT_SEC if args.timeout is None else args.timeout
        )

    try:
        service = PriorityService(adapter, strategy=args.strategy, devices=args.device)
        report = service.evaluate_task(task, args.pipeline)
    finally:
        if adapter is not None:
            adapter.close()
        if oracles is not None:
            oracles.close()

    table = Table(title=f"Task {report.task_id}", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="dim")
    table.add_column("Value", style="bold white")
    table.add_row("Strategy", report.strategy.upper())
    table.add_row("Baseline priority", f"{report.baseline_priority:.4f}")
    table.add_row("Pipeline", report.anomaly.pipeline)
    if report.anomaly.signal:
        table.add_row("Anomaly (normalized)", f"{report.anomaly.normalized_score:.4f}")
        table.add_row("Anomaly (raw)", f"{report.anomaly.raw_score:.4f}")
    else:
        table.add_row("Anomaly", "[yellow]no signal[/yellow]")
    table.add_row("Urgency", f"{report.urgency_before} -> {report.urgency_after}")
    table.add_row("Updated priority", f"{report.updated_priority:.4f}")

    console.print(table)
    return 0


def handle_topology(args) -> int:
    devices = build_default_topology(id_start=args.id_start)
    by_id = {d.device_id: d.name for d in devices}

    table = Table(title="Default fog topology", show_header=True, header_style="bold magenta")
    for col in ("ID", "Name", "MIPS", "RAM", "Up BW", "Down BW", "Parent"):
        table.add_column(col)
    for d in devices:
        table.add_row(
            str(d.device_id), d.name, str(d.mips), str(d.ram),
            str(d.up_bw), str(d.down_bw), by_id.get(d.parent_id, "-"),
        )
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="fogprio", description="Fog Priority Engine CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    score_parser = subparsers.add_parser("score", help="Score one task and apply escalation")
    score_parser.add_argument("--task-id", default=None)
    score_parser.add_argument("--deadline-ms", type=int, required=True)
    score_parser.add_argument("--urgency", type=int, required=True)
    score_parser.add_argument("--energy", type=float, default=0.0)
    score_parser.add_argument("--cpu", type=float, default=0.0, help="CPU requirement (MI)")
    score_parser.add_argument("--data-size", type=int, default=0, help="Payload size in bytes")
    score_parser.add_argument("--strategy", choices=available_strategies(), default=settings.DEFAULT_STRATEGY)
    score_parser.add_argument("--device", type=parse_device, action="append", default=[])
    score_parser.add_argument("--pipeline", choices=[p.value for p in PipelineName], default=PipelineName.HYBRID.value)
    score_parser.add_argument("--timeout", type=float, default=None, help="Oracle timeout (seconds)")
    score_parser.add_argument("--no-oracle", action="store_true", help="Skip model loading")
    score_parser.set_defaults(func=handle_score)

    topo_parser = subparsers.add_parser("topology", help="Print the default device tree")
    topo_parser.add_argument("--id-start", type=int, default=0)
    topo_parser.set_defaults(func=handle_topology)

    return parser


def main(argv=None) -> int:
    print_header()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except Exception as e:
        print_error("Command failed", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
