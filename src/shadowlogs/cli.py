import asyncio
import logging
import time
from pathlib import Path

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

from shadowlogs.core.exceptions import ShadowLogsError
from shadowlogs.decoding.decoder import DecodedLog

console = Console()


def _print_decoded(decoded: DecodedLog) -> None:
    console.print(f"[bold]=> Transaction:[/] {decoded.meta.tx_hash}  [dim]{decoded.name} #{decoded.meta.log_index}[/]")
    console.print_json(data=decoded.values)


def _run(coro):
    """Run a coroutine, mapping expected failures to click errors."""
    try:
        return asyncio.run(coro)
    except ShadowLogsError as e:
        raise click.ClickException(str(e)) from e
    except (RuntimeError, httpx.HTTPError) as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from e


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
def cli(log_level: str) -> None:
    """shadowlogs: decode event logs of shadow contracts on a local fork."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


@cli.command("events")
@click.argument("contract")
@click.argument("event_signature")
@click.option("--rpc", envvar="ETH_RPC_URL", default="http://localhost:8545", show_default=True, help="RPC endpoint URL")
@click.option("--artifacts", "artifacts_dir", type=click.Path(path_type=Path), default=Path("contracts/out"), show_default=True)
@click.option("--shadow-dir", type=click.Path(path_type=Path), default=Path("."), show_default=True, help="Directory holding shadow.json")
@click.option("--from-block", default="latest", show_default=True, help="Block number, 'latest' or 'earliest'")
@click.option("--poll-interval", type=float, default=2.0, show_default=True, help="Seconds between polls")
@click.option("--jsonl-out", type=str, default="", help="Optional path to append decoded logs (NDJSON)")
@click.option("--parquet-out", type=click.Path(path_type=Path), default=None, help="Optional directory for Parquet shards")
@click.option("--rows-per-shard", type=int, default=10_000, show_default=True)
@click.option("--max-logs", type=int, default=None, help="Stop after this many logs")
def events_cmd(
    contract: str,
    event_signature: str,
    rpc: str,
    artifacts_dir: Path,
    shadow_dir: Path,
    from_block: str,
    poll_interval: float,
    jsonl_out: str,
    parquet_out: Path | None,
    rows_per_shard: int,
    max_logs: int | None,
) -> None:
    """Listen to EVENT_SIGNATURE from a shadow CONTRACT (File.sol or File.sol:Contract)."""
    from shadowlogs.core.config import WatchConfig
    from shadowlogs.orchestration.orchestrator import watch_events

    config = WatchConfig(
        rpc_url=rpc,
        contract=contract,
        event_signature=event_signature,
        artifacts_dir=artifacts_dir,
        shadow_dir=shadow_dir,
        from_block=int(from_block) if from_block.isdigit() else from_block,
        poll_interval_s=poll_interval,
        jsonl_out=jsonl_out,
        parquet_out=parquet_out,
        rows_per_shard=rows_per_shard,
        max_logs=max_logs,
    )

    t0 = time.time()
    try:
        stats = _run(watch_events(config, on_decoded=_print_decoded))
    except KeyboardInterrupt:
        console.print("[yellow]stopped[/]")
        return

    elapsed = time.time() - t0
    console.print(
        f"[bold]summary[/]: "
        f"logs={stats.total_logs}  "
        f"[green]decoded[/]={stats.decoded}  "
        f"[red]failed[/]={stats.failed}  "
        f"files={stats.files_written}  "
        f"({elapsed:.2f}s)"
    )


@cli.command("decode-tx")
@click.argument("tx_hash")
@click.argument("contract")
@click.option("--event", "event_signature", default=None, help="Only decode this event signature")
@click.option("--rpc", envvar="ETH_RPC_URL", default="http://localhost:8545", show_default=True, help="RPC endpoint URL")
@click.option("--artifacts", "artifacts_dir", type=click.Path(path_type=Path), default=Path("contracts/out"), show_default=True)
def decode_tx_cmd(
    tx_hash: str,
    contract: str,
    event_signature: str | None,
    rpc: str,
    artifacts_dir: Path,
) -> None:
    """Decode the logs of mined transaction TX_HASH using CONTRACT's ABI."""
    from shadowlogs.core.config import DecodeTxConfig
    from shadowlogs.orchestration.orchestrator import decode_tx

    config = DecodeTxConfig(
        rpc_url=rpc,
        tx_hash=tx_hash,
        contract=contract,
        artifacts_dir=artifacts_dir,
        event_signature=event_signature,
    )
    out = _run(decode_tx(config, on_decoded=_print_decoded))
    console.print(
        f"[bold]summary[/]: "
        f"logs={out.stats.total_logs}  "
        f"[green]decoded[/]={out.stats.decoded}  "
        f"[yellow]skipped[/]={out.stats.skipped}  "
        f"[red]failed[/]={out.stats.failed}"
    )


@cli.command("selector")
@click.argument("event_signature")
def selector_cmd(event_signature: str) -> None:
    """Print the canonical signature and topic0 of EVENT_SIGNATURE."""
    from shadowlogs.decoding.registry_builder import event_schema_from_signature

    try:
        schema = event_schema_from_signature(event_signature)
    except ShadowLogsError as e:
        raise click.ClickException(str(e)) from e
    console.print(schema.signature)
    console.print(schema.selector)


if __name__ == "__main__":
    cli()
