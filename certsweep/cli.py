import typer
from rich import print as rprint
from rich.table import Table
from .version import __version__
from .log import get_logger
from .config import Config, INSPECTORS
import json
from typing import Optional
from .models import GroupMode
from .pipeline import Auditor
from .display.tables import print_groups_table, print_failures_table, result_to_dict
from .notifications.dispatch import finish


app = typer.Typer(add_completion=False, help="certsweep CLI")

@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to a certsweep.yaml config file."),
):
    """
    certsweep - scan and validate SSL certificate bundles on disk.
    """
    ctx.obj = {}
    ctx.obj["config"] = Config.load(config_path)

@app.command()
def scan(
    ctx: typer.Context,
    directories: Optional[list[str]] = typer.Argument(None, help="Directories to scan (default: configured scan_paths or '.')."),
    directory: Optional[list[str]] = typer.Option(None, "--directory", "-d", help="Directory to scan (comma-separated or repeated)."),
    recursive: Optional[bool] = typer.Option(None, "--recursive/--no-recursive", "-r", help="Scan recursively & group by directory."),
    certfile: Optional[str] = typer.Option(None, "--certfile", "-c", help="RegExp for certificate filenames (openssl x509)."),
    keyfile: Optional[str] = typer.Option(None, "--keyfile", "-k", help="RegExp for private key filenames (openssl rsa)."),
    time: Optional[int] = typer.Option(None, "--time", "-t", min=0, help="Days before expiry to consider a certificate expiring (default 30)."),
    slack: Optional[str] = typer.Option(None, "--slack", "-s", help="Slack webhook URL to post notifications."),
    hook: Optional[str] = typer.Option(None, "--hook", "-e", help="Hook to execute when completed: <hook> <exit code> <failed domains>."),
    group_by: Optional[GroupMode] = typer.Option(None, "--group-by", case_sensitive=False, help="Bundle files per directory or per basename."),
    inspector: Optional[str] = typer.Option(None, "--inspector", help=f"Certificate inspector: {', '.join(INSPECTORS)}."),
    json_out: bool = typer.Option(False, "--json", help="Output JSON instead of tables."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output."),
):
    """
    Scan directories for certificate/key bundles and validate them.
    """
    log = get_logger(verbose=verbose)
    if inspector is not None and inspector not in INSPECTORS:
        raise typer.BadParameter(f"expected one of {', '.join(INSPECTORS)}", param_hint="--inspector")

    paths = list(directories or [])
    for d in directory or []:
        paths += [x.strip() for x in d.split(",") if x.strip()]

    cfg: Config = ctx.obj["config"].override(
        scan_paths=paths or None,
        recursive=recursive,
        certfile=certfile,
        keyfile=keyfile,
        expiration_days=time,
        slack_webhook_url=slack,
        hook=hook,
        group_by=group_by,
        inspector=inspector,
    )

    result = Auditor(cfg, logger=log).run()

    if json_out:
        typer.echo(json.dumps(result_to_dict(result), indent=2, default=str))
    elif result.error is None:
        print_groups_table(result)
        print_failures_table(result)

    raise typer.Exit(code=finish(result, cfg, log))

@app.command()
def status(ctx: typer.Context):
    """Show the effective configuration."""
    cfg: Config = ctx.obj["config"]
    table = Table(title="certsweep Status")
    table.add_column("Key")
    table.add_column("Value")
    table.add_row("Version", __version__)
    table.add_row("Scan Paths", ", ".join(cfg.scan_paths))
    table.add_row("Recursive", str(cfg.recursive))
    table.add_row("Group By", cfg.mode.value)
    table.add_row("Cert Pattern", cfg.cert_pattern().pattern)
    table.add_row("Key Pattern", cfg.key_pattern().pattern)
    table.add_row("Expiration (days)", str(cfg.expiration_days))
    table.add_row("Inspector", cfg.inspector)
    table.add_row("Slack Webhook", "set" if cfg.slack_webhook_url else "not set")
    table.add_row("Hook", cfg.hook or "not set")
    rprint(table)

@app.command()
def version():
    """Show version."""
    rprint(f"[bold green]certsweep[/] v{__version__}")

if __name__ == "__main__":
    app()
