from __future__ import annotations
from typing import Any

from rich.table import Table
from rich import print as rprint

from ..models import RunResult

SEVERITY_STYLE = {"danger": "bold red", "warning": "yellow", "info": "cyan", "good": "green"}

def print_groups_table(result: RunResult) -> None:
    table = Table(title="Certificate Bundles")
    for c in ["Group", "Domains", "Files", "State"]:
        table.add_column(c, overflow="fold")

    for g in result.validated_groups:
        table.add_row(
            g.key,
            ", ".join(g.domains) if g.domains else "-",
            "\n".join(g.files),
            g.state.value,
        )
    rprint(table)

def print_failures_table(result: RunResult) -> None:
    if not result.failures:
        return None
    table = Table(title="Failures")
    for c in ["Severity", "Domains", "File", "Message"]:
        table.add_column(c, overflow="fold")

    for f in result.failures:
        sev = f.outcome.severity.value
        table.add_row(
            f"[{SEVERITY_STYLE.get(sev, '')}]{sev}[/]",
            f.group.title,
            f.outcome.source_file,
            f.outcome.message.split(" - ", 1)[-1],
        )
    rprint(table)
    return None

def result_to_dict(result: RunResult) -> dict[str, Any]:
    return {
        "exit_code": result.exit_code,
        "error": str(result.error) if result.error else None,
        "groups": [
            {
                "key": g.key,
                "files": list(g.files),
                "domains": list(g.domains or []),
                "modulus": g.modulus,
                "state": g.state.value,
            }
            for g in result.validated_groups
        ],
        "failures": [
            {
                "group": f.group.key,
                "severity": f.outcome.severity.value,
                "file": f.outcome.source_file,
                "message": f.outcome.message,
            }
            for f in result.failures
        ],
        "notifications": {
            sev.value: [{"title": n.title, "value": n.value} for n in fields]
            for sev, fields in result.notifications.items()
        },
    }
