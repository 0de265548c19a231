"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from gigledger.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from gigledger.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False, currency: str = "") -> str:
    """Render a ServiceResult to a styled string via Rich.

    Amounts are suffixed with *currency* when one is given.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, currency)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: item ids for listings, else a status line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if "id" in item)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="gig.ok"), Text(f"  {result.op}", style="gig.op"))


def _is_amount(key: str) -> bool:
    return key in ("price", "balance", "total", "amount") or key.endswith("_balance")


def _money(value: Any, currency: str) -> str:
    return f"{value} {currency}" if currency and value is not None else str(value)


def _field(console: Console, key: str, value: Any, currency: str = "") -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="gig.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="gig.id")
    elif _is_amount(key):
        v = Text(_money(value, currency), style="gig.amount")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    console.print(f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}")
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="gig.error"),
        Text(f"  {result.op}{code}", style="gig.op"),
        Text(" — "),
        msg,
    )
    if verbose and err and err.detail:
        for key, value in err.detail.items():
            _field(console, key, value)


# ── Op renderers ──────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, currency: str) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value, currency)


def _render_contracts(result: ServiceResult, console: Console, _currency: str) -> None:
    _status_line(console, result)
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="gig.id", no_wrap=True)
    table.add_column("Client", justify="right")
    table.add_column("Contractor", justify="right")
    table.add_column("Status")
    table.add_column("Terms")
    for item in result.data.get("items", []):
        status = str(item.get("status", ""))
        table.add_row(
            str(item.get("id", "")),
            str(item.get("client_id", "")),
            str(item.get("contractor_id", "")),
            Text(status, style=style_for_status(status)),
            str(item.get("terms", "")),
        )
    console.print(table)


def _render_jobs(result: ServiceResult, console: Console, currency: str) -> None:
    _status_line(console, result)
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="gig.id", no_wrap=True)
    table.add_column("Contract", justify="right")
    price_header = f"Price ({currency})" if currency else "Price"
    table.add_column(price_header, style="gig.amount", justify="right")
    table.add_column("Description")
    for item in result.data.get("items", []):
        table.add_row(
            str(item.get("id", "")),
            str(item.get("contract_id", "")),
            str(item.get("price", "")),
            str(item.get("description", "")),
        )
    console.print(table)
    _field(console, "total", result.data.get("total", "0.00"), currency)


def _render_events(result: ServiceResult, console: Console, currency: str) -> None:
    _status_line(console, result)
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="gig.id", no_wrap=True)
    table.add_column("Hook")
    table.add_column("Job", justify="right")
    table.add_column("Amount", style="gig.amount", justify="right")
    table.add_column("Status")
    table.add_column("Retries", justify="right")
    table.add_column("Error")
    for item in result.data.get("items", []):
        table.add_row(
            str(item.get("id", "")),
            str(item.get("hook_name", "")),
            str(item.get("job_id") or ""),
            _money(item["amount"], currency) if item.get("amount") else "",
            str(item.get("status", "")),
            str(item.get("retries", 0)),
            str(item.get("error") or ""),
        )
    console.print(table)
    if "delivered" in result.data:
        _field(console, "delivered", result.data["delivered"])


_OP_RENDERERS: dict[str, Any] = {
    "list_contracts": _render_contracts,
    "list_unpaid_jobs": _render_jobs,
    "list_events": _render_events,
    "redeliver_events": _render_events,
}
