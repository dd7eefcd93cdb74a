"""
Table Ordering CLI.

Command-line interface for common operations.

Usage:
    python backend/cli.py db-init
    python backend/cli.py seed-demo
    python backend/cli.py verify-totals --tenant-id 1
"""

import sys
import time
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="ordering",
    help="Table Ordering CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all tables that do not exist yet."""
    from shared.infrastructure.db import engine
    from ordering_api.models import Base

    try:
        Base.metadata.create_all(bind=engine)
        console.print("[green]✓ Tables created/verified[/green]")
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {type(e).__name__}[/red]")
        raise typer.Exit(1)


@app.command()
def seed_demo(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed a demo restaurant with menu and tables."""
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context
    from ordering_api.seed import seed_demo as _seed_demo

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        tenant = _seed_demo(db)
        console.print(f"[green]✓ Demo tenant ready: {tenant.name} (id={tenant.id})[/green]")


# =============================================================================
# Consistency Commands
# =============================================================================

@app.command()
def verify_totals(
    tenant_id: list[int] = typer.Option(
        None, "--tenant-id", "-t", help="Tenant to check (repeatable). Defaults to all."
    ),
):
    """Recompute order totals from their lines and report mismatches."""
    from sqlalchemy import select

    from shared.infrastructure.db import get_db_context
    from ordering_api.models import Tenant
    from ordering_api.services.domain import OrderQueryService

    with get_db_context() as db:
        tenant_ids = tenant_id or list(db.scalars(select(Tenant.id).order_by(Tenant.id)))
        queries = OrderQueryService(db)

        table = Table(title="Order total mismatches")
        table.add_column("Tenant", style="cyan")
        table.add_column("Order #", style="cyan")
        table.add_column("Stored", style="yellow")
        table.add_column("Recomputed", style="green")

        found = 0
        for tid in tenant_ids:
            for mismatch in queries.find_total_mismatches(tid):
                found += 1
                table.add_row(
                    str(tid),
                    str(mismatch.order_number),
                    str(mismatch.stored_cents),
                    str(mismatch.recomputed_cents),
                )

    if found:
        console.print(table)
        console.print(f"[yellow]{found} order(s) differ from current catalog prices[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓ All order totals match ({len(tenant_ids)} tenant(s) checked)[/green]")


# =============================================================================
# Development Commands
# =============================================================================

@app.command()
def staff_token(
    user_id: int = typer.Option(..., help="Staff user id (sub claim)"),
    tenant_id: int = typer.Option(..., help="Tenant the staff member belongs to"),
    role: list[str] = typer.Option(["MANAGER"], "--role", "-r", help="Role (repeatable)"),
    superadmin: bool = typer.Option(False, "--superadmin", help="Grant access to every tenant"),
    ttl: int = typer.Option(3600, help="Token lifetime in seconds"),
):
    """Mint a staff token for local testing. Refused in production."""
    from shared.config.settings import settings
    from shared.security.auth import sign_jwt

    if settings.environment == "production":
        console.print("[red]Staff tokens are issued by the auth service in production[/red]")
        raise typer.Exit(1)

    claims = {"sub": str(user_id), "tenant_id": tenant_id, "roles": role}
    if superadmin:
        claims["is_superadmin"] = True
    console.print(sign_jwt(claims, ttl_seconds=ttl))


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option(None, help="Base URL of a running API"),
):
    """Check database connectivity and, optionally, a running API."""
    import httpx

    from shared.config.settings import settings
    from shared.infrastructure.db import SessionLocal
    from shared.utils.health import HealthStatus, database_probe, run_health_check

    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    db_result = run_health_check("database", database_probe(SessionLocal))
    if db_result.status == HealthStatus.HEALTHY:
        table.add_row("Database", "✓ Healthy", f"{db_result.latency_ms:.0f}ms")
    else:
        table.add_row("Database", f"✗ {db_result.error}", "-")

    base_url = url or f"http://localhost:{settings.rest_api_port}"
    try:
        start = time.perf_counter()
        response = httpx.get(f"{base_url}/api/health", timeout=5.0)
        elapsed = (time.perf_counter() - start) * 1000
        if response.status_code == 200:
            table.add_row("Ordering API", "✓ Healthy", f"{elapsed:.0f}ms")
        else:
            table.add_row("Ordering API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    except httpx.HTTPError as e:
        table.add_row("Ordering API", f"✗ {type(e).__name__}", "-")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from ordering_api import __version__

    table = Table(title="Table Ordering Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", __version__)
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
