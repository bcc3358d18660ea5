"""Tribe console CLI tool (tribectl)."""

import typer
from sqlalchemy.engine import make_url

app = typer.Typer(name="tribectl", help="Tribe console CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


def _server_connection():
    """PyMySQL connection to the server named in DATABASE_URL, plus the db name."""
    import pymysql
    from tribe_console.core.config import settings

    url = make_url(settings.DATABASE_URL)
    conn = pymysql.connect(
        host=url.host or "localhost",
        port=url.port or 3306,
        user=url.username,
        password=url.password or "",
    )
    return conn, url.database


@db_app.command("create")
def db_create():
    """Create the MySQL database if it doesn't exist."""
    conn, db_name = _server_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        typer.echo(f"✅ Database '{db_name}' created (or already exists)")
    finally:
        conn.close()


@db_app.command("init")
def db_init():
    """Create all tables."""
    from tribe_console.db.base import Base
    from tribe_console.db.session import engine
    import tribe_console.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Tables created")


@db_app.command("seed")
def db_seed(
    sample: bool = typer.Option(True, help="Also insert sample members"),
):
    """Seed roles, ranks, access lists, visibility and sample members."""
    from tribe_console.db.session import SessionLocal
    from tribe_console.db.seeds.seed_roles import seed_roles, seed_ranks, seed_role_ranks
    from tribe_console.db.seeds.seed_access import seed_access_lists, seed_visibility
    from tribe_console.db.seeds.seed_sample_data import seed_sample_data

    db = SessionLocal()
    try:
        seed_roles(db)
        seed_ranks(db)
        seed_role_ranks(db)
        seed_access_lists(db)
        seed_visibility(db)
        if sample:
            seed_sample_data(db)
    finally:
        db.close()
    typer.echo("✅ All seeds applied")


@db_app.command("reset")
def db_reset():
    """Drop and recreate the database (DANGER)."""
    confirm = typer.confirm("⚠️  This will DROP the entire database. Continue?")
    if not confirm:
        raise typer.Abort()
    conn, db_name = _server_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(f"DROP DATABASE IF EXISTS `{db_name}`")
        cursor.execute(f"CREATE DATABASE `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        typer.echo(f"✅ Database '{db_name}' reset")
    finally:
        conn.close()


@app.command("check")
def check_access(
    role: str = typer.Argument(..., help="Role name"),
    access_list: str = typer.Argument(..., help="Access list name, e.g. manage_roles"),
):
    """Check whether a role is on an access list, straight from the database."""
    from tribe_console.db.session import SessionLocal
    from tribe_console.services.access_service import access_service

    db = SessionLocal()
    try:
        allowed = access_service.can_perform(db, role, access_list)
    finally:
        db.close()
    typer.echo(f"{role} -> {access_list}: {'allow' if allowed else 'deny'}")
    if not allowed:
        raise typer.Exit(code=1)


def _api_headers(role: str) -> dict:
    from tribe_console.core.config import settings

    if not role:
        return {}
    return {settings.AUTH_HEADER: "true", settings.ROLE_HEADER: role}


@app.command("roles")
def list_roles(
    role: str = typer.Option("", help="Caller role sent to the API"),
):
    """List roles through the running API."""
    import httpx
    from tribe_console.core.config import settings

    resp = httpx.get(f"{settings.API_BASE_URL}/roles", headers=_api_headers(role), timeout=10)
    if resp.status_code != 200:
        typer.echo(f"❌ {resp.status_code}: {resp.json().get('detail')}")
        raise typer.Exit(code=1)
    for r in resp.json():
        typer.echo(f"  {r['sortOrder']:>3}. {r['name']}")


@app.command("members")
def list_members(
    role: str = typer.Option("", help="Caller role sent to the API"),
):
    """List members with their role ranks through the running API."""
    import httpx
    from tribe_console.core.config import settings

    resp = httpx.get(f"{settings.API_BASE_URL}/members", headers=_api_headers(role), timeout=10)
    if resp.status_code != 200:
        typer.echo(f"❌ {resp.status_code}: {resp.json().get('detail')}")
        raise typer.Exit(code=1)
    for m in resp.json():
        ranks = ", ".join(f"{rr['role']}: {rr['rank']}" for rr in m["roleRanks"])
        typer.echo(f"  {m['displayName']} [{m['status']}] {', '.join(m['roles'])} {ranks}".rstrip())


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8787, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload"),
):
    """Start the FastAPI server."""
    import uvicorn
    uvicorn.run("tribe_console.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
