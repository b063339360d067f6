# fansub_rbac/adapters/inbound/cli/main.py

"""fansub-rbac: CLI for the permissions migration and access inspection."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from fansub_rbac.adapters.configuration.config import Settings
from fansub_rbac.adapters.outbound.persistence.json_data_store import JsonUserDataStore, load_json
from fansub_rbac.application.use_cases.access_use_cases import AccessResolver, build_access_resolver
from fansub_rbac.application.use_cases.migration_use_cases import PermissionsMigrationService
from fansub_rbac.domain.exceptions import DomainException
from fansub_rbac.domain.services.grant_strategies import get_grant_strategy

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Fansub dashboard RBAC tools (permissions migration, access inspection).",
)


def configure_logging(config: Settings) -> None:
    level = logging.DEBUG if config.DEBUG else getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def _fail(exc: DomainException) -> None:
    typer.secho(f"❌ {exc} ({exc.internal_code})", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def _main(ctx: typer.Context) -> None:
    config = Settings()
    configure_logging(config)
    ctx.obj = config


@app.command(name="migrate-permissions", help="Migrate legacy user permissions to RBAC V2 (dry-run by default).")
def migrate_permissions(
    ctx: typer.Context,
    apply: bool = typer.Option(False, "--apply", help="Write the migrated data, a backup and an audit entry."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only report; takes precedence over --apply."),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Directory holding users.json."),
    backups_dir: Optional[Path] = typer.Option(None, "--backups-dir", help="Directory for user backups."),
) -> None:
    config: Settings = ctx.obj
    updates = {}
    if data_dir is not None:
        updates["DATA_DIR"] = data_dir
    if backups_dir is not None:
        updates["BACKUPS_DIR"] = backups_dir
    if updates:
        config = config.model_copy(update=updates)

    service = PermissionsMigrationService(JsonUserDataStore.from_settings(config))
    try:
        report = service.run(apply=apply and not dry_run)
    except DomainException as exc:
        _fail(exc)
        return

    payload = report.to_payload()
    payload.pop("backupPath", None)
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    if report.backup_path:
        typer.echo(f"Applied RBAC V2 migration. Backup: {report.backup_path}")


@app.command(name="resolve", help="Print the effective role, grants and landing route of a user record.")
def resolve(
    ctx: typer.Context,
    user_file: Path = typer.Argument(..., help="JSON file with one user record."),
    path: Optional[str] = typer.Option(None, "--path", help="Dashboard path to check."),
    allow_users_for_self: bool = typer.Option(False, "--allow-users-for-self"),
    strategy: Optional[str] = typer.Option(
        None, "--strategy", help="Override the grant strategy: legacy or v2 (default: RBAC_V2_ENABLED)."
    ),
) -> None:
    config: Settings = ctx.obj
    try:
        resolver = AccessResolver(get_grant_strategy(strategy)) if strategy else build_access_resolver(config)
        user = load_json(user_file)
    except DomainException as exc:
        _fail(exc)
        return

    snapshot = resolver.resolve_access(user, allow_users_for_self=allow_users_for_self)
    payload = snapshot.to_payload()
    if path is not None:
        payload["path"] = path
        payload["pathAllowed"] = resolver.is_dashboard_path_allowed(
            path, snapshot.grants, allow_users_for_self=allow_users_for_self
        )
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    app()
