"""Container entry point: reconcile local state with the backup, then start the gateway."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field

from bootstrap.config import GatewayEnvironment, Settings
from bootstrap.filesystem.tree_ops import is_dir_empty
from bootstrap.services import mirror_service
from bootstrap.services.config_patch_service import patch_config_file
from bootstrap.services.gateway_service import GatewayService, report_environment
from bootstrap.services.layout_service import Category, resolve_all
from bootstrap.services.mirror_service import MirrorDirection
from bootstrap.services.onboarding_service import OnboardingService
from bootstrap.services.restore_service import CategoryRestorer, RestoreOutcome
from bootstrap.services.sync_clock import read_marker

logger = logging.getLogger(__name__)

# Workspace restore precedes the mirror; skills land inside the workspace dir afterwards.
RESTORE_ORDER = (Category.CONFIG, Category.WORKSPACE, Category.SKILLS)


def _configure_logging(debug: bool) -> None:
    """Configure bootstrap logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )


@dataclass
class BootstrapReport:
    """What one bootstrap run did, per step."""

    restores: dict[Category, RestoreOutcome] = field(default_factory=dict)
    mirror: MirrorDirection | None = None
    onboarded: bool = False
    config_patched: bool = False


def _mirror_workspace(settings: Settings) -> MirrorDirection | None:
    try:
        return mirror_service.reconcile(settings.workspace_dir, settings.runtime_workspace_dir)
    except OSError as exc:
        logger.error("Failed to mirror workspace: %s", exc)
        return None


def run_bootstrap(settings: Settings, env: GatewayEnvironment) -> BootstrapReport:
    """Restore, mirror, onboard and patch. Never raises for I/O trouble in any step."""
    report = BootstrapReport()
    logger.info("Config directory: %s", settings.config_dir)
    logger.info("Backup directory: %s", settings.backup_dir)
    settings.config_dir.mkdir(parents=True, exist_ok=True)

    resolved = resolve_all(settings.backup_dir)
    restorer = CategoryRestorer(settings)
    # One verdict per boot: a marker copied by the config restore must not
    # make a newer workspace or skills backup look already applied. Comparing
    # again per category would skip a populated workspace on that same boot.
    verdict = restorer.verdict() if any(r.found for r in resolved.values()) else None

    for category in RESTORE_ORDER:
        report.restores[category] = restorer.restore_if_needed(resolved[category], verdict)
        if category is Category.WORKSPACE:
            report.mirror = _mirror_workspace(settings)

    report.onboarded = OnboardingService(settings, env).onboard_if_needed()

    try:
        patch_config_file(settings.config_file, env)
        report.config_patched = True
    except OSError as exc:
        logger.error("Failed to write patched config %s: %s", settings.config_file, exc)

    return report


def print_status(settings: Settings) -> None:
    """Print markers, verdict and resolved layouts without changing anything."""
    resolved = resolve_all(settings.backup_dir)
    restorer = CategoryRestorer(settings)
    remote = read_marker(settings.remote_marker)
    local = read_marker(settings.local_marker)

    print("Backup Status:")
    print(f"  Backup root:      {settings.backup_dir}")
    print(f"  Mounted:          {'yes' if settings.backup_dir.is_dir() else 'no'}")
    print(f"  Remote last sync: {remote if remote is not None else '(none)'}")
    print(f"  Local last sync:  {local if local is not None else '(none)'}")
    print(f"  Verdict:          {restorer.verdict()}")
    for category in RESTORE_ORDER:
        backup = resolved[category]
        target = restorer.target(category)
        local_state = "missing" if target.is_missing() else "present"
        source = backup.source if backup.source is not None else "-"
        print(f"    {category:<10} {backup.layout:<14} {source} (local {local_state})")
    workspace_empty = is_dir_empty(settings.runtime_workspace_dir)
    print(f"  Runtime workspace: {'empty' if workspace_empty else 'populated'}")


def cli_entry() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="openclaw-bootstrap",
        description="Restore OpenClaw state from backup and start the gateway",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--no-launch",
        action="store_true",
        help="Stop after patching the config instead of starting the gateway",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("run", help="Reconcile state and start the gateway (default)")
    subparsers.add_parser("status", help="Show backup markers and layouts")

    args = parser.parse_args()
    settings = Settings(debug=True) if args.debug else Settings()
    _configure_logging(settings.debug)

    if args.command == "status":
        print_status(settings)
        return

    gateway = GatewayService(settings)
    if gateway.is_running():
        logger.info("OpenClaw gateway is already running, exiting.")
        return

    env = GatewayEnvironment()
    report = run_bootstrap(settings, env)
    logger.info(
        "Bootstrap finished: %s",
        ", ".join(f"{category}={outcome}" for category, outcome in report.restores.items()),
    )

    gateway.clear_stale_locks()
    logger.info("Dev mode: %s", env.openclaw_dev_mode)
    report_environment(os.environ)

    if args.no_launch:
        return
    try:
        gateway.launch(env.openclaw_gateway_token)
    except OSError as exc:
        logger.critical("Failed to start gateway: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    cli_entry()
