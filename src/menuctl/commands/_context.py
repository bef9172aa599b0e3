"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy gateway and service construction and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click

from menuctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from menuctl.config.settings import MenuSettings
    from menuctl.infrastructure.gateway import PersistenceGateway
    from menuctl.plugins.manager import PluginManager
    from menuctl.plugins.notifier import ChangeNotifier
    from menuctl.services.menus import MenuService
    from menuctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The gateway, plugins,
    and service are created lazily on first use so ``--help`` and
    ``--version`` never touch the database.
    """

    def __init__(self, settings: MenuSettings) -> None:
        self.settings = settings
        self._gateway: PersistenceGateway | None = None
        self._plugin_manager: PluginManager | None = None
        self._notifier: ChangeNotifier | None = None
        self._service: MenuService | None = None

        from menuctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from menuctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def gateway(self) -> PersistenceGateway:
        """The configured Persistence Gateway (created lazily)."""
        if self._gateway is None:
            if self.settings.storage.backend == "memory":
                from menuctl.infrastructure.memory_gateway import InMemoryGateway

                self._gateway = InMemoryGateway()
            else:
                from menuctl.infrastructure.sql_gateway import SqlPersistenceGateway

                self._gateway = SqlPersistenceGateway.from_path(self.settings.db_path)
        return self._gateway

    @property
    def plugin_manager(self) -> PluginManager:
        """Plugin manager with entry-point plugins and built-in surfaces."""
        if self._plugin_manager is None:
            from menuctl.plugins.builtins.surfaces import ConsoleSurface
            from menuctl.plugins.manager import PluginManager

            pm = PluginManager()
            if self.settings.plugins.enabled:
                try:
                    pm.discover_and_load()
                except Exception:
                    logger.warning("Plugin discovery failed", exc_info=True)
            if self.settings.plugins.console_preview:
                pm.register_plugin(ConsoleSurface(), name="console-surface")
            self._plugin_manager = pm
        return self._plugin_manager

    @property
    def notifier(self) -> ChangeNotifier:
        if self._notifier is None:
            from menuctl.plugins.notifier import ChangeNotifier

            self._notifier = ChangeNotifier(self.plugin_manager)
        return self._notifier

    @property
    def service(self) -> MenuService:
        """The menu service bound to this invocation's gateway and plugins."""
        if self._service is None:
            from menuctl.services.menus import MenuService

            self._service = MenuService(
                self.gateway,
                notifier=self.notifier,
                editor=self.settings.editor,
                publish=self.settings.publish,
            )
        return self._service

    def is_interactive(self) -> bool:
        """Prompts require: no ``--no-interact``, no ``--json``, and a TTY stdin."""
        return (
            not self.settings.no_interact
            and not self.settings.json_output
            and sys.stdin.isatty()
        )

    def confirm(self, prompt: str, *, yes: bool = False) -> bool:
        """Ask before a destructive action.

        ``--yes`` and ``--no-interact`` answer for the user. Otherwise a
        prompt is shown; declining aborts the command.
        """
        if yes or self.settings.no_interact:
            return True
        return click.confirm(prompt, default=False, abort=True)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        dispose = getattr(self._gateway, "dispose", None)
        if dispose is not None:
            dispose()
