"""Typer CLI entrypoint and command definitions for habitquest."""

from __future__ import annotations

import threading
from pathlib import Path

import typer
from pydantic import ValidationError

from habitquest.core.defaults import (
    CONFIG_DIR_ENVVAR,
    DEFAULT_INACTIVITY_THRESHOLD_HOURS,
    DEFAULT_TICK_SECONDS,
)
from habitquest.core.errors import NotifierDispatchError, ReminderError
from habitquest.core.logging import configure_logging
from habitquest.core.paths import ConfigDirectory, FixedConfigDirectory, UserConfigDirectory
from habitquest.core.types import NotificationConfig
from habitquest.notify.notifier import PlyerNotifier
from habitquest.service import ReminderService

app = typer.Typer(help="Background habit reminders for HabitQuest.")

_CONFIG_DIR_HELP = "Directory holding notification_config.json and activity_data.json"


def _directory(config_dir: str | None) -> ConfigDirectory:
    if config_dir:
        return FixedConfigDirectory(Path(config_dir).expanduser())
    return UserConfigDirectory()


def _open_service(config_dir: str | None) -> ReminderService:
    """Build a service and load persisted state, exiting on unreadable documents."""
    service = ReminderService(PlyerNotifier(), _directory(config_dir))
    try:
        service.load_persisted_state()
    except ReminderError as exc:
        typer.echo(f"Could not load reminder state: {exc}", err=True)
        raise typer.Exit(code=1)
    return service


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Root log level"),
) -> None:
    configure_logging(log_level)


# -- run ----------------------------------------------------------------------


@app.command("run")
def run_cmd(
    config_dir: str = typer.Option(None, envvar=CONFIG_DIR_ENVVAR, help=_CONFIG_DIR_HELP),
    tick_seconds: float = typer.Option(DEFAULT_TICK_SECONDS, min=1, help="Seconds between reminder checks"),
    inactivity_hours: int = typer.Option(
        DEFAULT_INACTIVITY_THRESHOLD_HOURS, min=0,
        help="Hours without activity before a reminder fires",
    ),
) -> None:
    """Run the reminder scheduler in the foreground until interrupted."""
    service = ReminderService(
        PlyerNotifier(),
        _directory(config_dir),
        tick_seconds=tick_seconds,
        inactivity_threshold_hours=inactivity_hours,
    )
    try:
        service.load_persisted_state()
    except ReminderError as exc:
        typer.echo(f"Warning: could not load reminder state ({exc}); using defaults", err=True)

    service.start()
    typer.echo(f"habitquest reminders running (check every {tick_seconds:g}s). Press Ctrl-C to stop.")
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        service.stop(timeout=5)
        typer.echo("Stopped.")


# -- activity -----------------------------------------------------------------


@app.command("activity")
def activity_cmd(
    config_dir: str = typer.Option(None, envvar=CONFIG_DIR_ENVVAR, help=_CONFIG_DIR_HELP),
) -> None:
    """Record that the user is active now."""
    service = _open_service(config_dir)
    service.record_activity()
    typer.echo(f"Activity recorded at {service.activity.last_activity:%Y-%m-%d %H:%M}")


@app.command("complete")
def complete_cmd(
    habit_id: str = typer.Argument(..., help="Habit identifier"),
    config_dir: str = typer.Option(None, envvar=CONFIG_DIR_ENVVAR, help=_CONFIG_DIR_HELP),
) -> None:
    """Record a habit completion."""
    service = _open_service(config_dir)
    try:
        service.record_habit_completion(habit_id)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Completion recorded for {habit_id}")


# -- config -------------------------------------------------------------------
config_app = typer.Typer(help="Show or change the notification policy.")
app.add_typer(config_app, name="config")


@config_app.command("show")
def config_show_cmd(
    config_dir: str = typer.Option(None, envvar=CONFIG_DIR_ENVVAR, help=_CONFIG_DIR_HELP),
) -> None:
    """Print the notification policy as JSON."""
    service = _open_service(config_dir)
    typer.echo(service.config.model_dump_json(indent=2))


@config_app.command("set")
def config_set_cmd(
    config_dir: str = typer.Option(None, envvar=CONFIG_DIR_ENVVAR, help=_CONFIG_DIR_HELP),
    enabled: bool = typer.Option(None, "--enabled/--disabled", help="Master switch"),
    start_hour: int = typer.Option(None, "--start-hour", help="First active hour (0-23)"),
    end_hour: int = typer.Option(None, "--end-hour", help="Last active hour (0-23)"),
    max_per_day: int = typer.Option(None, "--max-per-day", help="Maximum reminders per day"),
    sound: bool = typer.Option(None, "--sound/--no-sound", help="Play a sound with reminders"),
) -> None:
    """Change selected fields of the notification policy and save it."""
    service = _open_service(config_dir)

    patch: dict[str, object] = {}
    if enabled is not None:
        patch["enabled"] = enabled
    if start_hour is not None:
        patch["reminder_start_hour"] = start_hour
    if end_hour is not None:
        patch["reminder_end_hour"] = end_hour
    if max_per_day is not None:
        patch["max_reminders_per_day"] = max_per_day
    if sound is not None:
        patch["sound_enabled"] = sound

    if not patch:
        typer.echo("Nothing to change.")
        return

    try:
        new_config = NotificationConfig.model_validate({**service.config.model_dump(), **patch})
    except ValidationError as exc:
        typer.echo(f"Invalid config: {exc}", err=True)
        raise typer.Exit(code=1)

    try:
        service.update_config(new_config)
    except ReminderError as exc:
        typer.echo(f"Config could not be saved: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(new_config.model_dump_json(indent=2))


# -- status / notify-test ----------------------------------------------------


@app.command("status")
def status_cmd(
    config_dir: str = typer.Option(None, envvar=CONFIG_DIR_ENVVAR, help=_CONFIG_DIR_HELP),
) -> None:
    """Summarise the persisted reminder state."""
    service = _open_service(config_dir)
    config = service.config
    activity = service.activity
    status = service.status()

    typer.echo(f"Config dir:        {status.config_dir or '(unresolved)'}")
    typer.echo(f"Enabled:           {config.enabled}")
    typer.echo(f"Active hours:      {config.reminder_start_hour:02d}:00-{config.reminder_end_hour:02d}:59")
    typer.echo(f"Sent today:        {status.notifications_sent_today}/{config.max_reminders_per_day}")
    typer.echo(f"Last activity:     {activity.last_activity:%Y-%m-%d %H:%M}")
    typer.echo(f"Sessions (24h):    {len(activity.daily_sessions)}")
    typer.echo(f"Habits tracked:    {len(activity.habit_completions)}")


@app.command("notify-test")
def notify_test_cmd(
    config_dir: str = typer.Option(None, envvar=CONFIG_DIR_ENVVAR, help=_CONFIG_DIR_HELP),
    title: str = typer.Option(None, "--title", help="Notification title (default: reminder title)"),
    body: str = typer.Option(None, "--body", help="Notification text (default: reminder text)"),
    icon: str = typer.Option(None, "--icon", help="Path to an icon file"),
) -> None:
    """Send a notification right away (does not count against the quota)."""
    service = _open_service(config_dir)
    try:
        service.send_test_notification(title, body, icon)
    except NotifierDispatchError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo("Notification sent.")


if __name__ == "__main__":
    app()
