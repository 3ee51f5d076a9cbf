"""Config commands -- view and modify global configuration.

Provides the ``specedit config`` sub-command group for reading, updating
and resetting the user's global configuration file
(:class:`~specedit.models.GlobalConfig`): history size, selection history
size, read timeout and default output format.
"""

from __future__ import annotations

import typer

from specedit.output import error, format_data, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Show the resolved configuration (project, environment and flags applied).",
    ),
) -> None:
    """Show current configuration.

    Example::

        specedit config show
        specedit --json config show --effective
    """
    from specedit.commands import config_from
    from specedit.config import get_config_dir, load_global_config

    config = config_from(ctx) if effective else load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_data(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'history.max_size')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to the type of
    the existing field and the updated config is validated against
    :class:`~specedit.models.GlobalConfig` before saving.

    Example::

        specedit config set history.max_size 200
        specedit config set host.read_timeout 2.5
        specedit config set output.format json
    """
    from specedit.config import load_global_config, save_global_config
    from specedit.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    try:
        if isinstance(current, bool):
            coerced = value.lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            coerced = int(value)
        elif isinstance(current, float):
            coerced = float(value)
        else:
            coerced = value
    except ValueError:
        error(f"Expected {type(current).__name__} for {key}, got: {value}")
        raise typer.Exit(code=2) from None

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Example::

        specedit config reset --force
    """
    from specedit.config import save_global_config
    from specedit.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
