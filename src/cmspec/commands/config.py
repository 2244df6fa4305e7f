"""Config commands -- view and modify user settings.

Provides the ``cmspec config`` sub-command group for reading, updating,
and resetting the user's configuration file
(:class:`~cmspec.models.UserConfig`). Settings are persisted in the cmspec
config directory and supply the lowest-precedence defaults for document
metadata, slug-collision policy and output format.
"""

from __future__ import annotations

import json

import typer

from cmspec.output import error, info, print_settings, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        cmspec config show
        cmspec --json config show
    """
    from cmspec.config import get_config_dir, load_user_config

    config = load_user_config()
    info(f"Config directory: {get_config_dir()}")
    print_settings(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'defaults.title')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type: booleans from ``true``/``1``/``yes``, mappings
    from a JSON object, strings as-is. The updated config is validated
    against :class:`~cmspec.models.UserConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        cmspec config set defaults.title "Blog API"
        cmspec config set defaults.strict_slugs true
        cmspec config set defaults.info '{"contact": {"name": "Docs team"}}'
        cmspec config set output.format json
    """
    from pydantic import ValidationError

    from cmspec.config import load_user_config, save_user_config
    from cmspec.models import UserConfig

    config = load_user_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, dict):
        try:
            coerced = json.loads(value)
        except json.JSONDecodeError:
            error(f"Expected a JSON object for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = UserConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_user_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        cmspec config reset
        cmspec --force config reset
    """
    from cmspec.config import save_user_config
    from cmspec.models import UserConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_user_config(UserConfig())
    success("Configuration reset to defaults.")
