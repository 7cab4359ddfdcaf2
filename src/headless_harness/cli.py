"""Command line interface entry point."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, replace

import click

from headless_harness.configuration import (
    ConfigurationError,
    CpuCore,
    ExitPolicy,
    GraphicsBackend,
    HarnessSettings,
    load_profile,
)
from headless_harness.engine_boundary import (
    EngineFactory,
    EngineLoadError,
    configure_engine_logging,
    load_engine_factory,
)
from headless_harness.host_backends import available_backends
from headless_harness.run_execution import RunExecutionError, RunRequest, execute_headless_run

ENGINE_ENVVAR = "HEADLESS_ENGINE"
_DEFAULT_GRAPHICS = GraphicsBackend.GLES.value


class CliError(Exception):
    """Custom CLI error."""


@dataclass(frozen=True)
class CliDependencies:
    """Collaborators injected by `main` instead of being resolved from options."""

    engine_factory: EngineFactory | None = None
    argv: tuple[str, ...] = ()


def _print_usage(ctx: click.Context, reason: str | None) -> None:
    if reason is not None:
        click.echo(f"Error: {reason}\n", err=True)
    click.echo(ctx.get_help(), err=True)


def _show_help(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    _print_usage(ctx, None)
    ctx.exit(1)


def _require_finite(
    _ctx: click.Context, param: click.Parameter, value: float | None
) -> float | None:
    if value is not None and not math.isfinite(value):
        raise click.BadParameter("must be a finite number.", param=param)
    return value


def _graphics_help() -> str:
    names = ", ".join(backend.value for backend in available_backends())
    return f"Use a graphics backend (slower). Options: {names}. Bare flag selects gles."


@click.command(
    name="headless",
    add_help_option=False,
    epilog="Runs one guest executable non-interactively and reports the result.",
)
@click.argument("boot_path", required=False, type=click.Path(path_type=str))
@click.option(
    "-m",
    "--mount",
    "mount_path",
    type=click.Path(path_type=str),
    help="Mount a disc image (e.g. umd.cso) on the emulated drive.",
)
@click.option(
    "-l", "--log", "full_log", is_flag=True, help="Full log output, not just emulated printfs."
)
@click.option("-i", "use_interpreter", is_flag=True, help="Use the interpreter.")
@click.option("-j", "use_jit", is_flag=True, help="Use the JIT (default).")
@click.option(
    "-c",
    "--compare",
    is_flag=True,
    help="Compare guest output with the file.expected reference.",
)
@click.option(
    "--graphics",
    "graphics",
    is_flag=False,
    flag_value=_DEFAULT_GRAPHICS,
    default=None,
    metavar="BACKEND",
    help=_graphics_help(),
)
@click.option(
    "--screenshot",
    "screenshot_path",
    type=click.Path(path_type=str),
    metavar="FILE",
    help="Compare the first presented frame against a screenshot.",
)
@click.option(
    "--timeout",
    "timeout_seconds",
    type=float,
    default=None,
    metavar="SECONDS",
    help="Abort the test if it takes longer than SECONDS (negative: never).",
)
@click.option("--teamcity", is_flag=True, help="Emit TeamCity service messages.")
@click.option(
    "--engine",
    "engine_reference",
    envvar=ENGINE_ENVVAR,
    metavar="MODULE:FACTORY",
    help=f"Emulation engine factory to load (env: {ENGINE_ENVVAR}).",
)
@click.option(
    "--config",
    "profile_path",
    type=click.Path(path_type=str),
    help="Optional YAML profile with engine, run, reporting and system settings.",
)
@click.option(
    "--slice-ms",
    "slice_ms",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    callback=_require_finite,
    help="Virtual time per engine slice in milliseconds (default 100).",
)
@click.option(
    "--strict-exit",
    is_flag=True,
    help="Exit with 1 when the verdict is a mismatch, missing reference or timeout.",
)
@click.option(
    "-h",
    "--help",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_show_help,
    help="Show this message and exit.",
)
@click.pass_context
def cli(  # pylint: disable=too-many-arguments,too-many-locals
    ctx: click.Context,
    boot_path: str | None,
    mount_path: str | None,
    full_log: bool,
    use_interpreter: bool,
    use_jit: bool,
    compare: bool,
    graphics: str | None,
    screenshot_path: str | None,
    timeout_seconds: float | None,
    teamcity: bool,
    engine_reference: str | None,
    profile_path: str | None,
    slice_ms: float | None,
    strict_exit: bool,
) -> int:
    """Headless test driver: run one guest executable to completion or timeout.

    BOOT_PATH is the executable (file.elf / file.prx) to boot.
    """
    dependencies = ctx.obj if isinstance(ctx.obj, CliDependencies) else CliDependencies()
    if boot_path is None:
        _print_usage(ctx, "No executable specified" if dependencies.argv else None)
        return 1
    if use_interpreter and use_jit:
        _print_usage(ctx, "-i and -j are mutually exclusive")
        return 1
    try:
        backend = GraphicsBackend.parse(graphics) if graphics else GraphicsBackend.NONE
    except ValueError:
        _print_usage(ctx, "Unknown gpu backend specified after --graphics=")
        return 1

    try:
        profile = load_profile(profile_path)
        harness = _merge_harness_settings(
            profile.harness,
            engine_reference=engine_reference,
            slice_ms=slice_ms,
            strict_exit=strict_exit,
        )
        engine_factory = dependencies.engine_factory or _resolve_engine_factory(harness)
    except (ConfigurationError, EngineLoadError) as exc:
        raise CliError(str(exc)) from exc

    configure_engine_logging(full_log)
    try:
        outcome = execute_headless_run(
            RunRequest(
                boot_path=boot_path,
                mount_path=mount_path,
                cpu_core=CpuCore.INTERPRETER if use_interpreter else CpuCore.JIT,
                graphics=backend,
                compare=compare,
                screenshot_path=screenshot_path,
                timeout_seconds=timeout_seconds,
                teamcity=teamcity,
                harness=harness,
                system=profile.system,
            ),
            engine_factory=engine_factory,
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    return outcome.exit_code


def _merge_harness_settings(
    harness: HarnessSettings,
    *,
    engine_reference: str | None,
    slice_ms: float | None,
    strict_exit: bool,
) -> HarnessSettings:
    merged = harness
    if engine_reference:
        merged = replace(merged, engine_factory=engine_reference)
    if slice_ms is not None:
        merged = replace(merged, slice_ms=slice_ms)
    if strict_exit:
        merged = replace(merged, exit_policy=ExitPolicy.STRICT)
    return merged


def _resolve_engine_factory(harness: HarnessSettings) -> EngineFactory:
    if not harness.engine_factory:
        raise EngineLoadError(
            f"No emulation engine configured; pass --engine, set {ENGINE_ENVVAR} "
            "or add engine.factory to the profile."
        )
    return load_engine_factory(harness.engine_factory)


def _expand_bare_graphics(argv: list[str]) -> list[str]:
    """Give a bare `--graphics` the default backend.

    A backend name is only accepted in the `--graphics=NAME` form, so the
    word after a bare flag stays a separate argument.
    """
    expanded: list[str] = []
    for index, token in enumerate(argv):
        if token == "--":
            return expanded + argv[index:]
        expanded.append(f"--graphics={_DEFAULT_GRAPHICS}" if token == "--graphics" else token)
    return expanded


def main(argv: list[str] | None = None, *, engine_factory: EngineFactory | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        result = cli.main(
            args=_expand_bare_graphics(list(argv)),
            prog_name="headless",
            standalone_mode=False,
            obj=CliDependencies(engine_factory=engine_factory, argv=tuple(argv)),
        )
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.UsageError as exc:
        exc.show()
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
