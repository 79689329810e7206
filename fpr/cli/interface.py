# fpr/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict
from dataclasses import fields as dataclass_fields, MISSING

import click
from click.core import ParameterSource
from click_option_group import optgroup
import structlog
import logging as stdlib_logging

from fpr import __version__ as app_version
from fpr.config.settings import (
    PrintConfig, SortMethod,
    DEFAULT_SEPARATOR, DEFAULT_RECURSIVE, DEFAULT_SORT_METHOD, DEFAULT_CONSOLE_SHOW_SUMMARY,
)
from fpr.config.loader import load_and_merge_configs, save_config_to_profile, settings_from_toml
from fpr.logging_setup import configure_logging
from fpr.core.output import write_to_stdout, write_to_file
from fpr.core.pipeline import FilePrinter
from fpr.exceptions import FprError

log = structlog.get_logger(__name__)

# cli parameters that map straight onto PrintConfig fields.
CLI_PARAM_TO_CONFIG_ATTR: Dict[str, str] = {
    "separator": "separator",
    "recursive": "recursive",
    "respect_gitignore": "respect_gitignore",
    "follow_symlinks": "follow_symlinks",
    "line_numbers": "line_numbers",
    "sort_method_str": "sort_method",
    "output_file": "output_file",
    "read_from_stdin": "read_from_stdin",
    "nul_separated": "nul_separated",
    "console_show_summary": "console_show_summary",
    "save_profile_name": "save_profile_name",
}


def _print_cli_summary_output(config: PrintConfig, printer: FilePrinter):
    if not config.console_show_summary:
        return
    click.secho("--- execution summary ---", fg="cyan", err=True)
    pattern_count = sum(len(v) for v in printer.expanded_patterns.values())
    click.echo(f"Inputs: {len(printer.expanded_patterns)} (expanded to {pattern_count} patterns)", err=True)
    click.echo(f"Files printed: {len(printer.files)}", err=True)


def _run_print_flow(effective_config: PrintConfig):
    log.info("print_flow_started", inputs=len(effective_config.inputs))
    printer = FilePrinter(effective_config)
    output = printer.generate()

    if effective_config.output_file:
        write_to_file(effective_config.output_file, output)
        click.echo(f"Info: Output written to: {effective_config.output_file}", err=True)
    else:
        write_to_stdout(output)

    _print_cli_summary_output(effective_config, printer)


def _build_effective_config(ctx: click.Context, cli_params: Dict[str, Any]) -> PrintConfig:
    # layers: dataclass defaults < config files < profile < command line.
    effective_options: Dict[str, Any] = {}
    for fd in dataclass_fields(PrintConfig):
        if fd.init:
            effective_options[fd.name] = fd.default_factory() if fd.default_factory is not MISSING else fd.default

    raw_configs = load_and_merge_configs()
    effective_options.update(settings_from_toml(raw_configs, cli_params.get("active_config_profile_name")))

    for param_name, pc_attr in CLI_PARAM_TO_CONFIG_ATTR.items():
        if ctx.get_parameter_source(param_name) != ParameterSource.COMMANDLINE:
            continue
        value = cli_params[param_name]
        if param_name == "sort_method_str":
            value = SortMethod.from_string(value) or DEFAULT_SORT_METHOD
        effective_options[pc_attr] = value

    if cli_params.get("inputs"):
        effective_options["inputs"] = list(cli_params["inputs"])

    return PrintConfig(**effective_options)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("inputs", nargs=-1)
@optgroup.group("Resolution Options", help="How expanded patterns are turned into files.")
@optgroup.option("-r", "--recursive/--no-recursive", "recursive", default=DEFAULT_RECURSIVE, help="Recurse into sub-directories when an input is a directory. Default: on.")
@optgroup.option("--respect-gitignore", "respect_gitignore", is_flag=True, default=False, help="Skip files ignored by .gitignore when walking directories or matching globs.")
@optgroup.option("-L", "--follow-symlinks", "follow_symlinks", is_flag=True, default=False, help="Follow symbolic links to directories.")
@optgroup.option("--stdin", "read_from_stdin", is_flag=True, default=False, help="Read additional inputs from stdin, one per line.")
@optgroup.option("-0", "--null", "nul_separated", is_flag=True, default=False, help="Inputs from stdin are NUL-separated.")
@optgroup.group("Output Options", help="Control how files are printed.")
@optgroup.option("--separator", "separator", default=DEFAULT_SEPARATOR, show_default=True, help="Separator printed between files.")
@optgroup.option("-n", "--line-numbers", "line_numbers", is_flag=True, default=False, help="Prepend line numbers to file content.")
@optgroup.option("--sort", "sort_method_str", type=click.Choice([s.value for s in SortMethod]), default=DEFAULT_SORT_METHOD.value, help=f"Order of printed files. Default: {DEFAULT_SORT_METHOD.value}.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Write the output to a file instead of stdout.")
@optgroup.option("--console-summary/--no-console-summary", "console_show_summary", default=DEFAULT_CONSOLE_SHOW_SUMMARY, help="Show a summary of inputs and files on stderr. Default: off.")
@optgroup.group("Application Behavior", help="Configuration profiles, saving, and logging.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--save", "save_profile_name", type=str, metavar="PROFILE_NAME", default=None, help="Save options to a profile in the project's .fpr.toml ('DEFAULT' for top-level) and exit.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, prog_name="fpr", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, **cli_params: Any):
    """fpr: print files, globs and grouped path patterns with separators.

    \b
    Inputs may use grouping with parentheses and commas:
      fpr 'src/(main.rs, lib.rs, util/(fs, time), -tests)'
    A segment starting with '-' or '^' is excluded from the result.
    """
    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", params=cli_params)

    try:
        final_config = _build_effective_config(ctx, cli_params)

        if final_config.save_profile_name:
            saved_to = save_config_to_profile(final_config, final_config.save_profile_name)
            if saved_to:
                click.echo(f"Configuration saved to profile '{final_config.save_profile_name}' in '{saved_to.name}'.", err=True)
            else:
                click.echo(f"No options differing from defaults for profile '{final_config.save_profile_name}'. Nothing saved.", err=True)
            ctx.exit(0)

        if not final_config.inputs and not final_config.read_from_stdin:
            raise click.UsageError("Missing argument 'INPUTS...'.", ctx=ctx)

        _run_print_flow(final_config)

    except click.exceptions.Exit:
        raise
    except click.ClickException:
        raise
    except FprError as e:
        log.error(
            "handled_application_error_in_cli",
            error_type=type(e).__name__,
            message=str(e),
            is_debug=(stdlib_logging.getLogger("fpr").getEffectiveLevel() <= stdlib_logging.DEBUG),
        )
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
