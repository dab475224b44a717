# lsct/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict

import click
from click.core import ParameterSource
from click_option_group import optgroup
import structlog

from lsct import __version__ as app_version
from lsct.config.settings import ListingConfig, ClassifierMode, DEFAULT_CLASSIFIER_MODE
from lsct.config.loader import load_and_merge_configs, resolve_config_options
from lsct.logging_setup import configure_logging
from lsct.core.session import ListingSession
from lsct.cli.console_output import print_cli_summary_output
from lsct.exceptions import LsctError

log = structlog.get_logger(__name__)

# boolean flags that override config files only when given on the command line.
CLI_FLAG_ATTRS = ("include_hidden", "mime_format", "null_terminator", "ignore_inaccessible_roots")

def _build_effective_config(ctx: click.Context, cli_params: Dict[str, Any]) -> ListingConfig:
    raw_configs_from_toml_files = load_and_merge_configs()
    effective_options = resolve_config_options(
        raw_configs_from_toml_files, cli_params.get("active_config_profile_name")
    )

    for attr in CLI_FLAG_ATTRS:
        if ctx.get_parameter_source(attr) == ParameterSource.COMMANDLINE:
            effective_options[attr] = cli_params[attr]

    if cli_params["roots"]:
        effective_options["roots"] = list(cli_params["roots"])
    if cli_params["classifier_mode_str"] is not None:
        effective_options["classifier_mode"] = ClassifierMode.from_string(cli_params["classifier_mode_str"])
    if cli_params["magic_file"] is not None:
        effective_options["magic_file"] = cli_params["magic_file"]
    if cli_params["console_show_summary"] is not None:
        effective_options["console_show_summary"] = cli_params["console_show_summary"]

    return ListingConfig(**effective_options)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("roots", nargs=-1, type=click.Path(path_type=bytes))
@optgroup.group("Selection Options", help="Control which entries are listed.")
@optgroup.option("-a", "--all", "--include-hidden", "include_hidden", is_flag=True, default=False, help="Do not ignore entries starting with '.'.")
@optgroup.option("-i", "--ignore-inaccessible", "--ignore-inaccessible-roots", "ignore_inaccessible_roots", is_flag=True, default=False, help="Warn about and skip FILE arguments that cannot be read, instead of failing.")
@optgroup.group("Output Options", help="Control the format of listed records.")
@optgroup.option("-m", "--mime", "--mime-format", "mime_format", is_flag=True, default=False, help="Output records as '<type>: <file>'.")
@optgroup.option("-0", "--null", "--null-terminator", "null_terminator", is_flag=True, default=False, help="End records with NUL instead of newline.")
@optgroup.option("--summary/--no-summary", "console_show_summary", default=None, help="Show a per-type count table on stderr. Default: off.")
@optgroup.group("Classification Options", help="Configure the libmagic backend.")
@optgroup.option("--classifier-mode", "classifier_mode_str", type=click.Choice([m.value for m in ClassifierMode]), default=None, help=f"What libmagic reports for each file. Default: {DEFAULT_CLASSIFIER_MODE.value}.")
@optgroup.option("--magic-file", "magic_file", type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path), default=None, help="Use this magic database instead of the system default.")
@optgroup.group("Application Behavior", help="Configuration profiles and logging.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, prog_name="lsct", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, **cli_params: Any):
    """List FILEs (the current directory by default) recursively, sorted by content type."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", params={k: v for k, v in cli_params.items() if k != "roots"}, roots=len(cli_params["roots"]))

    try:
        final_config = _build_effective_config(ctx, cli_params)
        session = ListingSession(final_config)
        session.run()
        if final_config.console_show_summary:
            print_cli_summary_output(session)

    except click.exceptions.Exit as e: raise e
    except LsctError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except MemoryError:
        log.critical("out_of_memory_in_cli")
        click.secho("Error: out of memory", fg="red", err=True)
        sys.exit(1)
    except click.ClickException as e:
        log.error("click_exception_in_cli", error_type=type(e).__name__, message=str(e))
        e.show(); sys.exit(e.exit_code)
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
