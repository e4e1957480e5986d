"""
Main CLI interface for mp3inspect

This module provides the command-line interface: glob expansion of the file
arguments, one inspection per file, and rendering of the reports. The CLI is
the only layer that maps results to process exit codes.

The CLI is built using Click framework and provides:
- inspect: print tag fields and audio statistics for MP3 files
- config: show, update and save configuration
- doctor: check configuration and environment
"""

import sys
import click
import functools

from . import __version__
from .config.settings import (
    get_settings,
    reload_settings,
    FRAME_SIZE_MODES,
    ENCODING_POLICIES,
    OUTPUT_FORMATS
)
from .exceptions import ConfigError
from .report.emitter import ReportEmitter
from .report.inspector import InspectionStatus, get_inspector, reset_inspector
from .utils.logger import (
    configure_from_settings,
    create_operation_logger,
    get_current_log_file,
    get_logger,
    setup_logging
)
from .utils.helpers import expand_file_patterns
from .utils.validation import validate_encoding_name


# Initialize logging system from configuration settings
configure_from_settings()
logger = get_logger(__name__)


def handle_error(func):
    """
    Decorator to handle common CLI errors gracefully

    Catches exceptions escaping a command, logs them and exits with a
    non-zero status instead of printing a traceback.

    Args:
        func: The CLI command function to wrap

    Returns:
        Wrapped function with error handling
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)  # Standard exit code for SIGINT
        except Exception as e:
            logger.debug(f"Command failed: {e}", exc_info=e)
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Show diagnostic messages on the console')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
def cli(ctx, version, verbose, config):
    """
    mp3inspect - show ID3v2.3 tags and audio statistics of MP3 files

    Reads the ID3v2.3 tag at the front of each file (or the ID3v1 trailer
    when there is none) and scans the MPEG audio frames that follow it.
    Files are never modified.
    """
    ctx.ensure_object(dict)

    if version:
        click.echo(f"mp3inspect v{__version__}")
        return

    if config:
        reload_settings(config)
        reset_inspector()
        configure_from_settings()
        logger.info(f"Loaded config: {config}")

    if verbose:
        ctx.obj['verbose'] = True
        settings = get_settings()
        setup_logging(
            level="DEBUG",
            log_file=str(get_current_log_file()) if get_current_log_file() else None,
            console_output=True,
            colored_output=settings.logging.colored_output,
            verbose_console=True
        )
        logger.debug("Verbose mode enabled")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument('patterns', nargs=-1, required=True)
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS), help='Report format')
@click.option('--strict-version', is_flag=True, help='Reject tags that are not ID3v2.3.0')
@click.option('--frame-size-mode', type=click.Choice(FRAME_SIZE_MODES), help='Frame size decoding')
@click.option('--encoding-policy', type=click.Choice(ENCODING_POLICIES), help='Encoding selector policy')
@click.option('--legacy-encoding', help='Codec for text marked as ISO-8859-1 (e.g. gb18030, cp1251)')
@click.option('--no-scan', is_flag=True, help='Skip the MPEG audio frame scan')
@click.option('--progress', is_flag=True, help='Show a progress bar')
@handle_error
def inspect(patterns, output_format, strict_version, frame_size_mode, encoding_policy,
            legacy_encoding, no_scan, progress):
    """
    Inspect MP3 files

    Each PATTERN is a file name or a glob pattern such as "~/Music/*.mp3".
    A file that cannot be read is reported and the remaining files are still
    inspected. Exits with status 1 if any file failed.
    """
    settings = get_settings()

    # Apply setting overrides from command line
    if strict_version:
        settings.id3.strict_version = True
    if frame_size_mode:
        settings.id3.frame_size_mode = frame_size_mode
    if encoding_policy:
        settings.id3.encoding_policy = encoding_policy
    if legacy_encoding:
        is_valid, error_msg = validate_encoding_name(legacy_encoding)
        if not is_valid:
            click.echo(click.style(error_msg, fg='red'), err=True)
            sys.exit(1)
        settings.id3.legacy_encoding = legacy_encoding
    if no_scan:
        settings.scan.enabled = False
    if output_format:
        settings.output.format = output_format

    errors = settings.get_errors()
    if errors:
        raise ConfigError("; ".join(errors))

    # Rebuild the inspector with the overridden settings
    reset_inspector()
    inspector = get_inspector()

    files, unmatched = expand_file_patterns(list(patterns))
    for pattern in unmatched:
        click.echo(click.style(f"No files match: {pattern}", fg='yellow'), err=True)

    if not files:
        click.echo(click.style("No files to inspect", fg='red'), err=True)
        sys.exit(1)

    emitter = ReportEmitter(show_statistics=settings.output.show_statistics)
    fmt = settings.output.format

    operation = create_operation_logger(__name__, "Inspection", show_progress=progress)
    operation.start()

    results = []
    for index, result in enumerate(inspector.inspect_many(files), 1):
        operation.progress(str(result.path), index, len(files))
        results.append(result)

        if fmt == 'text':
            report = emitter.render_text(result)
            if result.status is InspectionStatus.FAILED:
                click.echo(click.style(report, fg='red'))
            else:
                click.echo(report)

    failed = [result for result in results if not result.ok]
    operation.complete(f"Inspected {len(results)} files" if progress else None)

    if fmt == 'yaml':
        click.echo(emitter.render_yaml(results), nl=False)

    if failed:
        click.echo(
            click.style(f"{len(failed)} of {len(results)} files could not be inspected", fg='red'),
            err=True
        )
        sys.exit(1)


# Configuration commands group
@cli.group()
def config():
    """
    Configuration management

    Command group for viewing and modifying the configuration file.
    """
    pass


@config.command()
@handle_error
def show():
    """
    Show current configuration
    """
    settings = get_settings()

    click.echo("Current Configuration:\n")

    for index, (section, values) in enumerate(settings.to_dict().items()):
        if index:
            click.echo("")
        click.echo(f"{section}:")
        for key, value in values.items():
            click.echo(f"   {key}: {value}")


@config.command(name='set')
@click.option('--strict-version', type=click.BOOL, help='Reject tags that are not ID3v2.3.0')
@click.option('--frame-size-mode', type=click.Choice(FRAME_SIZE_MODES), help='Frame size decoding')
@click.option('--encoding-policy', type=click.Choice(ENCODING_POLICIES), help='Encoding selector policy')
@click.option('--legacy-encoding', help='Codec for text marked as ISO-8859-1')
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS), help='Report format')
@click.option('--path', type=click.Path(), help='Write to this file instead of the user config')
@handle_error
def set_config(strict_version, frame_size_mode, encoding_policy, legacy_encoding, output_format, path):
    """
    Update configuration settings and save them

    Changes persist across runs in ~/.mp3inspect/config.yaml (or --path).
    """
    settings = get_settings()
    changes = []

    if strict_version is not None:
        settings.id3.strict_version = strict_version
        changes.append(f"Strict version: {strict_version}")

    if frame_size_mode:
        settings.id3.frame_size_mode = frame_size_mode
        changes.append(f"Frame size mode: {frame_size_mode}")

    if encoding_policy:
        settings.id3.encoding_policy = encoding_policy
        changes.append(f"Encoding policy: {encoding_policy}")

    if legacy_encoding:
        is_valid, error_msg = validate_encoding_name(legacy_encoding)
        if not is_valid:
            raise ConfigError(error_msg)
        settings.id3.legacy_encoding = legacy_encoding
        changes.append(f"Legacy encoding: {legacy_encoding}")

    if output_format:
        settings.output.format = output_format
        changes.append(f"Output format: {output_format}")

    if changes:
        target = settings.save_config(path)
        reset_inspector()
        click.echo(f"Configuration updated ({target}):")
        for change in changes:
            click.echo(f"   • {change}")
    else:
        click.echo("No changes specified")


@cli.command()
@handle_error
def doctor():
    """
    Run configuration diagnostics
    """
    click.echo("Running diagnostics...\n")

    issues = []
    settings = get_settings()

    errors = settings.get_errors()
    if errors:
        click.echo("Configuration: invalid")
        issues.extend(errors)
    else:
        click.echo("Configuration: OK")

    is_valid, error_msg = validate_encoding_name(settings.id3.legacy_encoding)
    if is_valid:
        click.echo(f"Legacy encoding: {settings.id3.legacy_encoding}")
    else:
        click.echo(f"Legacy encoding: {error_msg}")

    try:
        import mutagen
        click.echo(f"mutagen: {mutagen.version_string}")
    except ImportError:
        click.echo("mutagen: Not installed")
        issues.append("mutagen is required for ID3 size decoding")

    current_log = get_current_log_file()
    if current_log:
        click.echo(f"Logging: {current_log}")
    else:
        click.echo("Logging: Console only")

    if issues:
        click.echo(f"\nFound {len(issues)} issues:")
        for issue in issues:
            click.echo(f"   • {issue}")
        sys.exit(1)
    else:
        click.echo("\nAll checks passed!")


# Entry point for module execution
if __name__ == '__main__':
    cli()
