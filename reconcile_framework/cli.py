"""
Command-line interface for the reconciliation framework.

Provides commands for:
- Reconciling a delimited file against a schema (optionally delivering it)
- Profiling the columns of a file
- Writing the schema the pipeline would infer for a file
"""

import click
import sys
import time
import yaml
from pathlib import Path

from reconcile_framework import __version__
from reconcile_framework.core.config import PipelineConfig, load_schema
from reconcile_framework.core.constants import EXIT_FATAL, EXIT_SUCCESS, EXIT_UNRESOLVED_ERRORS
from reconcile_framework.core.engine import ReconciliationEngine
from reconcile_framework.core.exceptions import ReconcileException
from reconcile_framework.core.logging_config import setup_logging, get_logger
from reconcile_framework.core.observers import CLIProgressObserver
from reconcile_framework.core.pretty_output import PrettyOutput as po
from reconcile_framework.loaders.csv_loader import load_csv
from reconcile_framework.profiler.schema_inferencer import generate_schema_doc
from reconcile_framework.sinks.delivery import deliver
from reconcile_framework.sinks.factory import SinkFactory

logger = get_logger(__name__)

LOG_LEVELS = click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False)

# Maximum diagnostics listed in the terminal summary
MAX_LISTED_ERRORS = 20

# Sink option that receives --target, per provider
TARGET_OPTION = {
    'jsonl': 'path',
    'sqlite': 'database',
}


def _decode_delimiter(delimiter):
    if delimiter is None:
        return None
    return delimiter.encode().decode('unicode_escape')


def _build_sink_config(config, file_path, sink, target, collection):
    """Sink mapping from the job config, overridden by command-line options."""
    sink_config = dict(config.sink) if config.sink else {}
    if sink:
        if sink_config.get('provider') != sink:
            sink_config = {}
        sink_config['provider'] = sink
    if target:
        if not sink_config.get('provider'):
            raise click.UsageError("--target requires --sink")
        option = TARGET_OPTION.get(sink_config['provider'])
        if option is None:
            raise click.UsageError(f"--target is not used by the {sink_config.get('provider')} sink")
        sink_config[option] = target
    if collection:
        sink_config['collection'] = collection
    if sink_config and not sink_config.get('collection'):
        sink_config['collection'] = Path(file_path).stem
    return sink_config or None


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    Reconcile - map, validate and clean tabular data before import.

    Profiles a delimited file, maps its headers onto a target schema,
    validates every record, applies safe fixes and reports what is left
    for a human to review.
    """
    pass


@cli.command()
@click.argument('file_path', type=click.Path(exists=True))
@click.option('--schema', '-s', 'schema_path', type=click.Path(exists=True), help='Target schema YAML')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='Job configuration YAML')
@click.option('--output', '-o', help='Path for the JSON result')
@click.option('--delimiter', '-d', default=None, help='Column delimiter (default: sniffed). Use "\\t" for tab.')
@click.option('--sample-size', type=click.IntRange(min=1), default=None, help='Rows sampled for profiling')
@click.option('--no-fix', is_flag=True, help='Report diagnostics without applying fixes')
@click.option('--dedupe', is_flag=True, help='Remove exact duplicate records after fixing')
@click.option('--sink', type=click.Choice(SinkFactory.supported_providers()), help='Deliver records to this sink')
@click.option('--target', help='Sink target: file for jsonl, database for sqlite')
@click.option('--collection', help='Sink collection/table name (default: file name)')
@click.option('--drop-invalid', is_flag=True, help='Deliver only records without unresolved errors')
@click.option('--verbose/--quiet', '-v/-q', default=True, help='Verbose output')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
@click.option('--log-file', type=click.Path(), help='Optional log file path')
def run(file_path, schema_path, config_path, output, delimiter, sample_size, no_fix, dedupe,
        sink, target, collection, drop_invalid, verbose, log_level, log_file):
    """
    Reconcile a delimited file.

    FILE_PATH: CSV, TSV or TXT file with a header row

    Exits 0 when every record is import-ready, 1 when unresolved errors
    remain (or a sink rejected records), 2 on a fatal error.

    Examples:

    \b
    # Infer a schema and report
    reconcile run customers.csv

    \b
    # Reconcile against a schema and write the result
    reconcile run customers.csv -s schema.yaml -o result.json

    \b
    # Deliver clean records to SQLite
    reconcile run customers.csv -s schema.yaml --sink sqlite --target out.db --drop-invalid
    """
    setup_logging(level=log_level, log_file=log_file)
    logger.info(f"Starting reconciliation: {file_path}")

    try:
        config = PipelineConfig.from_yaml(config_path) if config_path else PipelineConfig()
        if sample_size:
            config.sample_size = sample_size
        if no_fix:
            config.auto_fix = False

        schema = load_schema(schema_path) if schema_path else None
        sink_config = _build_sink_config(config, file_path, sink, target, collection)

        table = load_csv(file_path, delimiter=_decode_delimiter(delimiter))
        engine = ReconciliationEngine(config, observers=[CLIProgressObserver(verbose=verbose)])

        start_time = time.time()
        result = engine.run(table, schema=schema, dedupe=dedupe)
        duration = time.time() - start_time

        if verbose:
            _print_mapping(result)
            _print_errors(result)

        if output:
            Path(output).parent.mkdir(parents=True, exist_ok=True)
            Path(output).write_text(result.to_json(), encoding='utf-8')
            po.output_file("JSON result", output)

        exit_code = EXIT_UNRESOLVED_ERRORS if result.has_errors else EXIT_SUCCESS

        if sink_config:
            records = result.import_ready() if drop_invalid else result.cleaned_data
            sink_instance = SinkFactory.create(sink_config.get('provider'))
            po.section(f"Delivering {len(records)} records to {sink_instance.provider}:{sink_config.get('collection')}")
            delivery = deliver(
                records,
                sink_instance,
                sink_config,
                batch_size=config.batch_size,
                on_progress=lambda delivered, total: po.progress(delivered, total) if verbose else None,
            )
            if delivery.failure:
                po.error(f"{delivery.failure} records failed in {len(delivery.errors)} batches")
                for error in delivery.errors:
                    po.item(f"Batch {error['batch']}: {error['error']}", indent=2)
                exit_code = EXIT_UNRESOLVED_ERRORS
            else:
                po.success(f"Delivered {delivery.success} records")

        unresolved = sum(1 for d in result.errors if d.is_error)
        po.run_result(errors=unresolved, warnings=len(result.warnings), duration=duration)
        sys.exit(exit_code)

    except ReconcileException as e:
        logger.debug("Fatal reconciliation error", exc_info=True)
        po.blank_line()
        po.error(f"{e.__class__.__name__}: {e.message}")
        for problem in e.details.get('problems', []):
            po.item(problem, indent=2)
        sys.exit(EXIT_FATAL)

    except click.ClickException:
        raise

    except Exception as e:
        po.blank_line()
        po.error(f"Unexpected error: {str(e)}")
        if verbose:
            import traceback
            po.blank_line()
            traceback.print_exc()
        sys.exit(EXIT_FATAL)


def _print_mapping(result):
    po.section("Header mapping")
    rows = [
        (header, field_name, po.confidence_indicator(result.confidence.get(header, 0.0)))
        for header, field_name in result.mapping.items()
    ]
    if rows:
        po.compact_table(["Header", "Field", "Confidence"], rows)
    else:
        po.warning("No headers were mapped", indent=2)
    for suggestion in result.suggestions:
        po.info(suggestion, indent=2)


def _print_errors(result):
    if not result.errors:
        return
    po.section(f"Unresolved diagnostics ({len(result.errors)})")
    for diagnostic in result.errors[:MAX_LISTED_ERRORS]:
        line = f"Row {diagnostic.row}, {diagnostic.field}: {diagnostic.message}"
        if diagnostic.original_value is not None:
            line += f" ({diagnostic.original_value!r})"
        if diagnostic.is_error:
            po.error(line, indent=2)
        else:
            po.warning(line, indent=2)
    remaining = len(result.errors) - MAX_LISTED_ERRORS
    if remaining > 0:
        po.item(f"... and {remaining} more", indent=2)


@cli.command()
@click.argument('file_path', type=click.Path(exists=True))
@click.option('--delimiter', '-d', default=None, help='Column delimiter (default: sniffed). Use "\\t" for tab.')
@click.option('--sample-size', type=click.IntRange(min=1), default=None, help='Rows sampled for profiling')
@click.option('--json-output', '-j', help='Path for JSON profile output')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
def profile(file_path, delimiter, sample_size, json_output, log_level):
    """
    Profile the columns of a delimited file.

    FILE_PATH: CSV, TSV or TXT file with a header row
    """
    setup_logging(level=log_level)

    try:
        config = PipelineConfig()
        if sample_size:
            config.sample_size = sample_size
        table = load_csv(file_path, delimiter=_decode_delimiter(delimiter))
        analysis, quality = ReconciliationEngine(config).profile(table)
    except ReconcileException as e:
        po.error(f"{e.__class__.__name__}: {e.message}")
        sys.exit(EXIT_FATAL)

    po.header(f"PROFILE: {Path(file_path).name}")
    po.key_value("Rows", table.row_count, indent=2)
    po.key_value("Sampled", analysis.row_count, indent=2)
    po.key_value("Columns", table.column_count, indent=2)
    po.key_value("Completeness", f"{quality.completeness:.1f}%", indent=2)

    po.section("Columns")
    po.compact_table(
        ["Column", "Type", "Nulls", "Unique", "Samples"],
        [
            (
                p.header,
                p.detected_type,
                p.null_count,
                p.unique_count,
                ", ".join(str(v) for v in p.sample_values[:3]),
            )
            for p in analysis.profiles
        ],
    )

    if analysis.recommendations or quality.issues:
        po.section("Recommendations")
        for recommendation in analysis.recommendations:
            po.info(recommendation, indent=2)
        for issue in quality.issues:
            po.warning(issue, indent=2)

    if json_output:
        from reconcile_framework.utils.json_utils import safe_json_dumps
        payload = {"analysis": analysis.to_dict(), "quality": quality.to_dict()}
        Path(json_output).write_text(safe_json_dumps(payload), encoding='utf-8')
        po.output_file("JSON profile", json_output)

    sys.exit(EXIT_SUCCESS)


@cli.command('infer-schema')
@click.argument('file_path', type=click.Path(exists=True))
@click.option('--output', '-o', help='Path for the schema YAML (default: print)')
@click.option('--delimiter', '-d', default=None, help='Column delimiter (default: sniffed). Use "\\t" for tab.')
@click.option('--sample-size', type=click.IntRange(min=1), default=None, help='Rows sampled for profiling')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
def infer_schema(file_path, output, delimiter, sample_size, log_level):
    """
    Write the schema the pipeline would infer for a file.

    The YAML can be edited and passed back with `reconcile run --schema`.
    """
    setup_logging(level=log_level)

    try:
        config = PipelineConfig()
        if sample_size:
            config.sample_size = sample_size
        table = load_csv(file_path, delimiter=_decode_delimiter(delimiter))
        schema = ReconciliationEngine(config).infer_schema(table)
    except ReconcileException as e:
        po.error(f"{e.__class__.__name__}: {e.message}")
        sys.exit(EXIT_FATAL)

    document = yaml.safe_dump({"schema": schema.to_dict()}, sort_keys=False, default_flow_style=False)
    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        Path(output).write_text(document, encoding='utf-8')
        click.echo(generate_schema_doc(schema))
        po.output_file("Schema", output)
    else:
        click.echo(document)
    sys.exit(EXIT_SUCCESS)


@cli.command()
def version():
    """Display version information."""
    click.echo(f"Reconcile v{__version__}")
    click.echo("Tabular data reconciliation: map, validate and clean before import")


if __name__ == '__main__':
    cli()
