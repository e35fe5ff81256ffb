"""chdig command line application."""

import datetime
import logging
import typing

import typer
from rich import console, markup
from rich import logging as rich_logging

import chdig
from chdig import errors, options, settings

app = typer.Typer(add_completion=False)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(message)s',
        handlers=[rich_logging.RichHandler(rich_tracebacks=True)],
    )


def _version_callback(value: bool) -> None:
    """Print the version and exit when --version is given."""
    if value:
        typer.echo(f'chdig {chdig.__version__}')
        raise typer.Exit()


@app.command()
def run(
    ctx: typer.Context,
    url: typing.Annotated[
        str,
        typer.Option(
            '--url',
            '-u',
            envvar='CHDIG_URL',
            metavar='URL',
            help='ClickHouse URL',
        ),
    ] = settings.DEFAULT_URL,
    cluster: typing.Annotated[
        str | None,
        typer.Option('--cluster', '-c', help='Cluster to monitor'),
    ] = None,
    delay_interval: typing.Annotated[
        int,
        typer.Option(
            '--delay-interval',
            '-d',
            min=0,
            max=settings.MAX_DELAY_INTERVAL_MS,
            metavar='MS',
            help='Refresh interval in milliseconds',
        ),
    ] = 3000,
    group_by: typing.Annotated[
        bool,
        typer.Option(
            '--group-by',
            '-g',
            help='Group distributed queries (on by default with --cluster)',
        ),
    ] = False,
    no_group_by: typing.Annotated[
        bool, typer.Option('--no-group-by', '-G')
    ] = False,
    no_subqueries: typing.Annotated[
        bool,
        typer.Option(
            '--no-subqueries',
            help='Do not accumulate metrics for subqueries',
        ),
    ] = False,
    mouse: typing.Annotated[
        bool,
        typer.Option(
            '--mouse', '-m', flag_value=True, help='Mouse support (default)'
        ),
    ] = True,
    no_mouse: typing.Annotated[bool, typer.Option('--no-mouse', '-M')] = False,
    verbose: typing.Annotated[
        bool,
        typer.Option('--verbose', '-v', help='Enable verbose logging'),
    ] = False,
    version: typing.Annotated[
        bool,
        typer.Option(
            '--version',
            '-V',
            callback=_version_callback,
            is_eager=True,
            help='Show the version and exit',
        ),
    ] = False,
) -> None:
    """Resolve the chdig configuration and print it."""
    setup_logging(verbose)
    rich_console = console.Console()
    # typer may bundle its own click, compare the source by name
    source = ctx.get_parameter_source('group_by')
    group_by_given = source is not None and source.name == 'COMMANDLINE'
    raw = settings.RawOptions(
        url=url,
        cluster=cluster,
        delay_interval=datetime.timedelta(milliseconds=delay_interval),
        group_by=group_by if group_by_given else None,
        no_group_by=no_group_by,
        no_subqueries=no_subqueries,
        mouse=mouse,
        no_mouse=no_mouse,
    )
    try:
        config = options.resolve(raw)
    except errors.ConfigError as error:
        rich_console.print(f'[red]Error: {markup.escape(str(error))}[/red]')
        raise typer.Exit(code=1) from error
    _print_config(rich_console, config)


def _print_config(
    rich_console: console.Console, config: settings.ResolvedConfig
) -> None:
    """Print the resolved configuration, without the password."""
    delay_ms = config.delay_interval // datetime.timedelta(milliseconds=1)
    rows = (
        ('URL', config.url_safe),
        ('Cluster', config.cluster or '-'),
        ('Delay', f'{delay_ms}ms'),
        ('Group by', str(config.group_by)),
        ('Subqueries', str(not config.no_subqueries)),
        ('Mouse', str(config.mouse)),
    )
    for name, value in rows:
        rich_console.print(
            f'[bold]{name}:[/bold] {markup.escape(value)}', soft_wrap=True
        )


def main() -> None:
    """Main entry point."""
    app(prog_name='chdig')


if __name__ == '__main__':
    main()
