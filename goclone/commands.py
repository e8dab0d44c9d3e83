import click

from . import __version__, msg
from .config import load_config
from .errors import ConfigError, GoCloneError
from .git_url import GitURLParser
from .git_utils import GitCloner, StderrProgress
from .logging_utils import setup_logging
from .processor import MAX_TIMEOUT, process_url


def clone_all(urls, parser, cloner, config):
    """Process each URL in turn and return the number that failed."""
    failures = 0
    for url in urls:
        progress = StderrProgress() if config.progress else None
        try:
            process_url(
                url,
                parser,
                cloner,
                timeout=config.timeout,
                depth=config.depth,
                progress=progress,
            )
        except GoCloneError:
            failures += 1
    return failures


def exit_status(failures):
    """0 when nothing failed, 1 otherwise."""
    return 1 if failures else 0


@click.command(name="git-goclone")
@click.argument("urls", metavar="URL...", nargs=-1)
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True, max=MAX_TIMEOUT), default=None,
              help="Seconds to wait for each clone (default 300).")
@click.option("--depth", type=click.IntRange(min=0), default=None,
              help="History depth to fetch; 0 clones everything (default 1).")
@click.option("--progress/--no-progress", default=None, help="Show clone progress on stderr.")
@click.option("--color/--no-color", default=None, help="Colorize log output.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="YAML settings file (default .goclone.yml).")
@click.version_option(__version__, prog_name="git-goclone")
@click.pass_context
def cli(ctx, urls, timeout, depth, progress, color, config_path):
    """Clone Git repositories into directories named after their URL path.

    https://github.com/mojotx/git-goclone.git is cloned into
    ./mojotx/git-goclone. Existing directories are never overwritten.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.UsageError(str(e))
    config = config.merge(timeout=timeout, depth=depth, progress=progress, color=color)

    setup_logging(color=config.color)

    if not urls:
        msg.warn("No repository URLs given.", color=config.color)
        return

    failures = clone_all(urls, GitURLParser(), GitCloner(), config)
    cloned = len(urls) - failures
    summary = f"Cloned {cloned} of {len(urls)} repositories."
    if failures:
        msg.err(summary, color=config.color)
    else:
        msg.info(summary, color=config.color)
    ctx.exit(exit_status(failures))
