"""fsfixture CLI: populate and check fixture trees from the shell."""

from __future__ import annotations

import click

from ._glob import GlobFilter, parse_pattern
from .assertions import check as check_path
from .copy import SymlinkPolicy, replicate, select_files
from .exceptions import EncodingError, FixtureError, PatternError
from . import predicates

_STATE_PREDICATES = {
    "exists": predicates.exists,
    "missing": predicates.missing,
    "file": predicates.is_file,
    "dir": predicates.is_dir,
    "symlink": predicates.is_symlink,
    "empty": predicates.is_empty,
}


def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, verbose):
    """fsfixture: build and check filesystem test fixtures.

    \b
    Quick start:
      fsfixture copy src/ /tmp/fixture -p '*.py' -p '!tests/**'
      fsfixture check /tmp/fixture/setup.py --file
      fsfixture check /tmp/fixture/VERSION --text '1.0\\n'
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command("copy")
@click.argument("source", type=click.Path(exists=True, file_okay=False))
@click.argument("dest", type=click.Path(file_okay=False))
@click.option("-p", "--pattern", "patterns", multiple=True,
              help="Glob selecting files; prefix with '!' to exclude. "
                   "Later patterns win (repeatable).")
@click.option("--gitignore", is_flag=True, default=False,
              help="Honor .gitignore files found in SOURCE.")
@click.option("--symlinks", type=click.Choice([p.value for p in SymlinkPolicy]),
              default=SymlinkPolicy.SKIP.value, show_default=True,
              help="How to treat symlinks met in SOURCE.")
@click.option("-n", "--dry-run", is_flag=True, default=False,
              help="List the files that would be copied.")
@click.pass_context
def copy_cmd(ctx, source, dest, patterns, gitignore, symlinks, dry_run):
    """Copy the files of SOURCE selected by the patterns into DEST.

    Without patterns every regular file is copied.  Existing files in
    DEST are never removed.

    \b
    Examples:
        fsfixture copy data/ out/ -p '*.json'
        fsfixture copy data/ out/ -p '!*.tmp' -p '!build/**'
        fsfixture copy data/ out/ -p '!**' -p 'keep/**' --dry-run
    """
    specs = [parse_pattern(p) for p in patterns]
    policy = SymlinkPolicy(symlinks)
    try:
        if dry_run:
            for rel in select_files(source, specs, symlinks=policy, gitignore=gitignore):
                click.echo(rel)
            return
        flt = GlobFilter.compile(specs)
        _status(ctx, f"Filter: {flt!r}")
        count = replicate(source, dest, flt, symlinks=policy, gitignore=gitignore)
    except (PatternError, FixtureError) as exc:
        raise click.ClickException(str(exc))
    _status(ctx, f"Copied {source} -> {dest}")
    click.echo(f"{count} file(s) copied")


@main.command("check")
@click.argument("path", type=click.Path())
@click.option("--exists", "state", flag_value="exists", help="PATH exists (default).")
@click.option("--missing", "state", flag_value="missing", help="PATH does not exist.")
@click.option("--file", "state", flag_value="file", help="PATH is a regular file.")
@click.option("--dir", "state", flag_value="dir", help="PATH is a directory.")
@click.option("--symlink", "state", flag_value="symlink", help="PATH is a symlink.")
@click.option("--empty", "state", flag_value="empty", help="PATH is an empty file.")
@click.option("--text", default=None, help="PATH contains exactly TEXT (UTF-8).")
@click.option("--text-from", type=click.Path(exists=True, dir_okay=False),
              help="PATH has the same text as this file.")
@click.option("--bytes-from", type=click.Path(exists=True, dir_okay=False),
              help="PATH has the same bytes as this file.")
@click.pass_context
def check_cmd(ctx, path, state, text, text_from, bytes_from):
    """Check the state of PATH.

    \b
    Exit codes:
        0  every check passed
        1  a check failed (diagnostic on stderr)
    """
    checks = []
    if state:
        checks.append(_STATE_PREDICATES[state]())
    if text is not None:
        checks.append(text)
    try:
        if text_from is not None:
            with open(text_from, "rb") as f:
                raw = f.read()
            try:
                checks.append(raw.decode("utf-8"))
            except UnicodeDecodeError as exc:
                raise EncodingError(text_from, "utf-8", str(exc)) from exc
        if bytes_from is not None:
            with open(bytes_from, "rb") as f:
                checks.append(f.read())
        if not checks:
            checks.append(predicates.exists())
        for pred in checks:
            outcome = check_path(path, pred)
            if not outcome:
                click.echo(outcome.render(), err=True)
                ctx.exit(1)
            _status(ctx, f"ok: {path}")
    except (FixtureError, EncodingError, OSError) as exc:
        raise click.ClickException(str(exc))
