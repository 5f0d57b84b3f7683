#!/usr/bin/env python3

import logging
import sys
import click
from contentstore import ContentStore
from contentstore import ContentStoreError
from contentstore import is_valid


def open_or_fail(root):
    store = ContentStore.open(root)
    if store is None:
        raise click.ClickException('no content store at: {0}'.format(root))
    return store


@click.group()
@click.argument("root", type=click.Path(file_okay=False, resolve_path=True), nargs=1)
@click.option('--verbose', is_flag=True)
@click.pass_context
def cli(ctx, root, verbose):
    ctx.obj = root
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)


@cli.command()
@click.pass_obj
def init(obj):
    store = ContentStore.create(obj)
    if store is None:
        raise click.ClickException('could not create content store at: {0}'.format(obj))
    click.echo(store.root)


@cli.command()
@click.pass_obj
def valid(obj):
    try:
        is_valid(obj)
    except ContentStoreError as e:
        raise click.ClickException(str(e))
    click.echo("valid: " + obj)


@cli.command()
@click.argument("infiles", type=click.File(mode='rb'), nargs=-1)
@click.pass_obj
def put(obj, infiles):
    store = open_or_fail(obj)
    for infile in infiles:
        digest = store.store_stream(infile)
        if digest is None:
            raise click.ClickException('cannot hash with {0}'.format(store.algorithm.value))
        click.echo("{0} {1}".format(digest, infile.name))


@cli.command()
@click.argument("digest", type=str, nargs=1)
@click.pass_obj
def get(obj, digest):
    store = open_or_fail(obj)
    chunks = store.fetch_stream(digest)
    if chunks is None:
        raise click.ClickException('object not found: {0}'.format(digest))
    out = click.get_binary_stream('stdout')
    for chunk in chunks:
        out.write(chunk)
    out.flush()


@cli.command()
@click.pass_obj
def iterate(obj):
    store = open_or_fail(obj)
    for hexdigest in store.digests():
        click.echo(hexdigest)


@cli.command()
@click.pass_obj
def check(obj):
    store = open_or_fail(obj)
    found = False
    for path, actual in store.corrupted():
        found = True
        click.echo("corrupt object: {0} (content hashes to {1})".format(path, actual))
    if found:
        sys.exit(1)


if __name__ == '__main__':
    cli()
