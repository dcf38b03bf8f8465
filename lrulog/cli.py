#!/usr/bin/env python
"""
Command line front end for lrulog caches.

    lrulog put PATH             remember a file or directory
    lrulog get -n 10            most recently used directories
    lrulog get --kind file      most recently used files
    lrulog put --raw --cache notes "some text"
    lrulog stats --cache dirs
"""
import sys
import argparse
import logging
from typing import Optional, List

from rich.console import Console
from rich.table import Table
from rich.markup import escape

from lrulog import __version__
from lrulog.api.cache_config import CacheConfig
from lrulog.api.errors import LruLogError, CorruptLog
from lrulog.api.types import PathKind
from lrulog.cache.entry_cache import EntryCache
from lrulog.log_control import LogController
from lrulog.records.paths import PathRecorder, cache_for, display, from_record, home_dir, is_path_cache

logger = logging.getLogger('lrulog.cli')

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CORRUPT = 2

KIND_CHOICES = {'file': PathKind.file, 'dir': PathKind.dir, 'other': PathKind.other}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='lrulog', description='Persistent most-recently-used entry caches')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--data-dir', '-d',
                        help='Directory holding the cache log files, defaults to $LRULOG_DATA_DIR'
                        ' or the local data directory')
    parser.add_argument('--log-level', '-L', default=None,
                        choices=['debug', 'info', 'warning', 'error', 'critical'],
                        help='Logging level for diagnostic output on stderr')
    parser.add_argument('--no-lock', action='store_true',
                        help='Do not take the advisory file lock while appending')
    parser.add_argument('--sync', action='store_true', default=None,
                        help='fsync the log after each append')

    sub = parser.add_subparsers(dest='command', required=True)

    put = sub.add_parser('put', help='Record a path (or a raw string with --raw) as most recent')
    put.add_argument('entry', help='Path to record, or the literal entry with --raw')
    put.add_argument('--cache', '-c', help='Cache name, default is chosen by the kind of path')
    put.add_argument('--raw', action='store_true',
                     help='Store the argument verbatim instead of treating it as a path, needs --cache')

    get = sub.add_parser('get', help='Print distinct entries, most recent first')
    which = get.add_mutually_exclusive_group()
    which.add_argument('--cache', '-c', help='Cache name')
    which.add_argument('--kind', '-k', choices=list(KIND_CHOICES), default='dir',
                       help='Kind of path cache to read, default dir')
    get.add_argument('--limit', '-n', type=int, default=None, help='Maximum number of entries to print')
    get.add_argument('--absolute', '-a', action='store_true',
                     help='Print full paths instead of abbreviating the home directory as ~')
    get.add_argument('--strict', action='store_true',
                     help=f'Exit with status {EXIT_CORRUPT} if the log is damaged')

    clear = sub.add_parser('clear', help='Empty a cache')
    clear.add_argument('--cache', '-c', default=cache_for(PathKind.dir), help='Cache name, default dirs')

    stats = sub.add_parser('stats', help='Show size and entry counts for a cache')
    stats.add_argument('--cache', '-c', default=cache_for(PathKind.dir), help='Cache name, default dirs')

    sub.add_parser('caches', help='List caches that have a log file')
    return parser


def setup_logging(level: Optional[str]) -> LogController:
    controller = LogController.controller
    if controller is None:
        controller = LogController(default_level='warning')
    if level:
        controller.set_default_level(level)
    return controller


def do_put(cache: EntryCache, args, console: Console) -> int:
    if args.raw:
        if not args.cache:
            console.print("[red]--raw needs --cache[/red]")
            return EXIT_ERROR
        cache.put(args.cache, args.entry.encode('utf-8', 'surrogateescape'))
        return EXIT_OK
    if PathRecorder(cache).record_path(args.entry, cache_name=args.cache) is None:
        console.print(f"[red]cannot record {escape(repr(args.entry))}, path does not exist[/red]",
                      highlight=False)
        return EXIT_ERROR
    return EXIT_OK


def do_get(cache: EntryCache, args, console: Console) -> int:
    cache_name = args.cache or cache_for(KIND_CHOICES[args.kind])
    result = cache.get(cache_name, args.limit)
    # only path caches get the ~ abbreviation, other records print as stored
    home = None if args.absolute or not is_path_cache(cache_name) else home_dir()
    for record in result:
        if home is None:
            line = from_record(record)
        else:
            line = display(record, home)
        # undecodable path bytes are shown with replacement characters
        print(line.encode("utf-8", "surrogateescape").decode("utf-8", "replace"))
    if not result.clean:
        console.print(f"[yellow]warning:[/yellow] {escape(str(result.corruption))}", highlight=False)
        if args.strict:
            return EXIT_CORRUPT
    return EXIT_OK


def do_clear(cache: EntryCache, args, console: Console) -> int:
    cache.clear(args.cache)
    return EXIT_OK


def do_stats(cache: EntryCache, args, console: Console) -> int:
    stats = cache.get_stats(args.cache)
    table = Table(title=f"cache {args.cache}")
    table.add_column("field")
    table.add_column("value", justify="right")
    table.add_row("path", str(stats.path))
    table.add_row("size bytes", str(stats.size_bytes))
    table.add_row("entries", str(stats.entry_count))
    table.add_row("distinct", str(stats.distinct_count))
    table.add_row("duplicates", str(stats.duplicate_count))
    table.add_row("clean", "yes" if stats.clean else f"no, damaged at offset {stats.corrupt_offset}")
    Console().print(table)
    return EXIT_OK


def do_caches(cache: EntryCache, args, console: Console) -> int:
    for name in cache.list_caches():
        print(name)
    return EXIT_OK


COMMANDS = {
    'put': do_put,
    'get': do_get,
    'clear': do_clear,
    'stats': do_stats,
    'caches': do_caches,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    console = Console(stderr=True, soft_wrap=True)
    try:
        config = CacheConfig.from_env(data_dir=args.data_dir,
                                      lock_writes=False if args.no_lock else None,
                                      sync_writes=args.sync)
        cache = EntryCache(config)
        return COMMANDS[args.command](cache, args, console)
    except CorruptLog as e:
        console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
        return EXIT_CORRUPT
    except (LruLogError, ValueError) as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
