#! /usr/bin/env python3
# -*- coding: utf-8 -*-
"""Command line entry point: manage sample corpora and judge programs."""
import argparse
import logging
import sys
from pathlib import Path

from . import config
from . import fetch
from . import judge
from . import logger
from . import samples
from .errors import OIHelperError
from .version import add_version_arg

log = logging.getLogger('oihelper')


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Judge C++ solutions locally against sample test cases.')
    add_version_arg(parser)
    parser.add_argument('-l', '--log_level', default='info',
                        choices=['debug', 'info', 'warning', 'error', 'critical'],
                        help='set log level')
    parser.add_argument('--no-color', dest='color', action='store_false',
                        help='do not color wrong-answer diffs')
    parser.add_argument('-w', '--workspace', default='.',
                        help='workspace directory (default: current directory)')
    sub = parser.add_subparsers(dest='command', required=True)

    samples_parser = sub.add_parser('samples', help='manage sample corpora')
    samples_sub = samples_parser.add_subparsers(dest='samples_command', required=True)

    init = samples_sub.add_parser('init', help='create an empty sample corpus')
    init.add_argument('name')

    create = samples_sub.add_parser('create', help='append an empty sample to a corpus')
    create.add_argument('name')
    create.add_argument('-t', '--timeout', type=int, default=1000, help='time limit in ms (default: %(default)s)')
    create.add_argument('-m', '--memory-limit', type=int, default=256,
                        help='memory limit in MB, stored but not enforced (default: %(default)s)')
    create.add_argument('-p', '--points', type=int, default=10, help='points for the sample (default: %(default)s)')

    fetch_cmd = samples_sub.add_parser('fetch', help='import the samples of a remote problem')
    fetch_cmd.add_argument('name')
    fetch_cmd.add_argument('problem_id')

    test = sub.add_parser('test', help='compile a program and judge it against a sample corpus')
    test.add_argument('target', help='source file name, extension optional')
    test.add_argument('samples', help='name of the sample corpus')

    return parser


def run_samples(args: argparse.Namespace, conf: dict) -> None:
    if args.samples_command == 'init':
        corpus = samples.init_corpus(args.name, args.workspace)
        print(f'Created sample corpus {corpus.path}')
    elif args.samples_command == 'create':
        corpus = samples.open_corpus(args.name, args.workspace)
        index = corpus.append(args.points, args.timeout, args.memory_limit)
        print(f'Created sample #{index}: fill in {corpus.artifact_path(f"{index}.in")} '
              f'and {corpus.artifact_path(f"{index}.out")}')
    elif args.samples_command == 'fetch':
        corpus = samples.init_corpus(args.name, args.workspace, exist_ok=True)
        fetch.fetch_and_store(args.problem_id, corpus, conf.get('fetch'))


def run_test(args: argparse.Namespace, conf: dict) -> None:
    compiler = config.get_compiler_config(conf)
    scratch = (conf.get('judge') or {}).get('scratch_file', judge.DEFAULT_SCRATCH_FILE)
    corpus = samples.open_corpus(args.samples, args.workspace)
    judge.Judge(compiler, work_dir=args.workspace, scratch_file=scratch,
                color=args.color).test(args.target, corpus)


def main(argv: list[str] | None = None) -> None:
    args = argparser().parse_args(argv)

    logger.initialize_logging(args.log_level)

    try:
        conf = config.load_config(config.CONFIG_FILE, [Path(args.workspace)])
        if args.command == 'samples':
            run_samples(args, conf)
        else:
            run_test(args, conf)
    except OIHelperError as exc:
        log.error('%s', exc)
        sys.exit(1)
    except KeyboardInterrupt:
        print('\naborting...')
        sys.exit(1)


if __name__ == '__main__':
    main()
