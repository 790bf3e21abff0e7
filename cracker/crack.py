'''
Dictionary attack against MD5-crypt shadow records.

    for each record, for each dictionary word:
        hash_password(word, record.salt) == record.hash  →  "username : word"

Usage:
    md5crack dictionary.txt shadow.txt [--config cfg.yaml] [--report found.tsv]
                                       [--workers N] [--skip-invalid] [--quiet]
'''

import argparse
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import NamedTuple

from tqdm import tqdm

from cracker.config import load_config, ConfigError
from cracker.dictionary import load_words, DictionaryError
from cracker.fileio import FileIO
from cracker.shadow import load_records, ShadowRecord, ShadowError
from md5crypt.block import CapacityExceeded
from md5crypt.password import hash_password

GR = '\033[32m'     # green
BU = '\033[34m'     # blue
RD = '\033[31m'     # red
YW = '\033[33m'     # yellow
X  = '\033[0m'      # reset


class Match(NamedTuple):
    username: str
    password: str


def check_record(record: ShadowRecord, words: list[str], /, *, on_error: str = 'abort') -> list[Match]:
    '''
    Try every dictionary word against a single record.

    Parameters:
    -----------
    record : ShadowRecord
        Target user with salt and expected hash.

    words : list[str]
        Candidate passwords.

    on_error : str
        'abort' re-raises CapacityExceeded; 'skip' reports the word and moves on.

    Returns:
    --------
    list[Match]
        Matching words for this record, in dictionary order.
    '''
    matches = []
    for word in words:
        try:
            hashed = hash_password(word, record.salt)
        except CapacityExceeded as e:
            if on_error == 'abort':
                raise
            tqdm.write(f'{YW}  [skipped]{X}: {record.username} / {word!r}: {e}', file = sys.stderr)
            continue

        if hashed == record.hash:
            matches.append(Match(record.username, word))

    return matches


def _check_task(args: tuple[ShadowRecord, list[str], str]) -> list[Match]:
    # one unit of work for the process pool
    record, words, on_error = args
    return check_record(record, words, on_error = on_error)


def crack(words: list[str], records: list[ShadowRecord], /, *, on_error: str = 'abort', workers: int = 1, progress: bool = True) -> list[Match]:
    '''
    Run the dictionary against every record.

    Records are independent, so with workers > 1 each one is checked in its own
    worker process. Results come back in record order either way.

    Parameters:
    -----------
    words : list[str]
        Candidate passwords.

    records : list[ShadowRecord]
        Parsed shadow file.

    on_error : str, default 'abort'
        Policy for words the engine cannot hash ('abort' or 'skip').

    workers : int, default 1
        Number of worker processes; 1 runs in-process.

    progress : bool, default True
        Show a tqdm progress bar over records.

    Returns:
    --------
    list[Match]
        Every (username, password) pair that matched.
    '''
    matches = []
    bar = tqdm(total = len(records), desc = '  Progress', unit = 'user', leave = False, disable = not progress)

    try:
        if workers > 1 and len(records) > 1:
            tasks = [(record, words, on_error) for record in records]
            with ProcessPoolExecutor(max_workers = workers) as executor:
                for found in executor.map(_check_task, tasks):
                    matches.extend(found)
                    bar.update(1)
        else:
            for record in records:
                matches.extend(check_record(record, words, on_error = on_error))
                bar.update(1)
    finally:
        bar.close()

    return matches


def report(matches: list[Match], /, *, file = None) -> None:
    '''print one "username : password" line per match'''
    out = file if file is not None else sys.stdout
    for m in matches:
        print(f'{m.username} : {m.password}', file = out)


def save_report(matches: list[Match], path: str | Path, quiet: bool = False) -> None:
    '''write matches as a TSV table with a username/password header'''
    FileIO.save_tsv([m._asdict() for m in matches], path, columns = list(Match._fields), quiet = quiet)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog = 'md5crack',
        description = 'Dictionary attack against $1$ (MD5-crypt) shadow entries.',
    )
    ap.add_argument('dictionary', help = 'newline-separated word list (or YAML list)')
    ap.add_argument('shadow', help = 'shadow-style file: username:$1$salt$hash:...')
    ap.add_argument('--config', default = None, help = 'YAML settings file')
    ap.add_argument('--report', default = None, help = 'write matches to this TSV file')
    ap.add_argument('--workers', type = int, default = None, help = 'worker processes (default 1)')
    ap.add_argument('--skip-invalid', action = 'store_true', help = 'skip words the engine cannot hash instead of aborting')
    ap.add_argument('--quiet', action = 'store_true', help = 'no progress bar or summary, matches only')
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        config = load_config(
            args.config,
            report = args.report,
            workers = args.workers,
            on_error = 'skip' if args.skip_invalid else None,
            progress = False if args.quiet else None,
        )

        if config['require_file_hints'] and ('dictionary' not in args.dictionary or 'shadow' not in args.shadow):
            ap.print_usage(sys.stderr)
            return 1

        verbose = config['progress']
        start = time.perf_counter_ns()

        words = load_words(args.dictionary, limit = config['dictionary_limit'], max_length = config['password_limit'])
        records = load_records(args.shadow, username_limit = config['username_limit'])

        if verbose:
            print(f'\n{BU} [SETUP]{X}')
            print(f'  [dictionary]: {args.dictionary} ({len(words)} words)')
            print(f'  [shadow]: {args.shadow} ({len(records)} users)')
            print(f'  [workers]: {config["workers"]}')
            print(f'  [on error]: {config["on_error"]}')

        matches = crack(words, records, on_error = config['on_error'], workers = config['workers'], progress = verbose)

        if verbose:
            print(f'\n{GR} [FOUND]{X}' if matches else f'\n{YW} [NO MATCHES]{X}')
        report(matches)

        if config['report'] is not None:
            save_report(matches, config['report'], quiet = not verbose)

    except (ConfigError, DictionaryError, ShadowError, CapacityExceeded) as e:
        print(f'{RD}[ERROR]{X}: {e}', file = sys.stderr)
        return 1
    except OSError as e:
        print(f'{RD}[ERROR]{X}: {e.filename or ""}: {e.strerror or e}', file = sys.stderr)
        return 1

    if verbose:
        elapsed = (time.perf_counter_ns() - start) / 1_000_000_000
        print(f'\n  [total time]: {elapsed:.4f} seconds')

    return 0


if __name__ == '__main__':
    sys.exit(main())
