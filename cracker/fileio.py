import sys

import yaml
import pandas as pd
from pathlib import Path

class FileIO:
    # relative paths are taken from the directory the cracker is launched in
    ROOT = None

    @staticmethod
    def resolve(path: str | Path) -> Path:
        '''
        prepend ROOT (default: cwd) to the given relative path
        '''
        p = Path(path).expanduser()
        if p.is_absolute():
            return p
        root = Path(FileIO.ROOT) if FileIO.ROOT is not None else Path.cwd()
        return root / p

    # yaml
    @staticmethod
    def load_yaml(path: str | Path) -> dict | list | None:
        p = FileIO.resolve(path)

        with p.open('r', encoding = 'utf-8') as f:
            data = yaml.safe_load(f)

        return data

    # text
    @staticmethod
    def load_txt(path: str | Path) -> list[str]:
        '''
        lines of a text file with only the trailing '\\n' removed

        decoding is strict: invalid UTF-8 raises UnicodeDecodeError, whose
        `object` is the whole file and `start` the offending byte offset
        '''
        p = FileIO.resolve(path)

        # '\r' is kept so stray carriage returns can be rejected
        text = p.read_bytes().decode('utf-8')
        lines = text.split('\n')
        if lines[-1] == '':
            lines.pop()

        return lines

    # tsv
    @staticmethod
    def save_tsv(rows: list[dict], path: str | Path, columns: list[str], quiet: bool = False) -> None:
        '''
        Write a list of row mappings as a tab-separated table.

        Parameters:
        -----------
        rows : list[dict]
            One mapping per row, keyed by column name.

        path : str | Path
            Output file. Parent directories are created.

        columns : list[str]
            Column order; also used for the header when `rows` is empty.

        quiet : bool, default False
            Skip the "saved" notice (written to stderr otherwise).
        '''
        p = FileIO.resolve(path)
        p.parent.mkdir(parents = True, exist_ok = True)

        df = pd.DataFrame(rows, columns = columns)
        df.to_csv(p, sep = '\t', index = False)
        if not quiet:
            print(f'saved {len(df)} rows to {p}', file = sys.stderr)

    @staticmethod
    def load_tsv(path: str | Path) -> list[dict]:
        p = FileIO.resolve(path)
        df = pd.read_csv(p, sep = '\t', dtype = str, keep_default_na = False)
        return df.to_dict(orient = 'records')
