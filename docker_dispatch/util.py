import os
import stat
import sys
import tempfile

import click


class Table(object):
    def __init__(self, col_sizes=(), spacing=2):
        self.col_sizes = list(col_sizes)
        self.spacing = spacing
        self.space_char = ' '

    def _join_parts(self, parts):
        return (self.space_char * self.spacing).join(parts)

    def format_row(self, *cols):
        parts = []
        for idx, col in enumerate(cols):
            size = self.col_sizes[idx]
            tx = '' if col is None else str(col)
            parts.append(tx[:size] + self.space_char * (size - len(tx)))
        return self._join_parts(parts)

    def format_line(self, char='='):
        parts = []
        for n in self.col_sizes:
            parts.append(char * (n // len(char)))
        return self._join_parts(parts)


def exit_err(msg, status=1):
    click.echo(msg, err=True)
    sys.exit(status)


def current_umask():
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_atomic(path, data):
    """Replace ``path`` with ``data`` so readers never see a partial file.

    An existing file keeps its permissions, a new one gets the same
    permissions ``open(path, 'w')`` would have given it.
    """
    dirname = os.path.dirname(os.path.abspath(path))
    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        mode = 0o666 & ~current_umask()

    fd, tmp = tempfile.mkstemp(dir=dirname, prefix='.dispatch-')
    try:
        with os.fdopen(fd, 'w') as out:
            out.write(data)
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise
