"""Render describe/move results as aligned columns or JSON."""
from __future__ import annotations

from typing import IO, List, Sequence

from pydantic import TypeAdapter

from kafka_logdirs.domain.models.log_dirs import LogDirDescriptor, MoveOutcome
from kafka_logdirs.infra.kafka.errors import error_message

LOG_DIRS_HEADER = ("DIR", "DIR ERR", "TOPIC", "PARTITION", "SIZE", "OFFSET LAG", "IS FUTURE")
MOVE_HEADER = ("TOPIC", "PARTITION", "ERROR")


class TabWriter:
    """Buffers rows and writes them column-aligned on `flush()`.

    Columns are at least `min_width` wide and separated by `padding`
    spaces; trailing blanks are trimmed from each line.
    """

    def __init__(self, out: IO[str], min_width: int = 6, padding: int = 2) -> None:
        self._out = out
        self._min_width = min_width
        self._padding = padding
        self._rows: List[List[str]] = []

    def row(self, *cells: object) -> None:
        self._rows.append(["" if c is None else str(c) for c in cells])

    def flush(self) -> None:
        if not self._rows:
            return
        ncols = max(len(r) for r in self._rows)
        widths = [self._min_width] * ncols
        for r in self._rows:
            for i, cell in enumerate(r[:-1]):
                widths[i] = max(widths[i], len(cell) + self._padding)
        for r in self._rows:
            line = "".join(cell.ljust(widths[i]) for i, cell in enumerate(r[:-1]))
            line += r[-1] if r else ""
            self._out.write(line.rstrip() + "\n")
        self._rows = []


def _bool(v: bool) -> str:
    return "true" if v else "false"


def log_dir_rows(dirs: Sequence[LogDirDescriptor]) -> List[List[str]]:
    """One row per errored dir, else one row per (dir, topic, partition)."""
    rows: List[List[str]] = []
    for d in dirs:
        msg = error_message(d.error_code)
        if msg is not None:
            rows.append([d.dir, msg, "", "", "", "", ""])
            continue
        for t in d.topics:
            for p in t.partitions:
                rows.append([
                    d.dir, "", t.topic, str(p.partition),
                    str(p.size), str(p.offset_lag), _bool(p.is_future),
                ])
    return rows


def move_outcome_rows(outcomes: Sequence[MoveOutcome]) -> List[List[str]]:
    return [
        [o.topic, str(o.partition), error_message(o.error_code) or ""]
        for o in outcomes
    ]


def render_log_dirs(dirs: Sequence[LogDirDescriptor], out: IO[str]) -> None:
    tw = TabWriter(out)
    tw.row(*LOG_DIRS_HEADER)
    for r in log_dir_rows(dirs):
        tw.row(*r)
    tw.flush()


def render_move_outcomes(outcomes: Sequence[MoveOutcome], out: IO[str]) -> None:
    tw = TabWriter(out)
    tw.row(*MOVE_HEADER)
    for r in move_outcome_rows(outcomes):
        tw.row(*r)
    tw.flush()


_LOG_DIRS_JSON = TypeAdapter(List[LogDirDescriptor])
_MOVES_JSON = TypeAdapter(List[MoveOutcome])


def dump_log_dirs_json(dirs: Sequence[LogDirDescriptor], out: IO[str]) -> None:
    out.write(_LOG_DIRS_JSON.dump_json(list(dirs), indent=2).decode() + "\n")


def dump_move_outcomes_json(outcomes: Sequence[MoveOutcome], out: IO[str]) -> None:
    out.write(_MOVES_JSON.dump_json(list(outcomes), indent=2).decode() + "\n")
