"""
prompt.py

Responsibility: Ask for one value per declared parameter on a line-oriented
stream.
"""

from __future__ import annotations

import sys
from typing import Iterable, TextIO

from skelgen.descriptor import Parameter


def _read_raw_line(stream: TextIO) -> str:
    # EOF yields an empty value; only the line terminator is stripped.
    line = stream.readline()
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def collect_values(
    parameters: Iterable[Parameter],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> dict[str, str]:
    """
    Prompt for each parameter in declaration order and return name -> value.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    values: dict[str, str] = {}
    print(file=stdout)
    for param in parameters:
        stdout.write(f"{param.description}: \n> ")
        stdout.flush()
        values[param.name] = _read_raw_line(stdin)

    print("\nThe following parameters are specified:\n", file=stdout)
    for key, value in values.items():
        print(f"{key} = {value}", file=stdout)
    print(file=stdout)
    return values
