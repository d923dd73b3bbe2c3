"""
skelgen package

Materializes a parameterized directory "skeleton" into a concrete tree,
substituting `${name}` placeholders in path names and file contents.

Modules:
- `substitutor.py`: flat `${name}` substitution and unresolved detection
- `archive.py`: zip extraction into a scratch directory and its cleanup
- `descriptor.py`: the skeleton descriptor (`config.xml` / `config.yaml`)
- `materializer.py`: per-run context and the tree walk that writes output
- `prompt.py`: reading parameter values from standard input
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "1.1.0"
