"""Command that starts the GPU monitoring module."""

from __future__ import annotations

from collections.abc import Sequence

from .cuda_module import CudaModule


def main(argv: Sequence[str] | None = None) -> int:
    """Bring up the module and return the exit status."""
    CudaModule()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())