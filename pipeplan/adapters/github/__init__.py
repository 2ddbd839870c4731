"""GitHub Actions bindings — step outputs."""

from pipeplan.adapters.github.outputs import format_output, output_file, write_outputs

__all__ = ["format_output", "output_file", "write_outputs"]
