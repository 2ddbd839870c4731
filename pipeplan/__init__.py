"""pipeplan — infer a project's runtime and emit a CI build/test plan."""

__version__ = "0.1.0"
