from __future__ import annotations


class LayoutError(Exception):
    exit_code = 1


class LayoutConfigError(LayoutError, ValueError):
    """Bad invocation: missing source file, empty filter set, bad libclang path."""

    exit_code = 2


class EngineError(LayoutError, RuntimeError):
    """libclang could not produce a translation unit."""

    exit_code = 3


class NoMatchError(LayoutError, LookupError):
    """The filters are wrong rather than the input broken."""

    exit_code = 4


class NoTargetsError(NoMatchError):
    pass


class NothingFoundError(NoMatchError):
    pass
