"""Error reporting collaborators."""

from .error_reporter import ErrorReporter, LoggingErrorReporter, SupabaseErrorReporter, build_error_reporter

__all__ = ["ErrorReporter", "LoggingErrorReporter", "SupabaseErrorReporter", "build_error_reporter"]
