"""Socket exercises: TCP/UDP exchanges, file fetching and ARQ protocol demos."""

__version__ = "0.1.0"