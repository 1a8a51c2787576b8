"""tscdiag - compare TypeScript compiler diagnostics between branches."""

__version__ = "0.1.0"
