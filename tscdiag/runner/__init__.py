"""Runner module - external processes driven by tscdiag."""
