"""Command line interface for texdiag."""
