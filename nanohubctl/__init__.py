"""Command line tool and client for the NanoHUB DDM and NanoCMD APIs."""

__version__ = "1.0.3"