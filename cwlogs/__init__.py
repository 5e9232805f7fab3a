"""cwlogs - query, tail and tabulate CloudWatch Logs from the terminal."""

__version__ = "0.1.0"
