"""Command-line interface for modebridge."""
