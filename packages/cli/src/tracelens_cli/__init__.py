"""tracelens command-line interface."""
