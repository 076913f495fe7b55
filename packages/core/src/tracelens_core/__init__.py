"""Review session controller for triaging evaluation traces."""
