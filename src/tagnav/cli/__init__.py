"""Command line interface for tagnav."""
