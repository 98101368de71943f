"""Command-line application for the segment puller."""
