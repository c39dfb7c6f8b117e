"""TLC command-line interface."""
