"""Command line tools for refgraph.

- ``python -m refgraph.cli`` / ``refgraph`` -- load the datasets, apply
  membership flags and a threshold, print the resulting graph.
"""
