"""Command line drivers for the Code Engine SDK."""
