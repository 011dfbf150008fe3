"""GitProof: proof-of-work metrics for GitHub repositories."""

__version__ = "0.1.0"
