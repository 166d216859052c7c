"""UI module for the host sampler.

The CLI can be run directly:
    python -m host_sampler.ui.cli monitor

Note: CLI components are not exported here to avoid module loading issues
when running as a script.
"""

__all__ = []  # CLI is run directly, no exports needed
