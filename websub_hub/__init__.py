"""WebSub hub: subscription verification and content distribution over HTTP."""

__version__ = "1.0.0"
