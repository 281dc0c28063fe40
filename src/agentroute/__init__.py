"""agentroute: task routing and multi-agent negotiation."""

__version__ = "0.1.0"
