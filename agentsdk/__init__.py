"""Typed messages, a parser and a multi-turn client for an agent CLI's JSON protocol, with in-process MCP tool servers."""

__version__ = "0.3.0"