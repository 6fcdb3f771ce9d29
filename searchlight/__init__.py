"""
Searchlight MCP Bridge - stdio JSON-RPC to HTTP forwarding for the Searchlight API.

Reads newline-delimited JSON-RPC 2.0 messages from stdin, answers a handful of
MCP methods locally, forwards the rest to the Searchlight endpoint and writes
the responses to stdout.
"""

__version__ = "1.0.0"
