#!/usr/bin/env python3
"""
MCP Stdio-to-HTTP Bridge

Reads MCP JSON-RPC messages from stdin, forwards them to the Searchlight
HTTP API, and writes responses to stdout.

Environment:
    MCP_TOKEN / SEARCHLIGHT_API_TOKEN   bearer token (required)
    MCP_SERVER_URL / SEARCHLIGHT_API_URL   endpoint (optional)
"""

import sys

from searchlight.bridge import main

if __name__ == "__main__":
    sys.exit(main())
