"""
Embedding Storage CLI
=====================
Command-line interface for running the MCP server and one-shot calls.
"""
