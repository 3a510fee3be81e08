"""Paystub Calc MCP server."""
