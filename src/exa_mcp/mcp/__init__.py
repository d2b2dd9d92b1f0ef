"""MCP protocol server and its transports."""
