"""MCP tool modules for chuk-dem-render."""
