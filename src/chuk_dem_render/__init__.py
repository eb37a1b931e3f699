"""
chuk-dem-render: Esri ASCII Grid to PNG Renderer

Converts Esri ASCII elevation grids (.asc) into normalized grayscale
elevation maps or colour shaded-relief (hillshade) composites. Usable
from the command line or as an MCP server.
"""
