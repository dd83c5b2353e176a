"""
ComfyTint - Format-preserving Color Picker nodes for ComfyUI

The picker keeps a color in whatever format it was written in (hex, hex8,
rgb/rgba, hsl/hsla, percentage rgb) while the widget edits it as plain RGB.
"""

from .nodes.color_nodes import (
    ColorPicker,
    ColorConvert,
    SolidColor,
    NODE_CLASS_MAPPINGS as COLOR_MAPPINGS,
    NODE_DISPLAY_NAME_MAPPINGS as COLOR_DISPLAY_MAPPINGS,
)

# Register API routes (only available inside ComfyUI)
try:
    from server import PromptServer
    from . import api_routes

    api_routes.register_routes(PromptServer.instance)
except ImportError:
    print("[ComfyTint] Warning: Could not import api_routes")
except Exception as e:
    print(f"[ComfyTint] Error loading api_routes: {e}")


NODE_CLASS_MAPPINGS = {}
NODE_DISPLAY_NAME_MAPPINGS = {}

# Register color nodes
NODE_CLASS_MAPPINGS.update(COLOR_MAPPINGS)
NODE_DISPLAY_NAME_MAPPINGS.update(COLOR_DISPLAY_MAPPINGS)

__all__ = ["NODE_CLASS_MAPPINGS", "NODE_DISPLAY_NAME_MAPPINGS"]
