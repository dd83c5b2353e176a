"""
Color Nodes for ComfyTint.

The color picker JS widget edits colors through plain RGB updates sent to
the API routes; these nodes read the color back in its remembered format.
"""

import torch
import numpy as np

from ..utils.color_bridge import StateBridge, bridges
from ..utils.color_parser import parse_color
from ..utils.color_serializer import serialize_color, serialize_state
from ..utils.color_types import ColorFormat

FORMAT_CHOICES = [fmt.value for fmt in ColorFormat]


class ColorPicker:
    """
    Pick a color with the visual color picker.

    Accepts any color string (hex, hex8, rgb/rgba, hsl/hsla, percentage rgb,
    CSS names) and outputs it in the same format it was given in, plus the
    numeric channels. Picker edits keep the format the color was typed in.

    With a node id the color lives in that node's bridge. The widget string
    only replaces it when it differs from the one the node last ran with, so
    re-running an unchanged graph keeps what was picked since.
    """

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "color": ("STRING", {"default": "#FFFFFF"}),
            },
            "hidden": {
                "unique_id": "UNIQUE_ID",
            },
        }

    RETURN_TYPES = ("STRING", "INT", "INT", "INT", "FLOAT")
    RETURN_NAMES = ("color", "r", "g", "b", "alpha")
    FUNCTION = "get_color"
    CATEGORY = "ComfyTint/Color"

    def get_color(self, color: str, unique_id=None):
        if unique_id is None:
            state = StateBridge(color).state
        else:
            bridge, created = bridges.open(unique_id, color)
            if created or color == bridge.executed_value:
                state = bridge.state
            else:
                state = bridge.set(color)
            bridge.executed_value = color

        c = state.color
        return (serialize_state(state), c.r, c.g, c.b, c.a)


class ColorConvert:
    """
    Convert a color string to another format.

    Unparsable input becomes black (#000000 in the target format).
    """

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "color": ("STRING", {"default": "#FFFFFF"}),
                "format": (FORMAT_CHOICES, {"default": ColorFormat.HEX.value}),
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("color", "source_format")
    FUNCTION = "convert"
    CATEGORY = "ComfyTint/Color"

    def convert(self, color: str, format: str = "hex"):
        state = parse_color(color)
        return (serialize_color(state.color, ColorFormat.from_name(format)), state.format.value)


class SolidColor:
    """
    Generate a solid color image from any color string.

    Outputs the RGB image plus a mask filled with the color's alpha.
    """

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "color": ("STRING", {"default": "#FFFFFF"}),
                "width": ("INT", {"default": 512, "min": 1, "max": 8192, "step": 1}),
                "height": ("INT", {"default": 512, "min": 1, "max": 8192, "step": 1}),
            },
            "optional": {
                "batch_size": ("INT", {"default": 1, "min": 1, "max": 64, "step": 1}),
            }
        }

    RETURN_TYPES = ("IMAGE", "MASK")
    RETURN_NAMES = ("image", "mask")
    FUNCTION = "generate"
    CATEGORY = "ComfyTint/Color"

    def generate(self, color: str, width: int, height: int, batch_size: int = 1):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid size: {width}x{height}")
        if batch_size <= 0:
            raise ValueError(f"Invalid batch size: {batch_size}")

        c = parse_color(color).color

        with torch.no_grad():
            img_np = np.full((height, width, 3), c.rgb, dtype=np.float32) / 255.0
            img_tensor = torch.from_numpy(img_np).unsqueeze(0)
            mask = torch.full((1, height, width), float(c.a), dtype=torch.float32)

            if batch_size > 1:
                img_tensor = img_tensor.repeat(batch_size, 1, 1, 1)
                mask = mask.repeat(batch_size, 1, 1)

        return (img_tensor, mask)


NODE_CLASS_MAPPINGS = {
    "ComfyTint_ColorPicker": ColorPicker,
    "ComfyTint_ColorConvert": ColorConvert,
    "ComfyTint_SolidColor": SolidColor,
}

NODE_DISPLAY_NAME_MAPPINGS = {
    "ComfyTint_ColorPicker": "Color Picker 🎨",
    "ComfyTint_ColorConvert": "Color Convert 🎨",
    "ComfyTint_SolidColor": "Solid Color 🎨",
}
