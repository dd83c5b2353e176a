# ComfyTint Utilities
from .color_types import CanonicalColor, ColorFormat, ColorState, DEFAULT_STATE
from .color_parser import parse_color, classify_color, ColorInput, InputKind
from .color_serializer import serialize_color, serialize_state
from .color_bridge import StateBridge, BridgeRegistry, bridges, coerce_rgb
