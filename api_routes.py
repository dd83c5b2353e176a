"""
API routes for ComfyTint custom nodes.

Endpoints used by the color picker widget (RGB updates on change complete)
and by anything else that reads or writes a picker's color.
"""

from aiohttp import web

from .utils.color_bridge import bridges, coerce_rgb
from .utils.color_parser import parse_color
from .utils.color_serializer import serialize_color, serialize_state
from .utils.color_types import ColorFormat, ColorState

ROUTE_PREFIX = "/comfytint"
COLOR_CHANGED_EVENT = "comfytint.color_changed"

routes = web.RouteTableDef()

# (server, unsubscribe) of the PromptServer currently receiving change events
_registered = None


def color_payload(state: ColorState, node_id=None) -> dict:
    """
    JSON-ready view of a color state.

    Returns:
        dict with keys: value, format, color (and node_id if given)
    """
    payload = {
        "value": serialize_state(state),
        "format": state.format.value,
        "color": state.color.to_dict(),
    }
    if node_id is not None:
        payload["node_id"] = str(node_id)
    return payload


def _error(message: str, status: int):
    return web.json_response({"error": message}, status=status)


async def _read_body(request) -> dict:
    data = await request.json()
    if not isinstance(data, dict):
        raise ValueError("Body must be a JSON object")
    return data


@routes.get(ROUTE_PREFIX + "/color/{node_id}")
async def get_color_endpoint(request):
    """
    Read a picker's color in its remembered format.

    GET /comfytint/color/{node_id}
    Returns: {"node_id": str, "value": str, "format": str, "color": {r, g, b, a}}
    """
    node_id = request.match_info["node_id"]
    bridge = bridges.get(node_id)
    if bridge is None:
        return _error(f"No color picker with id {node_id}", 404)
    return web.json_response(color_payload(bridge.state, node_id))


@routes.post(ROUTE_PREFIX + "/color/{node_id}")
async def set_color_endpoint(request):
    """
    Write a picker's color. Replaces both color and remembered format.

    POST /comfytint/color/{node_id}
    Body: {"value": "#ff0000" | "rgba(...)" | {"r": .., "g": .., "b": ..} | ...}
    Returns: same as GET (invalid values reset to black, hex format)
    """
    node_id = request.match_info["node_id"]
    try:
        data = await _read_body(request)
        value = data.get("value")

        bridge, created = bridges.open(node_id, value)
        state = bridge.state if created else bridge.set(value)
        return web.json_response(color_payload(state, node_id))

    except ValueError as e:
        return _error(f"Bad request: {str(e)}", 400)
    except Exception as e:
        return _error(f"Server error: {str(e)}", 500)


@routes.post(ROUTE_PREFIX + "/color/{node_id}/update")
async def update_color_endpoint(request):
    """
    Apply a picker widget change. Format and alpha are kept.

    POST /comfytint/color/{node_id}/update
    Body: {"r": int, "g": int, "b": int}
    Returns: same as GET
    """
    node_id = request.match_info["node_id"]
    try:
        data = await _read_body(request)
        rgb = coerce_rgb(data)
        if rgb is None:
            return _error("Body must have numeric r, g, b", 400)

        bridge = bridges.get(node_id)
        if bridge is None:
            return _error(f"No color picker with id {node_id}", 404)

        state = bridge.update(rgb)
        return web.json_response(color_payload(state, node_id))

    except ValueError as e:
        return _error(f"Bad request: {str(e)}", 400)
    except Exception as e:
        return _error(f"Server error: {str(e)}", 500)


@routes.delete(ROUTE_PREFIX + "/color/{node_id}")
async def close_color_endpoint(request):
    """
    Drop a picker's bridge (node removed from the graph).

    DELETE /comfytint/color/{node_id}
    Returns: {"closed": bool}
    """
    node_id = request.match_info["node_id"]
    if not bridges.close(node_id):
        return _error(f"No color picker with id {node_id}", 404)
    return web.json_response({"closed": True})


@routes.post(ROUTE_PREFIX + "/convert")
async def convert_color_endpoint(request):
    """
    Preview a color in another format without touching any picker.

    POST /comfytint/convert
    Body: {"value": ..., "format": "hex" | "hex8" | "hsl" | "prgb" | "rgb"}
    Returns: {"value": str, "format": str, "source_format": str, "color": {r, g, b, a}}
    """
    try:
        data = await _read_body(request)
        state = parse_color(data.get("value"))
        fmt = ColorFormat.from_name(data.get("format"), default=state.format)

        return web.json_response({
            "value": serialize_color(state.color, fmt),
            "format": fmt.value,
            "source_format": state.format.value,
            "color": state.color.to_dict(),
        })

    except ValueError as e:
        return _error(f"Bad request: {str(e)}", 400)
    except Exception as e:
        return _error(f"Server error: {str(e)}", 500)


def register_routes(server) -> None:
    """
    Mount the routes on a ComfyUI PromptServer and push color changes to the frontend.

    Registering the same server again does nothing. A new server replaces the
    previous one as the receiver of change events.

    Args:
        server: PromptServer instance (needs .routes and .send_sync)
    """
    global _registered
    if _registered is not None:
        previous, unsubscribe = _registered
        if previous is server:
            return
        unsubscribe()
        _registered = None

    for route in routes:
        server.routes.route(route.method, route.path, **route.kwargs)(route.handler)

    def push_change(bridge, state):
        server.send_sync(COLOR_CHANGED_EVENT, color_payload(state, bridge.key))

    _registered = (server, bridges.subscribe(push_change))
    print(f"[ComfyTint] API routes registered: {ROUTE_PREFIX}/color/{{node_id}}, {ROUTE_PREFIX}/convert")
