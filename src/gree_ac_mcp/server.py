"""MCP server entry point for Gree air conditioners.

Exposes per-feature tools (power, mode, fan speed, temperature, ...),
resources and a prompt via the Model Context Protocol using the official
Python MCP SDK with stdio transport. Every tool is a thin call into the
generic get/set of :class:`~gree_ac_mcp.client.GreeClient`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from mcp.server.fastmcp import FastMCP

from .client import DEFAULT_TABLE, GreeClient
from .config import Settings
from .exceptions import AliasError
from .models.session import Session

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "gree-ac",
    instructions="Control Gree Wi-Fi air conditioners on the local network",
)

# Global connection state
_client: GreeClient | None = None


def _get_client() -> GreeClient:
    """Get the bound client, raising if not connected."""
    if _client is None or not _client.session.bound:
        raise RuntimeError(
            "Not connected to a device. Use the 'connect' tool first."
        )
    return _client


def _set_one(code: str, value: Union[str, int, bool]) -> dict[str, Any]:
    try:
        return _get_client().set_options({code: value})
    except AliasError as e:
        return {"error": str(e)}


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(
    host: Optional[str] = None,
    port: Optional[int] = None,
    cid: Optional[str] = None,
    key: Optional[str] = None,
) -> dict[str, Any]:
    """Discover an air conditioner and bind to it.

    Sends a scan to learn the device identity, then a bind to obtain the
    per-device key. If a previously bound key is supplied, the bind step
    is skipped. Omitted arguments fall back to the GREE_* environment
    variables.

    Args:
        host: Device IP address or host name.
        port: UDP port (default 7000).
        cid: Device identity (MAC without separators); learned by scan.
        key: Previously bound device key.
    """
    global _client
    settings = Settings.from_env()
    host = host or settings.host
    if not host:
        return {"error": "No host given and GREE_HOST is not set"}

    session = Session(
        host=host,
        port=port or settings.port,
        cid=cid or settings.cid,
        try_limit=settings.try_limit,
    )
    client = GreeClient(session)
    info = client.scan()

    key = key or settings.key
    if key:
        client.set_key(key)
    else:
        client.bind()

    _client = client
    result: dict[str, Any] = {"connected": True, "host": host, "cid": session.cid}
    result.update(info.to_dict())
    return result


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Forget the current device session."""
    global _client
    _client = None
    return {"disconnected": True}


@mcp.tool()
def get_device_info() -> dict[str, Any]:
    """Device identity and metadata reported by the last scan."""
    client = _get_client()
    result = client.session.to_dict()
    if client.device_info is not None:
        result.update(client.device_info.to_dict())
    return result


# ─── STATUS TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def get_status() -> dict[str, Any]:
    """Read the full status: power, mode, temperature, fan, swing, extras."""
    return _get_client().status()


@mcp.tool()
def get_options(codes: list[str]) -> dict[str, Any]:
    """Read arbitrary properties by code.

    Args:
        codes: Property codes, e.g. ["Pow", "SetTem", "TemSen"].
    """
    if not codes:
        return {"error": "At least one property code is required"}
    return _get_client().get_values(codes)


@mcp.tool()
def set_options(options: dict[str, Union[str, int, bool]]) -> dict[str, Any]:
    """Write several properties at once.

    Args:
        options: Property code -> value. Values may be alias names
                 (e.g. {"Mod": "cool", "WdSpd": "high"}), integers or booleans.
    """
    if not options:
        return {"error": "At least one option is required"}
    try:
        return _get_client().set_options(options)
    except AliasError as e:
        return {"error": str(e)}


# ─── POWER TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def power_on() -> dict[str, Any]:
    """Switch the air conditioner on."""
    return _get_client().set_values(["Pow"], [1])


@mcp.tool()
def power_off() -> dict[str, Any]:
    """Switch the air conditioner off."""
    return _get_client().set_values(["Pow"], [0])


@mcp.tool()
def get_power() -> dict[str, Any]:
    """Read the power state."""
    return _get_client().get_values(["Pow"])


# ─── MODE / FAN TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def get_mode() -> dict[str, Any]:
    """Read the operating mode."""
    return _get_client().get_values(["Mod"])


@mcp.tool()
def set_mode(mode: str) -> dict[str, Any]:
    """Set the operating mode.

    Args:
        mode: One of auto, cool, dry, fan, heat.
    """
    return _set_one("Mod", mode)


@mcp.tool()
def get_fan_speed() -> dict[str, Any]:
    """Read the fan speed."""
    return _get_client().get_values(["WdSpd"])


@mcp.tool()
def set_fan_speed(speed: str) -> dict[str, Any]:
    """Set the fan speed.

    Args:
        speed: One of auto, low, medium-low, medium, medium-high, high.
    """
    return _set_one("WdSpd", speed)


# ─── TEMPERATURE TOOLS ────────────────────────────────────────────────

@mcp.tool()
def get_temperature() -> dict[str, Any]:
    """Read the target temperature (Celsius) and its half-degree flag."""
    return _get_client().get_values(["SetTem", "Add0.5"])


@mcp.tool()
def set_temperature(temperature: int, add_half: bool = False) -> dict[str, Any]:
    """Set the target temperature.

    Args:
        temperature: Whole degrees Celsius (16-30).
        add_half: Add 0.5 degrees to the target.
    """
    if not 16 <= temperature <= 30:
        return {"error": "Temperature must be 16-30"}
    return _get_client().set_values(["SetTem", "Add0.5"], [temperature, int(add_half)])


# ─── HEALTH TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def get_health() -> dict[str, Any]:
    """Read the state of the Health (ionizer) function."""
    return _get_client().get_values(["Health"])


@mcp.tool()
def set_health(enabled: bool) -> dict[str, Any]:
    """Switch the Health (ionizer) function on or off.

    Args:
        enabled: True to enable, False to disable.
    """
    return _get_client().set_values(["Health"], [int(enabled)])


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("gree://device/info")
def resource_device_info() -> str:
    """Session parameters and device metadata."""
    if _client is None:
        return json.dumps({"connected": False})

    result: dict[str, Any] = {"connected": _client.session.bound}
    result.update(_client.session.to_dict())
    if _client.device_info is not None:
        result.update(_client.device_info.to_dict())
    return json.dumps(result)


@mcp.resource("gree://catalog/aliases")
def resource_alias_catalog() -> str:
    """Property codes with their value names, indexed by wire integer."""
    table = _client.aliases if _client is not None else DEFAULT_TABLE
    aliases = {
        code: [{"id": i, "name": name} for i, name in enumerate(names)]
        for code, names in table.as_dict().items()
    }
    return json.dumps({"aliases": aliases})


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def comfort_setup(goal: str) -> str:
    """Guide the AI to configure the air conditioner for a comfort goal.

    Args:
        goal: What the user wants, e.g. "cool the bedroom quietly for sleep".
    """
    return f"""Configure the air conditioner for: {goal}

Start by reading the current state with the get_status tool.
Consider:
- Mode (auto, cool, dry, fan, heat) for the goal and season
- Target temperature (16-30 C, optional half degree)
- Fan speed, and Quiet or Turbo for noise versus speed
- Sleep mode (SwhSlp), display light (Lig) and swing (SwUpDn, SwingLfRig)

Use set_options to apply several settings in one request,
then get_status to confirm what the device acknowledged."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
