"""MCP prompts for Starfish workflows."""

# pyright: reportUnusedFunction=false

from fastmcp import FastMCP


def register(app: FastMCP) -> None:
    """Register prompts on the provided app instance."""

    @app.prompt(
        name="Summarize Devices",
        description="Create a prompt to summarize the devices in the Starfish solution.",
        tags={"summary", "devices"},
    )
    def summarize_devices() -> str:
        return (
            "Please summarize the devices in the configured Starfish solution. "
            "Group them by deviceType and note any device without a matching device template. "
            "Use the list_devices and list_device_templates tools to get the data."
        )

    @app.prompt(
        name="Inspect Device Observations",
        description="Review recent observations reported by one device.",
        tags={"analysis", "observations"},
    )
    def inspect_device_observations(device_id: str, pages: int = 1) -> str:
        return (
            f"Please review the most recent observations for device '{device_id}'. "
            f"Read up to {pages} page(s) using list_observations and get_next_page, "
            "then describe trends and flag readings that look out of range."
        )


__all__ = ["register"]
