"""MCP tool registrations for the Starfish server.

Each module exposes ``register(app, *, deps)``:
- ``list_devices``: devices in the configured solution
- ``list_observations``: observation pages and next-page traversal
- ``list_device_templates``: solution and static device templates
"""
