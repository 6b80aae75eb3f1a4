"""Network map: a JSON-file record store of hosts on a local network.

Layout:
    ~/.config/my-network-mcp/
    ├── network-map.json               # The whole document (override: NETWORK_MAP_PATH)
    └── netmap.toml                    # Optional configuration
"""
