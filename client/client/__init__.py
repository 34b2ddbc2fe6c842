"""client — thin async JSON-RPC 2.0 client for the gateway."""
