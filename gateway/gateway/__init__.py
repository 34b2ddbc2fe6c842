"""gateway — JSON-RPC 2.0 envelope processing, dispatch and the Starlette app."""
