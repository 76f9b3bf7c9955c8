"""CLI entry point: python -m sourdough.mcp [economy_module] [store.json]"""

from __future__ import annotations

import logging
import sys


def main() -> None:
    args = sys.argv[1:]
    module_path = args[0] if args else "sourdough.bakery"
    store_path = args[1] if len(args) > 1 else None

    # stdout carries the MCP protocol; logs go to stderr
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    # Redirect stdout to stderr during module loading in case define_economy() prints
    real_stdout = sys.stdout
    sys.stdout = sys.stderr
    try:
        from sourdough.cli import load_economy

        definition = load_economy(module_path)
    finally:
        sys.stdout = real_stdout

    from sourdough.mcp.server import create_server
    from sourdough.persistence import JsonFileBackend

    backend = JsonFileBackend(store_path) if store_path else None
    server = create_server(definition, backend)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
