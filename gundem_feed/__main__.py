"""Main module for gundem_feed MCP server.

This module allows the server to be run as a Python module using:
python -m gundem_feed

It delegates to the server application's main function.
"""

from gundem_feed.server.app import main

if __name__ == "__main__":
    main()
