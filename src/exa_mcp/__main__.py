from exa_mcp.cli.app import cli

cli()
