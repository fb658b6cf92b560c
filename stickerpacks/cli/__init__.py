"""Command-line tools for operating the sticker pack service.

- ``python -m stickerpacks.cli.users``: create and list login accounts.
"""
