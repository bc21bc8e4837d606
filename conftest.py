"""Root pytest configuration."""

pytest_plugins = ("pytest_asyncio",)
