"""Click command modules. Each exposes ``register(cli)``."""
