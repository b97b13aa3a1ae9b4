# tests/integration/conftest.py
# Pytest fixtures to start Redis via TestContainers.
# - Provides the connection URL via a session fixture.
# - Skips the integration suite when Docker is not reachable.

from typing import Iterator

import pytest  # type: ignore[import-not-found]


@pytest.fixture(scope="session")
def redis_url() -> Iterator[str]:
    redis_module = pytest.importorskip("testcontainers.redis")
    try:
        container = redis_module.RedisContainer("redis:7-alpine")
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available: {type(e).__name__}: {e}")
    try:
        host = container.get_container_host_ip()
        port = container.get_exposed_port(6379)
        yield f"redis://{host}:{port}/0"
    finally:
        container.stop()
