import json
import unittest
from unittest.mock import AsyncMock, MagicMock

from fake_backend import FakeBackend
from api.container import build_container
from pipeline.dynamic_config import DynamicConfigLoader
from pipeline.kv_store import InMemoryKeyValueStore


class TestDynamicConfigLoader(unittest.IsolatedAsyncioTestCase):
    async def test_no_store(self):
        config = await DynamicConfigLoader(None).load()
        self.assertEqual(config.overrides, {})
        self.assertEqual(config.protected_words, [])

    async def test_loads_overrides_and_words(self):
        store = InMemoryKeyValueStore()
        await store.put(
            "app_config",
            json.dumps({"rate_limit_per_ip": 5, "cache_ttl": 120, "unknown": 1}),
        )
        await store.put("protected_words", json.dumps(["Acme", "", 7, "Globex"]))

        config = await DynamicConfigLoader(store).load()

        self.assertEqual(config.overrides, {"rate_limit_per_ip": 5, "cache_ttl": 120})
        self.assertEqual(config.protected_words, ["Acme", "Globex"])

    async def test_invalid_values_are_ignored(self):
        store = InMemoryKeyValueStore()
        await store.put("app_config", json.dumps({"rate_limit_per_ip": "lots", "cache_ttl": -1}))
        await store.put("protected_words", "{not json")

        config = await DynamicConfigLoader(store).load()

        self.assertEqual(config.overrides, {})
        self.assertEqual(config.protected_words, [])

    async def test_store_errors_fall_back_to_base_config(self):
        store = MagicMock()
        store.get = AsyncMock(side_effect=ConnectionError("redis down"))
        config = await DynamicConfigLoader(store).load()
        self.assertEqual(config.overrides, {})

    async def test_container_applies_dynamic_config(self):
        config_store = InMemoryKeyValueStore()
        await config_store.put(
            "app_config", json.dumps({"rate_limit_per_ip": 5, "max_text_length": 100})
        )
        await config_store.put("protected_words", json.dumps(["Acme"]))

        container = await build_container(
            backend=FakeBackend(),
            cache_store=InMemoryKeyValueStore(),
            config_store=config_store,
            use_default_stores=False,
        )

        self.assertEqual(container.pipeline.rate_limiter.limit, 5)
        self.assertEqual(container.pipeline.max_text_length, 100)
        self.assertIn("Acme", container.guard.terms)


if __name__ == "__main__":
    unittest.main()
