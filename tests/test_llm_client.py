import asyncio
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from pipeline.errors import AIServiceError
from pipeline.llm_client import AI_SERVICE_FAILURE_MESSAGE, OpenAIBackend
from pipeline.prompts import SUMMARY_PROMPT


def completion(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


class TestOpenAIBackend(unittest.IsolatedAsyncioTestCase):
    def _backend(self, create, fallback_models=None, timeout=5):
        client = MagicMock()
        client.api_key = "sk-test"
        client.chat.completions.create = create
        return OpenAIBackend(
            client=client,
            summary_model="summary-model",
            translation_model="translation-model",
            fallback_models=fallback_models or [],
            request_timeout=timeout,
            translation_max_tokens=512,
        )

    async def test_translate_uses_language_names(self):
        create = AsyncMock(return_value=completion(" Hola mundo "))
        backend = self._backend(create)

        result = await backend.translate("Hello world", "en", "es")

        self.assertEqual(result, "Hola mundo")
        kwargs = create.await_args.kwargs
        self.assertEqual(kwargs["model"], "translation-model")
        self.assertEqual(kwargs["max_tokens"], 512)
        self.assertIn("from English to Spanish", kwargs["messages"][1]["content"])

    async def test_generate_uses_summary_model(self):
        create = AsyncMock(return_value=completion("A summary."))
        backend = self._backend(create)
        prompt = SUMMARY_PROMPT.render(text="Some text.")

        self.assertEqual(await backend.generate(prompt, max_tokens=350), "A summary.")
        kwargs = create.await_args.kwargs
        self.assertEqual(kwargs["model"], "summary-model")
        self.assertEqual(kwargs["max_tokens"], 350)
        self.assertEqual(kwargs["messages"][1]["content"], prompt)

    async def test_falls_back_to_next_model(self):
        create = AsyncMock(side_effect=[RuntimeError("overloaded"), completion("ok")])
        backend = self._backend(create, fallback_models=["backup-model"])

        self.assertEqual(await backend.generate("prompt", max_tokens=10), "ok")
        self.assertEqual(
            [call.kwargs["model"] for call in create.await_args_list],
            ["summary-model", "backup-model"],
        )

    async def test_all_models_failing_raises(self):
        create = AsyncMock(
            side_effect=RuntimeError("Incorrect API key provided: sk-secret123")
        )
        backend = self._backend(create, fallback_models=["backup-model"])
        with self.assertLogs("pipeline.llm_client", level="ERROR"):
            with self.assertRaises(AIServiceError) as ctx:
                await backend.generate("prompt", max_tokens=10)
        self.assertEqual(ctx.exception.model, "summary-model")
        self.assertEqual(create.await_count, 2)
        self.assertEqual(ctx.exception.message, AI_SERVICE_FAILURE_MESSAGE)
        self.assertNotIn("sk-secret123", str(ctx.exception.to_dict()))

    async def test_empty_content_raises(self):
        backend = self._backend(AsyncMock(return_value=completion(None)))
        with self.assertRaises(AIServiceError):
            await backend.translate("Hello", "en", "fr")

    async def test_timeout_raises(self):
        async def slow(**kwargs):
            await asyncio.sleep(1)
            return completion("late")

        backend = self._backend(slow, timeout=0.01)
        with self.assertRaises(AIServiceError):
            await backend.generate("prompt", max_tokens=10)

    def test_prompt_requires_values(self):
        with self.assertRaises(KeyError):
            SUMMARY_PROMPT.render()


if __name__ == "__main__":
    unittest.main()
