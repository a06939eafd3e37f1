import unittest

from fake_backend import FakeBackend
from models.models import CacheStatus, SummarizeRequest, TranslationMethod
from pipeline.errors import AIServiceError, RateLimitError, ValidationError
from pipeline.kv_store import InMemoryKeyValueStore
from pipeline.protected_terms import ProtectedTermGuard
from pipeline.rate_limiter import InMemoryRateLimitStore, RateLimiter
from pipeline.request_pipeline import PipelineState, RequestPipeline
from pipeline.response_cache import ResponseCache
from pipeline.summarization import SummarizationAdapter
from pipeline.translation import TranslationAdapter

TEXT = "Michael visited Paris last spring. The city was busy. He loved the museums."


class EmptySummarizer:
    async def summarize(self, text):
        return ""


class TestRequestPipeline(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.backend = FakeBackend(summary="Michael enjoyed Paris.")
        self.store = InMemoryKeyValueStore()
        self.rate_store = InMemoryRateLimitStore()
        self.pipeline = self._pipeline()

    def _pipeline(
        self, cache_store="default", policy="async", limit=60, summarizer=None, direct=False
    ):
        store = self.store if cache_store == "default" else cache_store
        return RequestPipeline(
            summarizer=summarizer
            or SummarizationAdapter(self.backend, short_input_threshold=0),
            translator=TranslationAdapter(
                self.backend, ProtectedTermGuard(["Paris", "Michael"])
            ),
            cache=ResponseCache(store, ttl=3600),
            rate_limiter=RateLimiter(self.rate_store, limit=limit, window_seconds=60),
            cache_write_policy=policy,
            direct_translation=direct,
        )

    async def test_english_to_spanish(self):
        request = SummarizeRequest(text=TEXT, sourceLang="en", targetLang="es")

        outcome = await self.pipeline.run(request, "1.2.3.4")

        self.assertEqual(outcome.cache_status, CacheStatus.MISS)
        self.assertEqual(outcome.result.summary, "Michael enjoyed Paris.")
        self.assertEqual(outcome.result.translated, "[es] Michael enjoyed Paris.")
        self.assertEqual(outcome.result.target_language, "es")
        self.assertEqual(
            outcome.translation_method, TranslationMethod.ENGLISH_INTERMEDIATE
        )
        self.assertEqual(
            outcome.states,
            [
                PipelineState.RECEIVED,
                PipelineState.VALIDATED,
                PipelineState.RATE_CHECKED,
                PipelineState.CACHE_CHECKED,
                PipelineState.NORMALIZED,
                PipelineState.SUMMARIZED,
                PipelineState.TRANSLATED,
                PipelineState.CACHED,
                PipelineState.RESPONDED,
            ],
        )
        # 翻译时专有名词被占位符替换
        sent_text = self.backend.translate_calls[0][0]
        self.assertNotIn("Paris", sent_text)

    async def test_async_write_then_cache_hit(self):
        request = SummarizeRequest(text=TEXT, sourceLang="en", targetLang="es")
        first = await self.pipeline.run(request, "1.2.3.4")
        self.assertIsNotNone(first.background_write)
        self.assertEqual(len(self.store), 0)

        await first.background_write()
        second = await self.pipeline.run(request, "1.2.3.4")

        self.assertEqual(second.cache_status, CacheStatus.HIT)
        self.assertEqual(second.result, first.result)
        self.assertIsNone(second.background_write)
        self.assertEqual(second.states[-2:], [PipelineState.CACHE_CHECKED, PipelineState.RESPONDED])
        self.assertEqual(len(self.backend.generate_calls), 1)

    async def test_sync_write_policy(self):
        pipeline = self._pipeline(policy="sync")
        request = SummarizeRequest(text=TEXT, sourceLang="en", targetLang="fr")
        outcome = await pipeline.run(request, "1.2.3.4")
        self.assertIsNone(outcome.background_write)
        self.assertEqual(len(self.store), 1)

    async def test_non_english_source_is_normalized(self):
        request = SummarizeRequest(text="Bonjour tout le monde.", sourceLang="fr", targetLang="en")

        outcome = await self.pipeline.run(request, "1.2.3.4")

        self.assertEqual(self.backend.translate_calls, [("Bonjour tout le monde.", "fr", "en")])
        self.assertIn("[en] Bonjour tout le monde.", self.backend.generate_calls[0])
        self.assertEqual(outcome.result.translated, outcome.result.summary)

    async def test_english_to_english_is_passthrough(self):
        request = SummarizeRequest(text=TEXT, sourceLang="en", targetLang="en")
        outcome = await self.pipeline.run(request, "1.2.3.4")
        self.assertEqual(self.backend.translate_calls, [])
        self.assertEqual(outcome.translation_method, TranslationMethod.PASSTHROUGH)

    async def test_validation_failure_consumes_nothing(self):
        request = SummarizeRequest(text="A" * 5001, sourceLang="en", targetLang="es")
        with self.assertRaises(ValidationError):
            await self.pipeline.run(request, "1.2.3.4")
        self.assertEqual(self.rate_store.count("1.2.3.4"), 0)
        self.assertEqual(self.backend.generate_calls, [])

    async def test_rate_limit(self):
        pipeline = self._pipeline(limit=1)
        await pipeline.run(SummarizeRequest(text=TEXT, sourceLang="en", targetLang="es"), "1.2.3.4")
        with self.assertRaises(RateLimitError):
            await pipeline.run(
                SummarizeRequest(text="Another text.", sourceLang="en", targetLang="es"),
                "1.2.3.4",
            )

    async def test_translation_failure(self):
        self.backend.translate_error = AIServiceError("Translation failed")
        request = SummarizeRequest(text=TEXT, sourceLang="en", targetLang="es")
        with self.assertRaises(AIServiceError):
            await self.pipeline.run(request, "1.2.3.4")
        self.assertEqual(len(self.store), 0)

    async def test_empty_summary_is_an_error(self):
        pipeline = self._pipeline(summarizer=EmptySummarizer())
        request = SummarizeRequest(text=TEXT, sourceLang="en", targetLang="es")
        with self.assertRaises(AIServiceError) as ctx:
            await pipeline.run(request, "1.2.3.4")
        self.assertEqual(
            ctx.exception.message, "Summarization failed to produce a valid response"
        )

    async def test_disabled_cache_schedules_no_write(self):
        pipeline = self._pipeline(cache_store=None)
        request = SummarizeRequest(text=TEXT, sourceLang="en", targetLang="es")
        outcome = await pipeline.run(request, "1.2.3.4")
        self.assertIsNone(outcome.background_write)
        self.assertEqual(outcome.cache_status, CacheStatus.MISS)

    async def test_direct_pair_skips_english(self):
        pipeline = self._pipeline(direct=True)
        text = "Michael visitó París. Le encantaron los museos."
        request = SummarizeRequest(text=text, sourceLang="es", targetLang="fr")

        outcome = await pipeline.run(request, "1.2.3.4")

        self.assertEqual(outcome.translation_method, TranslationMethod.DIRECT)
        self.assertEqual(len(self.backend.translate_calls), 1)
        self.assertEqual(self.backend.translate_calls[0][1:], ("es", "fr"))
        self.assertEqual(outcome.result.translated, f"[fr] {text}")
        self.assertEqual(outcome.result.summary, "Michael enjoyed Paris.")
        self.assertIn(f"[fr] {text}", self.backend.generate_calls[0])
        self.assertEqual(
            outcome.states,
            [
                PipelineState.RECEIVED,
                PipelineState.VALIDATED,
                PipelineState.RATE_CHECKED,
                PipelineState.CACHE_CHECKED,
                PipelineState.TRANSLATED,
                PipelineState.SUMMARIZED,
                PipelineState.CACHED,
                PipelineState.RESPONDED,
            ],
        )

    async def test_direct_failure_falls_back_to_english(self):
        def translate(text, source, target):
            if (source, target) == ("es", "fr"):
                raise AIServiceError("direct pair unavailable")
            return f"[{target}] {text}"

        self.backend.translate_fn = translate
        pipeline = self._pipeline(direct=True)
        request = SummarizeRequest(text="Hola a todos.", sourceLang="es", targetLang="fr")

        outcome = await pipeline.run(request, "1.2.3.4")

        self.assertEqual(
            outcome.translation_method, TranslationMethod.ENGLISH_INTERMEDIATE
        )
        self.assertEqual(
            [call[1:] for call in self.backend.translate_calls],
            [("es", "fr"), ("es", "en"), ("en", "fr")],
        )
        self.assertEqual(outcome.result.translated, "[fr] Michael enjoyed Paris.")

    async def test_direct_mode_ignores_unlisted_pairs(self):
        pipeline = self._pipeline(direct=True)
        request = SummarizeRequest(text="Hallo zusammen.", sourceLang="de", targetLang="ru")
        outcome = await pipeline.run(request, "1.2.3.4")
        self.assertEqual(
            outcome.translation_method, TranslationMethod.ENGLISH_INTERMEDIATE
        )

    async def test_direct_mode_off_by_default(self):
        request = SummarizeRequest(text="Hola a todos.", sourceLang="es", targetLang="fr")
        outcome = await self.pipeline.run(request, "1.2.3.4")
        self.assertEqual(
            outcome.translation_method, TranslationMethod.ENGLISH_INTERMEDIATE
        )

    async def test_lone_surrogate_is_repaired(self):
        request = SummarizeRequest(
            text="\ud83d Michael visited Paris.", sourceLang="en", targetLang="en"
        )
        outcome = await self.pipeline.run(request, "1.2.3.4")
        self.assertEqual(outcome.cache_status, CacheStatus.MISS)
        self.assertIn("\ufffd Michael visited Paris.", self.backend.generate_calls[0])

    async def test_unknown_write_policy(self):
        with self.assertRaises(ValueError):
            self._pipeline(policy="eventually")


if __name__ == "__main__":
    unittest.main()
