import unittest

from fake_backend import FakeBackend
from pipeline.errors import AIServiceError
from pipeline.protected_terms import ProtectedTermGuard
from pipeline.translation import TranslationAdapter


def to_spanish(text, source_lang, target_lang):
    return text.replace("is beautiful", "es hermosa")


class TestTranslationAdapter(unittest.IsolatedAsyncioTestCase):
    async def test_same_language_is_noop(self):
        backend = FakeBackend()
        adapter = TranslationAdapter(backend, ProtectedTermGuard(["Paris"]))
        self.assertEqual(await adapter.translate("Paris is beautiful", "en", "en"), "Paris is beautiful")
        self.assertEqual(backend.translate_calls, [])

    async def test_protected_terms_survive_translation(self):
        backend = FakeBackend(translate_fn=to_spanish)
        adapter = TranslationAdapter(backend, ProtectedTermGuard(["Paris"]))

        result = await adapter.translate("Paris is beautiful", "en", "es")

        self.assertEqual(result, "Paris es hermosa")
        sent_text, source, target = backend.translate_calls[0]
        self.assertNotIn("Paris", sent_text)
        self.assertIn("__PROTECTED_0_0__", sent_text)
        self.assertEqual((source, target), ("en", "es"))

    async def test_effective_language_codes_are_used(self):
        backend = FakeBackend()
        adapter = TranslationAdapter(backend, ProtectedTermGuard())
        await adapter.translate("Bon dia a tothom.", "ca", "en")
        self.assertEqual(backend.translate_calls[0][1:], ("es", "en"))

    async def test_empty_output_is_an_error(self):
        backend = FakeBackend(translate_fn=lambda text, s, t: "  ")
        adapter = TranslationAdapter(backend, ProtectedTermGuard())
        with self.assertRaises(AIServiceError) as ctx:
            await adapter.translate("Hello.", "en", "fr")
        self.assertEqual(ctx.exception.status_code, 503)

    async def test_backend_exception_is_wrapped(self):
        backend = FakeBackend(translate_error=RuntimeError("connection reset"))
        adapter = TranslationAdapter(backend, ProtectedTermGuard())
        with self.assertRaises(AIServiceError) as ctx:
            await adapter.translate("Hello.", "en", "fr")
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    async def test_ai_service_error_is_propagated(self):
        error = AIServiceError("All models failed.", model="gpt-4o-mini")
        backend = FakeBackend(translate_error=error)
        adapter = TranslationAdapter(backend, ProtectedTermGuard())
        with self.assertRaises(AIServiceError) as ctx:
            await adapter.translate("Hello.", "en", "fr")
        self.assertIs(ctx.exception, error)


if __name__ == "__main__":
    unittest.main()
