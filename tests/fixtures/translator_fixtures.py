import asyncio

import pytest

from content_api.schemas import SUPPORTED_LANGUAGES, ServiceContent


def bundle_for(content: ServiceContent, languages=SUPPORTED_LANGUAGES) -> dict:
    return {
        language: {
            "hero": {"title": f"[{language}] {content.hero.title}", "subtitle": f"[{language}] {content.hero.subtitle}"},
            "solutions": content.solutions.model_dump(by_alias=True),
            "services": content.services.model_dump(by_alias=True),
        }
        for language in languages
    }


class FakeTranslator:
    """Translates into every supported language; fails or stalls for chosen titles."""

    def __init__(self, fail_titles=(), slow_titles=(), languages=SUPPORTED_LANGUAGES):
        self.fail_titles = set(fail_titles)
        self.slow_titles = set(slow_titles)
        self.languages = languages
        self.calls = []

    async def __call__(self, content: ServiceContent) -> dict:
        self.calls.append(content.hero.title)
        if content.hero.title in self.slow_titles:
            await asyncio.sleep(10)
        if content.hero.title in self.fail_titles:
            raise RuntimeError(f"translation service rejected {content.hero.title}")
        return bundle_for(content, self.languages)


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()
