import json
import threading

import pytest

from content_api.errors import ServiceNotFoundError, StorageReadError, StorageWriteError
from content_api.schemas import SUPPORTED_LANGUAGES, ServiceRecord
from content_api.services.translation_gate import TranslationGate, select_candidates
from content_api.storage.records import ServiceRecordStore
from tests.fixtures.translator_fixtures import FakeTranslator, bundle_for
from tests.fixtures.settings_fixtures import make_service


def full_translations(title="Done"):
    content = ServiceRecord.model_validate(make_service(title.lower())).source_content()
    return bundle_for(content)


@pytest.fixture
def store(settings) -> ServiceRecordStore:
    return ServiceRecordStore(settings)


def seed_store(store, *raw_services):
    store.write([ServiceRecord.model_validate(item) for item in raw_services])


def make_gate(store, translator, timeout=5.0) -> TranslationGate:
    return TranslationGate(store=store, translator=translator, timeout=timeout)


async def test_translate_missing__end_to_end_single_record(store, translator):
    seed_store(store, {"id": "tiling", "hero": {"title": "Tiling", "subtitle": "Great tiles"}, "translations": {}})

    report = await make_gate(store, translator).translate_missing(force=False)

    assert report.count == 1
    assert report.services[0].id == "tiling"
    assert report.services[0].translations_count == 25
    persisted = store.read()[0]
    assert set(persisted.translations) == set(SUPPORTED_LANGUAGES)
    assert persisted.translations["en"].hero.title == "[en] Tiling"


async def test_translate_missing__noop_when_everything_complete(store, translator):
    seed_store(
        store,
        make_service("tiling", translations=full_translations("Tiling")),
        make_service("plastering", translations=full_translations("Plastering")),
    )
    before = store.path.read_bytes()

    report = await make_gate(store, translator).translate_missing(force=False)

    assert report.success is True
    assert report.services == []
    assert report.count == 2
    assert translator.calls == []
    assert store.path.read_bytes() == before


async def test_translate_missing__selects_only_incomplete_records(store, translator):
    almost = full_translations("Almost")
    almost.pop("hi")
    seed_store(
        store,
        make_service("complete-1", translations=full_translations()),
        make_service("almost", translations=almost),
        make_service("complete-2", translations=full_translations()),
        make_service("untranslated", translations={}),
        make_service("complete-3", translations=full_translations()),
    )

    report = await make_gate(store, translator).translate_missing()

    assert report.count == 2
    assert [outcome.id for outcome in report.services] == ["almost", "untranslated"]
    assert all(service.is_translation_complete() for service in store.read())


async def test_translate_missing__one_failure_does_not_block_the_batch(store):
    previous = {"en": full_translations("Broken")["en"]}
    seed_store(store, make_service("broken", translations=previous), make_service("fine"))
    translator = FakeTranslator(fail_titles={"Broken"})

    report = await make_gate(store, translator).translate_missing()

    outcomes = {outcome.id: outcome for outcome in report.services}
    assert outcomes["broken"].success is False
    assert "rejected" in outcomes["broken"].error
    assert outcomes["broken"].translations_count == 1
    assert outcomes["fine"].success is True
    assert report.succeeded == 1
    assert report.failed == 1

    persisted = {service.id: service for service in store.read()}
    assert list(persisted["broken"].translations) == ["en"]
    assert persisted["fine"].translations_count() == 25


async def test_translate_missing__failure_without_prior_translations(store):
    seed_store(store, make_service("broken"))

    report = await make_gate(store, FakeTranslator(fail_titles={"Broken"})).translate_missing()

    assert report.services[0].has_translations is False
    assert report.services[0].translations_count == 0
    assert store.read()[0].translations is None


async def test_translate_missing__timeout_counts_as_record_failure(store):
    seed_store(store, make_service("slow"), make_service("quick"))
    translator = FakeTranslator(slow_titles={"Slow"})

    report = await make_gate(store, translator, timeout=0.05).translate_missing()

    outcomes = {outcome.id: outcome for outcome in report.services}
    assert outcomes["slow"].success is False
    assert "Timed out" in outcomes["slow"].error
    assert outcomes["quick"].success is True


async def test_translate_missing__force_retranslates_complete_records(store, translator):
    stale = full_translations("Stale")
    seed_store(store, make_service("tiling", translations=stale))

    report = await make_gate(store, translator).translate_missing(force=True)

    assert report.count == 1
    assert store.read()[0].translations["en"].hero.title == "[en] Tiling"


async def test_translate_missing__replaces_translations_wholesale(store):
    seed_store(store, make_service("tiling", translations=full_translations("Tiling")))

    await make_gate(store, FakeTranslator(languages=("en", "de"))).translate_missing(force=True)

    assert sorted(store.read()[0].translations) == ["de", "en"]


async def test_translate_missing__narrows_to_service_id(store, translator):
    seed_store(store, make_service("tiling"), make_service("plastering"))

    report = await make_gate(store, translator).translate_missing(service_id="plastering")

    assert [outcome.id for outcome in report.services] == ["plastering"]
    assert translator.calls == ["Plastering"]
    persisted = {service.id: service for service in store.read()}
    assert persisted["tiling"].translations is None


async def test_translate_missing__complete_single_service_message(store, translator):
    seed_store(store, make_service("tiling", translations=full_translations()), make_service("plastering"))

    report = await make_gate(store, translator).translate_missing(service_id="tiling")

    assert report.count == 1
    assert report.message == "All services are already translated for service tiling"


async def test_translate_missing__unknown_service_id(store, translator):
    seed_store(store, make_service("tiling"))
    before = store.path.read_bytes()

    with pytest.raises(ServiceNotFoundError):
        await make_gate(store, translator).translate_missing(service_id="missing")

    assert translator.calls == []
    assert store.path.read_bytes() == before


async def test_translate_missing__invalid_bundle_is_a_record_failure(store):
    seed_store(store, make_service("tiling"))

    async def broken_translator(content):
        return ["not", "a", "mapping"]

    report = await make_gate(store, broken_translator).translate_missing()

    assert report.services[0].success is False
    assert "expected a mapping" in report.services[0].error


class FailingWriteStore(ServiceRecordStore):
    def __init__(self, settings):
        super().__init__(settings)
        self.writes = 0

    def write(self, services):
        self.writes += 1
        raise StorageWriteError(str(self.path), OSError(30, "Read-only file system"))


async def test_translate_missing__final_write_failure_propagates(settings, translator):
    store = FailingWriteStore(settings)

    with pytest.raises(StorageWriteError):
        await make_gate(store, translator).translate_missing()

    # seed write-back attempt plus the single final write
    assert store.writes == 2


async def test_translate_missing__writes_exactly_once(settings, translator):
    class CountingStore(ServiceRecordStore):
        writes = 0

        def write(self, services):
            CountingStore.writes += 1
            super().write(services)

    store = CountingStore(settings)
    seed_store(ServiceRecordStore(settings), make_service("a"), make_service("b"), make_service("c"))

    await make_gate(store, FakeTranslator(fail_titles={"B"})).translate_missing()

    assert CountingStore.writes == 1


def test_select_candidates__force_takes_everything():
    services = [
        ServiceRecord.model_validate(make_service("a", translations=full_translations())),
        ServiceRecord.model_validate(make_service("b")),
    ]

    assert [s.id for s in select_candidates(services, force=True)] == ["a", "b"]
    assert [s.id for s in select_candidates(services, force=False)] == ["b"]


async def test_translate_missing__refuses_to_overwrite_invalid_primary(store, translator):
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_text(json.dumps([{"hero": {"title": "No id"}}]), encoding="utf-8")
    before = store.path.read_bytes()

    with pytest.raises(StorageReadError) as exc_info:
        await make_gate(store, translator).translate_missing()

    assert exc_info.value.status_code == 500
    assert translator.calls == []
    assert store.path.read_bytes() == before


async def test_translate_missing__store_io_runs_off_the_event_loop(settings, translator):
    class ThreadRecordingStore(ServiceRecordStore):
        threads = []

        def read_with_outcome(self, seed_write=True):
            ThreadRecordingStore.threads.append(threading.get_ident())
            return super().read_with_outcome(seed_write=seed_write)

        def write(self, services):
            ThreadRecordingStore.threads.append(threading.get_ident())
            super().write(services)

    seed_store(ServiceRecordStore(settings), make_service("a"))

    await make_gate(ThreadRecordingStore(settings), translator).translate_missing()

    assert len(ThreadRecordingStore.threads) == 2
    assert threading.get_ident() not in ThreadRecordingStore.threads
