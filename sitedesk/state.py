from __future__ import annotations

from dataclasses import dataclass

from .config import Settings, settings
from .core.advisory import AdvisoryClient, AdvisoryRequests
from .core.gemini_client import GeminiClient
from .core.record_store import RecordStore
from .core.seed import demo_materials, demo_projects
from .core.view_controller import ViewController


@dataclass
class AppState:
    settings: Settings
    store: RecordStore
    controller: ViewController
    advisory_client: AdvisoryClient
    advisory_requests: AdvisoryRequests


def build_advisory_client(config: Settings) -> AdvisoryClient:
    if not config.can_use_ai:
        return AdvisoryClient(None, max_output_tokens=config.gemini_max_output_tokens)
    generator = GeminiClient(
        api_key=config.gemini_api_key,
        model=config.gemini_model,
        base_url=config.gemini_base_url,
        timeout_seconds=config.gemini_timeout_seconds,
    )
    return AdvisoryClient(generator, max_output_tokens=config.gemini_max_output_tokens)


def build_state(config: Settings, *, advisory_client: AdvisoryClient | None = None) -> AppState:
    store = RecordStore()
    if config.seed_demo_data:
        store.load(demo_projects(), demo_materials())
    requests = AdvisoryRequests()
    controller = ViewController(
        store,
        advisory_requests=requests,
        range_policy=config.numeric_range_policy,
    )
    return AppState(
        settings=config,
        store=store,
        controller=controller,
        advisory_client=advisory_client or build_advisory_client(config),
        advisory_requests=requests,
    )


app_state = build_state(settings)


def get_state() -> AppState:
    return app_state
