from __future__ import annotations

import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Protocol

from ..models import Material, Project
from .formatting import format_rupiah
from .record_store import StoreSnapshot

ADVISORY_ERROR_TEXT = "An error occurred while contacting the AI service. Please try again later."
ADVISORY_EMPTY_TEXT = "Sorry, an analysis could not be generated right now."
ADVISORY_DISABLED_TEXT = "The AI consultant is not configured. Please try again later."

STATUS_PENDING = "pending"
STATUS_RESOLVED = "resolved"
STATUS_FAILED = "failed"

_PROMPT_INSTRUCTIONS = [
    "You are an expert senior construction management consultant.",
    "Give a short, sharp and professional analysis in the register of a large-company report.",
    "When advice is requested, focus on cost efficiency, risk management or scheduling.",
    "Write clean plain text without heavy bold or italic markdown.",
]


class TextGenerator(Protocol):
    def generate(self, *, prompt: str, max_output_tokens: int = ...) -> Any: ...


def _format_quantity(value: float) -> str:
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)


def summarize_projects(projects: Iterable[Project]) -> list[str]:
    return [
        f"- {project.name} ({project.status.value}): Budget {format_rupiah(project.budget)}, "
        f"Spent {format_rupiah(project.spent)}, Progress {project.progress}%"
        for project in projects
    ]


def summarize_materials(materials: Iterable[Material]) -> list[str]:
    return [
        f"- {material.name}: Stock {_format_quantity(material.quantity)} {material.unit} "
        f"@ {format_rupiah(material.unit_price)}"
        for material in materials
    ]


def build_advisory_prompt(
    projects: Iterable[Project],
    materials: Iterable[Material],
    query: str,
) -> str:
    project_lines = summarize_projects(projects)
    material_lines = summarize_materials(materials)

    lines: list[str] = [_PROMPT_INSTRUCTIONS[0], ""]
    lines.append("Current project data:")
    lines.extend(project_lines or ["(no projects)"])
    lines.append("")
    lines.append("Current material data:")
    lines.extend(material_lines or ["(no materials)"])
    lines.append("")
    lines.append(f'User question: "{(query or "").strip()}"')
    lines.append("")
    lines.extend(_PROMPT_INSTRUCTIONS[1:])
    return "\n".join(lines).strip() + "\n"


@dataclass(frozen=True)
class AdvisoryOutcome:
    text: str
    ok: bool
    usage: dict[str, Any] = field(default_factory=dict)


class AdvisoryClient:
    """Boundary around the remote text generator.

    Never raises: any failure of the remote call turns into a fixed fallback
    text, and nothing is retried.
    """

    def __init__(self, generator: TextGenerator | None = None, *, max_output_tokens: int = 700):
        self.generator = generator
        self.max_output_tokens = int(max_output_tokens)

    @property
    def enabled(self) -> bool:
        return self.generator is not None

    def consult(
        self,
        projects: Iterable[Project],
        materials: Iterable[Material],
        query: str,
    ) -> AdvisoryOutcome:
        if self.generator is None:
            return AdvisoryOutcome(text=ADVISORY_DISABLED_TEXT, ok=False)

        prompt = build_advisory_prompt(projects, materials, query)
        try:
            result = self.generator.generate(prompt=prompt, max_output_tokens=self.max_output_tokens)
        except Exception as exc:  # noqa: BLE001
            print(f"[advisory] generation failed: {type(exc).__name__}: {exc}")
            return AdvisoryOutcome(text=ADVISORY_ERROR_TEXT, ok=False)

        text = str(getattr(result, "text", "") or "").strip()
        usage = getattr(result, "usage", None)
        usage = usage if isinstance(usage, dict) else {}
        if not text:
            return AdvisoryOutcome(text=ADVISORY_EMPTY_TEXT, ok=True, usage=usage)
        return AdvisoryOutcome(text=text, ok=True, usage=usage)

    def advise(self, context: StoreSnapshot, query: str) -> str:
        return self.consult(context.projects, context.materials, query).text


@dataclass(frozen=True)
class AdvisoryRequest:
    id: str
    query: str
    status: str = STATUS_PENDING
    text: str = ""

    @property
    def finished(self) -> bool:
        return self.status != STATUS_PENDING

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "query": self.query, "status": self.status, "text": self.text}


class AdvisoryRequests:
    """Registry of fire-and-forget advisory calls.

    A request starts `pending` and ends `resolved` or `failed`; there is no
    cancellation. Callers that lose interest simply stop polling.
    """

    def __init__(self, *, max_items: int = 64):
        self.max_items = max(1, int(max_items))
        self._lock = threading.Lock()
        self._requests: OrderedDict[str, AdvisoryRequest] = OrderedDict()
        self._contexts: dict[str, StoreSnapshot] = {}

    def submit(self, context: StoreSnapshot, query: str) -> AdvisoryRequest:
        request = AdvisoryRequest(id=uuid.uuid4().hex, query=str(query or ""))
        with self._lock:
            self._requests[request.id] = request
            self._contexts[request.id] = context
            self._evict_finished()
        return request

    def get(self, request_id: str) -> AdvisoryRequest | None:
        with self._lock:
            return self._requests.get(request_id)

    def run(self, request_id: str, client: AdvisoryClient) -> AdvisoryRequest | None:
        with self._lock:
            request = self._requests.get(request_id)
            context = self._contexts.pop(request_id, None)
        if request is None or context is None:
            return request

        outcome = client.consult(context.projects, context.materials, request.query)
        finished = replace(
            request,
            status=STATUS_RESOLVED if outcome.ok else STATUS_FAILED,
            text=outcome.text,
        )
        with self._lock:
            if request_id in self._requests:
                self._requests[request_id] = finished
        return finished

    def _evict_finished(self) -> None:
        overflow = len(self._requests) - self.max_items
        if overflow <= 0:
            return
        for request_id in [key for key, item in self._requests.items() if item.finished][:overflow]:
            self._requests.pop(request_id, None)
