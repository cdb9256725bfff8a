"""
Effective exercise list for an assigned program.

The template (ProgramItems in stored order) is merged with the sparse
per-client ClientProgramItem records:

* a record for a template exercise overrides fields and/or position,
* ``is_added`` records inject exercises the template does not have,
* ``is_removed`` records hide the exercise but stay in the database so the
  item can be put back.

Field values resolve override -> program item -> exercise default. Position
resolves to the record's explicit ``order`` when set, otherwise the template
order; added items without an order go after the whole template.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from coachhub.models import ClientProgram, ClientProgramItem, Exercise, ProgramItem, Section

NUMERIC_FIELDS = ("sets", "reps", "hold_seconds", "duration_minutes", "rest_seconds")
DETAIL_FIELDS = ("weight_per_set", "intensity", "notes")
OVERRIDE_FIELDS = NUMERIC_FIELDS + DETAIL_FIELDS


@dataclass
class EffectiveItem:
    exercise_id: int
    exercise_name: str
    section: Section
    order: int
    source: str  # "template" or "added"
    customized: bool = False
    program_item_id: Optional[int] = None
    custom_item_id: Optional[int] = None
    position: int = 0
    sets: Optional[int] = None
    reps: Optional[int] = None
    hold_seconds: Optional[int] = None
    duration_minutes: Optional[int] = None
    rest_seconds: Optional[int] = None
    weight_per_set: Optional[list[float]] = None
    intensity: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class EffectiveProgram:
    client_program_id: int
    program_id: int
    program_name: str
    items: list[EffectiveItem] = field(default_factory=list)
    removed: list[EffectiveItem] = field(default_factory=list)


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def has_overrides(record: ClientProgramItem) -> bool:
    return any(getattr(record, f) is not None for f in OVERRIDE_FIELDS)


def is_noop(record: ClientProgramItem, template_order: int | None) -> bool:
    """A record that changes nothing relative to the template; safe to drop."""
    if record.is_removed or record.is_added or record.section is not None or has_overrides(record):
        return False
    return record.order is None or record.order == template_order


def _resolve_fields(
    exercise: Exercise,
    program_item: ProgramItem | None,
    record: ClientProgramItem | None,
) -> dict[str, Any]:
    values = {}
    for name in NUMERIC_FIELDS:
        values[name] = _first(
            getattr(record, name, None),
            getattr(program_item, name, None),
            getattr(exercise, name),
        )
    for name in DETAIL_FIELDS:
        values[name] = _first(getattr(record, name, None), getattr(program_item, name, None))
    return values


def resolve(client_program: ClientProgram) -> EffectiveProgram:
    program = client_program.program
    template = sorted(program.items, key=lambda pi: (pi.order, pi.id))
    records = {r.exercise_id: r for r in client_program.custom_items}

    result = EffectiveProgram(
        client_program_id=client_program.id,
        program_id=program.id,
        program_name=program.name,
    )
    keyed: list[tuple[tuple[int, int, int], EffectiveItem, bool]] = []

    for pos, pi in enumerate(template):
        rec = records.pop(pi.exercise_id, None)
        order = rec.order if rec is not None and rec.order is not None else pi.order
        item = EffectiveItem(
            exercise_id=pi.exercise_id,
            exercise_name=pi.exercise.name,
            section=rec.section if rec is not None and rec.section is not None else pi.section,
            order=order,
            source="template",
            customized=rec is not None and not is_noop(rec, pi.order),
            program_item_id=pi.id,
            custom_item_id=rec.id if rec is not None else None,
            **_resolve_fields(pi.exercise, pi, rec),
        )
        keyed.append(((order, 0, pos), item, rec is not None and rec.is_removed))

    # Records left over either inject exercises or point at exercises that have
    # since left the template; the latter are ignored.
    next_order = max((pi.order for pi in template), default=-1) + 1
    added = sorted((r for r in records.values() if r.is_added), key=lambda r: (r.id or 0))
    for rec in added:
        if rec.order is None:
            order = next_order
            next_order += 1
        else:
            order = rec.order
        item = EffectiveItem(
            exercise_id=rec.exercise_id,
            exercise_name=rec.exercise.name,
            section=rec.section or Section.CORE,
            order=order,
            source="added",
            customized=True,
            custom_item_id=rec.id,
            **_resolve_fields(rec.exercise, None, rec),
        )
        keyed.append(((order, 1, rec.id or 0), item, rec.is_removed))

    keyed.sort(key=lambda entry: entry[0])
    for _key, item, removed in keyed:
        if removed:
            result.removed.append(item)
        else:
            item.position = len(result.items) + 1
            result.items.append(item)
    return result
