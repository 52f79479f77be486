"""Form: owns one form's state and exposes it to the rendering layer.

The form holds the current ``FormState`` and is its only mutator. Each
method runs a transition from ``wren.forms.state`` and swaps the result
in; the ``view`` is recomputed from whatever state is current::

    from wren import Form
    from wren.validation import required, min_length

    form = Form({
        "name": {"label": "Name", "rules": [required()(), min_length(2)()]},
        "bio": {"label": "Bio"},
    })

    form.on_change({"name": "name", "type": "text", "value": "A"})
    form.view["name"].error   # 'Name must be at least 2 characters.'

    try:
        await form.validate()
    except FormInvalid as e:
        show(e.view.errors)
    else:
        body = await form.get_form_data_as_json(["bio"])

A renderer that wants to re-render on change subscribes to the form, or
takes the whole capability set at once with ``binding()``.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from wren.config import FormConfig
from wren.errors import FormInvalid
from wren.forms.compare import compare_arrays
from wren.forms.events import ChangeEvent, event_from_mapping
from wren.forms.payload import FormPayload
from wren.forms.serialize import serialize_payload, serialize_structured
from wren.forms.state import (
    FieldDefinition,
    FormState,
    apply_change,
    initial_state,
    mark_dirty,
    update,
)
from wren.validation.result import FormView
from wren.validation.validator import validate_form

logger = logging.getLogger("wren.forms")

Listener: TypeAlias = Callable[[FormView], None]


@dataclass(frozen=True, slots=True)
class FormBinding:
    """Everything a renderer needs from a form, captured at one moment."""

    view: FormView
    on_change: Callable[[ChangeEvent | Mapping[str, Any]], FormView]
    on_reset: Callable[[], FormView]
    validate: Callable[[bool], Awaitable[FormView]]
    get_form_data: Callable[[Iterable[str] | None], Awaitable[FormPayload]]
    get_form_data_as_json: Callable[[Iterable[str] | None], Awaitable[str]]


def should_update(
    next_values: Mapping[str, Any],
    prev_values: Mapping[str, Any],
    state: FormState,
) -> bool:
    """True if any known field's value differs between two value sets.

    List values are compared without regard to order.
    """
    for name, next_value in next_values.items():
        if name not in state:
            continue
        prev_value = prev_values.get(name)
        if isinstance(next_value, (list, tuple)) and isinstance(prev_value, (list, tuple)):
            if not compare_arrays(next_value, prev_value):
                return True
        elif next_value != prev_value:
            return True
    return False


class Form:
    """A form instance: state owner, transition runner and view source.

    Thread-safe: state replacement happens under a lock, and listeners
    are called outside it.
    """

    __slots__ = (
        "_config",
        "_initial",
        "_listeners",
        "_lock",
        "_state",
        "_synced",
        "_view",
    )

    def __init__(
        self,
        fields: Mapping[str, FieldDefinition | Mapping[str, Any] | None],
        *,
        config: FormConfig | None = None,
    ) -> None:
        self._config = config or FormConfig()
        self._initial = initial_state(fields, self._config)
        self._state = self._initial
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._synced: dict[str, Any] = {}
        self._view: tuple[FormState, FormView] | None = None

    def __repr__(self) -> str:
        return f"Form({self._state!r})"

    # -- State and view --

    @property
    def config(self) -> FormConfig:
        return self._config

    @property
    def state(self) -> FormState:
        """The current state snapshot."""
        return self._state

    @property
    def view(self) -> FormView:
        """Validation view for the current state, computed once per state."""
        state = self._state
        cached = self._view
        if cached is not None and cached[0] is state:
            return cached[1]
        view = validate_form(state)
        self._view = (state, view)
        return view

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the new view after every state change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def binding(self) -> FormBinding:
        """The capability set handed to a renderer."""
        return FormBinding(
            view=self.view,
            on_change=self.on_change,
            on_reset=self.on_reset,
            validate=self.validate,
            get_form_data=self.get_form_data,
            get_form_data_as_json=self.get_form_data_as_json,
        )

    def _commit(self, transition: Callable[[FormState], FormState]) -> FormView:
        with self._lock:
            current = self._state
            new = transition(current)
            changed = new is not current
            if changed:
                self._state = new
        view = self.view
        if changed:
            for listener in list(self._listeners):
                listener(view)
        return view

    # -- Transitions --

    def update(self, values: Mapping[str, Any]) -> FormView:
        """Set field values by name. Unknown names are ignored."""
        return self._commit(lambda state: update(state, values))

    def reset(self) -> FormView:
        """Restore every field to its construction-time value and clean flag."""

        def restore(state: FormState) -> FormState:
            if all(state[name] is field for name, field in self._initial.items()):
                return state
            return FormState(self._initial, state.version + 1)

        return self._commit(restore)

    def on_change(self, event: ChangeEvent | Mapping[str, Any]) -> FormView:
        """Apply an input change event (typed or canonical dict shape)."""
        if isinstance(event, Mapping):
            event = event_from_mapping(event)
        return self._commit(lambda state: apply_change(state, event))

    def on_reset(self) -> FormView:
        """Reset handler for the rendering layer."""
        return self.reset()

    def sync(self, values: Mapping[str, Any]) -> FormView:
        """Apply externally supplied values when they change.

        An empty mapping resets the form. Otherwise the values are
        applied only if they differ from the previously synced ones.
        """
        previous, self._synced = self._synced, dict(values)
        if not values:
            return self.reset()
        if should_update(values, previous, self._state):
            return self.update(values)
        return self.view

    async def validate(self, will_submit: bool = False) -> FormView:
        """Check the form can be submitted.

        Returns the view when it can. Otherwise every pending field is
        made eligible for validation (once) and ``FormInvalid`` is
        raised with the recomputed view. Passing ``will_submit=True``
        skips all checks.

        Raises:
            FormInvalid: If the form cannot be submitted yet.
        """
        if will_submit:
            return self.view

        view = self.view
        if view.will_submit:
            return view

        view = self._commit(mark_dirty)
        logger.debug("validate: form not submittable (%d field(s) with errors)", len(view.errors))
        raise FormInvalid(view)

    # -- Serialization --

    async def get_form_data(self, blacklist: Iterable[str] | None = None) -> FormPayload:
        """Current values as a multipart-ready ``FormPayload``."""
        return await serialize_payload(self._state, blacklist, config=self._config)

    async def get_form_data_as_json(self, blacklist: Iterable[str] | None = None) -> str:
        """Current values as a JSON object string, files as data URLs.

        Raises:
            SerializationError: If a file cannot be read.
        """
        data = await serialize_structured(self._state, blacklist, config=self._config)
        return json.dumps(data, separators=self._config.json_separators)
