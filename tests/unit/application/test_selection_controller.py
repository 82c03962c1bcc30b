"""Tests for SelectionController (toggle, close, detail fetch)."""

from __future__ import annotations

import asyncio

import pytest

from rateit.application.use_cases.selection_controller import (
    SelectionController,
    SelectionState,
)
from rateit.domain.entities import (
    CatalogNotFound,
    CatalogTransportError,
    Failure,
    FailureKind,
    Loading,
    Success,
)


@pytest.fixture()
def controller(catalog) -> SelectionController:
    return SelectionController(catalog)


async def _settle() -> None:
    for _ in range(3):
        await asyncio.sleep(0)


class TestToggle:
    @pytest.mark.asyncio()
    async def test_select_starts_loading(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        task = controller.toggle_select("tt1")

        assert controller.selected_id == "tt1"
        assert controller.state.detail == Loading(key="tt1")

        catalog.resolve_detail("tt1", detail_factory("tt1", "Heat"))
        await task

        assert isinstance(controller.state.detail, Success)
        assert controller.state.movie is not None
        assert controller.state.movie.title == "Heat"

    @pytest.mark.asyncio()
    async def test_toggle_twice_clears(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await controller.toggle_select("tt1")

        assert controller.toggle_select("tt1") is None
        assert controller.selected_id is None
        assert controller.state == SelectionState()

    @pytest.mark.asyncio()
    async def test_toggle_twice_while_loading_clears(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        task = controller.toggle_select("tt1")
        await _settle()
        controller.toggle_select("tt1")

        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await task

        assert controller.selected_id is None
        assert controller.state.movie is None

    @pytest.mark.asyncio()
    async def test_every_selection_fetches_fresh(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await controller.toggle_select("tt1")
        controller.close()

        # Second fetch for the same ID goes to the catalog again.
        catalog._pending.pop("detail:tt1")
        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await controller.toggle_select("tt1")

        assert [movie_id for movie_id, _ in catalog.detail_calls] == ["tt1", "tt1"]


class TestSupersession:
    @pytest.mark.asyncio()
    async def test_stale_detail_never_overwrites_newer_selection(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        old = controller.toggle_select("tt0")
        new = controller.toggle_select("tt1")
        await _settle()

        catalog.resolve_detail("tt1", detail_factory("tt1", "New"))
        await new
        catalog.resolve_detail("tt0", detail_factory("tt0", "Old"))
        await old

        assert controller.selected_id == "tt1"
        assert controller.state.movie is not None
        assert controller.state.movie.id == "tt1"

    @pytest.mark.asyncio()
    async def test_stale_detail_arriving_first_is_dropped(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        old = controller.toggle_select("tt0")
        new = controller.toggle_select("tt1")
        await _settle()

        catalog.resolve_detail("tt0", detail_factory("tt0", "Old"))
        await old

        assert controller.state.detail == Loading(key="tt1")

        catalog.resolve_detail("tt1", detail_factory("tt1", "New"))
        await new
        assert controller.state.movie.title == "New"

    @pytest.mark.asyncio()
    async def test_previous_fetch_token_cancelled(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        old = controller.toggle_select("tt0")
        new = controller.toggle_select("tt1")
        await _settle()

        (_, old_token), (_, new_token) = catalog.detail_calls
        assert old_token.cancelled
        assert not new_token.cancelled

        catalog.resolve_detail("tt0", detail_factory("tt0"))
        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await asyncio.gather(old, new)

    @pytest.mark.asyncio()
    async def test_close_drops_pending_detail(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        task = controller.toggle_select("tt1")
        await _settle()
        controller.close()

        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await task

        assert controller.state == SelectionState()


class TestFailures:
    @pytest.mark.asyncio()
    async def test_not_found(self, controller: SelectionController, catalog) -> None:
        catalog.fail_detail("tt404", CatalogNotFound("Incorrect IMDb ID."))
        await controller.toggle_select("tt404")

        assert controller.state.detail == Failure(
            FailureKind.NOT_FOUND, "Incorrect IMDb ID."
        )
        assert controller.state.error == "Incorrect IMDb ID."
        assert controller.selected_id == "tt404"

    @pytest.mark.asyncio()
    async def test_transport_error(self, controller: SelectionController, catalog) -> None:
        catalog.fail_detail("tt1", CatalogTransportError("timeout"))
        await controller.toggle_select("tt1")

        assert controller.state.detail == Failure(FailureKind.TRANSPORT, "timeout")
        assert not controller.state.is_loading


class TestExternalSignals:
    @pytest.mark.asyncio()
    async def test_escape_closes(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await controller.toggle_select("tt1")

        assert controller.handle_key("Escape") is True
        assert controller.selected_id is None

    @pytest.mark.asyncio()
    async def test_other_keys_ignored(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await controller.toggle_select("tt1")

        assert controller.handle_key("Enter") is False
        assert controller.selected_id == "tt1"

    def test_escape_without_selection_not_consumed(
        self, controller: SelectionController
    ) -> None:
        assert controller.handle_key("Escape") is False

    @pytest.mark.asyncio()
    async def test_search_started_closes(
        self, controller: SelectionController, catalog, detail_factory
    ) -> None:
        catalog.resolve_detail("tt1", detail_factory("tt1"))
        await controller.toggle_select("tt1")

        controller.on_search_started("Titanic")

        assert controller.selected_id is None

    def test_close_when_empty_does_not_notify(
        self, controller: SelectionController
    ) -> None:
        seen: list[SelectionState] = []
        controller.changed.connect(seen.append)

        controller.close()

        assert seen == []
