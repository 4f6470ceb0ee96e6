"""UI tests driving SqlTermApp through Textual's pilot."""

from __future__ import annotations

from textual.widgets import ContentSwitcher, Static

from sqlterm.app import SqlTermApp
from sqlterm.core.state import InputMode, Tab


async def wait_for_completion(app: SqlTermApp, pilot, attempts: int = 100) -> None:
    for _ in range(attempts):
        query = app.state.explore.query
        if query is not None and query.completed:
            return
        await pilot.pause(0.05)


class TestSqlTermApp:
    """End-to-end key handling in the running app."""

    async def test_run_query_from_editor(self, config):
        app = SqlTermApp(config=config)
        async with app.run_test() as pilot:
            await pilot.press("e", *"select", "space", "4", "0", "space", "plus", "space", "2", "f5")
            assert app.state.explore.mode is InputMode.EDITABLE

            await wait_for_completion(app, pilot)

            query = app.state.explore.query
            assert query.completed
            assert query.error is None
            assert query.rows == [(42,)]
            assert len(app.state.session.history) == 1

    async def test_query_error_is_shown(self, config):
        app = SqlTermApp(config=config)
        async with app.run_test() as pilot:
            await pilot.press("e", *"selec", "space", "1", "escape", "enter")
            await wait_for_completion(app, pilot)
            await pilot.pause()

            assert app.state.explore.query.error is not None
            assert app.query_one("#results-error", Static).display

    async def test_switch_tabs(self, config):
        app = SqlTermApp(config=config)
        async with app.run_test() as pilot:
            await pilot.press("h")
            assert app.state.selected_tab is Tab.HISTORY
            assert app.query_one("#panes", ContentSwitcher).current == "history-pane"

            await pilot.press("x")
            assert app.query_one("#panes", ContentSwitcher).current == "context-pane"

    async def test_q_exits(self, config):
        app = SqlTermApp(config=config)
        async with app.run_test() as pilot:
            await pilot.press("q")
        assert app.state.should_quit

    async def test_startup_ddl(self, config, tmp_path):
        ddl = tmp_path / "ddl.sql"
        ddl.write_text("CREATE TABLE seeded AS SELECT 7 AS v;", encoding="utf-8")
        config.execution.ddl_path = str(ddl)

        app = SqlTermApp(config=config)
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.press("e", *"select", "space", "v", "space", *"from", "space", *"seeded", "f5")
            await wait_for_completion(app, pilot)

            assert app.state.explore.query.rows == [(7,)]
