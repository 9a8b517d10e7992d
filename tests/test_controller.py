"""Tests for the application controller (guest and backed modes)."""

from unittest.mock import MagicMock

import pytest

from tradeflow.controller import AI_ERROR, LOGIN_ERROR, SAVE_ERROR, AppController
from tradeflow.models import Identity, Month, Strategy, Trade
from tradeflow.navigation import DASHBOARD, month_view, strategy_view
from tradeflow.preferences import Preferences, load_preferences, save_preferences
from tradeflow.session import SIGNED_IN, SIGNED_OUT, SessionError
from tradeflow.store import StoreError
from tradeflow.trade_updates import SetPnlDollar, SetResult, SetRR

USER = Identity(id="u1", name="Jane", email="jane@example.com")


def guest_controller(**kwargs) -> AppController:
    controller = AppController(**kwargs)
    controller.boot()
    return controller


def backed_tree() -> list[Strategy]:
    return [
        Strategy(
            id="s1",
            name="Silver Bullet",
            months=[
                Month(
                    id="m1",
                    name="January 2025",
                    trades=[
                        Trade(id="t1", date="3", pair="GBPUSD", direction="Long", rr=2.0, result="Win",
                              pnl_dollar=200.0, pnl_percent=2.0),
                    ],
                )
            ],
        )
    ]


class TestGuestMode:
    def test_boot_without_backend_enters_guest(self):
        controller = guest_controller()
        assert controller.state.is_guest
        assert controller.state.user is None
        assert [s.name for s in controller.state.strategies] == ["ICT Silver Bullet", "London Breakout"]
        assert not controller.state.loading

    def test_sample_stats(self):
        controller = guest_controller()
        stats = controller.month_stats("s1", "m1")
        assert stats.total_trades == 6
        assert stats.win_rate == 50
        assert stats.net_pnl == pytest.approx(5.5)

    def test_strategy_month_trade_scenario(self):
        controller = guest_controller(sample_loader=list)
        strategy = controller.add_strategy("London Open")
        month = controller.add_month(strategy.id, "March 2025")

        trade = controller.add_trade(strategy.id, month.id)
        assert trade.result == "BE"
        assert trade.pair == "EURUSD"
        assert trade.pnl_percent == 0
        updated = controller.update_trade(strategy.id, month.id, trade.id, SetResult("Win"))
        assert updated.pnl_percent == 2.0

        second = controller.add_trade(strategy.id, month.id)
        controller.update_trade(strategy.id, month.id, second.id, SetResult("Loss"))

        third = controller.add_trade(strategy.id, month.id)
        controller.update_trade(strategy.id, month.id, third.id, SetRR(1.0))
        controller.update_trade(strategy.id, month.id, third.id, SetResult("Win"))

        stats = controller.month_stats(strategy.id, month.id)
        assert stats.win_rate == 67
        assert stats.net_pnl == pytest.approx(2.0)
        assert [(p.index, p.equity) for p in stats.equity_curve] == [(0, 0), (1, 2), (2, 1), (3, 2)]

    def test_local_ids_are_unique(self):
        controller = guest_controller(sample_loader=list)
        strategy = controller.add_strategy("A")
        month = controller.add_month(strategy.id, "May 2025")
        ids = {controller.add_trade(strategy.id, month.id).id for _ in range(20)}
        assert len(ids) == 20

    def test_new_trade_copies_first_pair(self):
        controller = guest_controller()
        trade = controller.add_trade("s2", "m3")
        assert trade.pair == "GBPJPY"
        assert controller.find_month("s2", "m3").trades[-1] is trade

    def test_blank_names_are_ignored(self):
        controller = guest_controller(sample_loader=list)
        assert controller.add_strategy("   ") is None
        assert controller.state.strategies == []

    def test_delete_strategy_cascades_and_resets_view(self):
        controller = guest_controller()
        controller.navigate(month_view("s1", "m1"))
        assert controller.delete_strategy("s1")
        assert controller.find_strategy("s1") is None
        assert controller.find_month("s1", "m1") is None
        assert controller.state.view == DASHBOARD

    def test_delete_month_falls_back_to_strategy(self):
        controller = guest_controller()
        controller.navigate(month_view("s1", "m2"))
        assert controller.delete_month("s1", "m2")
        assert [m.id for m in controller.find_strategy("s1").months] == ["m1"]
        assert controller.state.view == strategy_view("s1")

    def test_delete_trade(self):
        controller = guest_controller()
        assert controller.delete_trade("s1", "m1", "t2")
        assert controller.find_trade("s1", "m1", "t2") is None
        assert controller.month_stats("s1", "m1").total_trades == 5

    def test_missing_targets_are_silent(self):
        controller = guest_controller()
        before = controller.month_stats("s1", "m1")
        assert controller.update_trade("s1", "m1", "nope", SetResult("Win")) is None
        assert controller.delete_trade("s1", "nope", "t1") is False
        assert controller.add_month("nope", "May 2025") is None
        assert controller.update_month_note("s1", "nope", "x") is False
        assert controller.month_stats("s1", "m1") == before
        assert controller.state.notice is None

    def test_notes(self):
        controller = guest_controller()
        assert controller.update_strategy_note("s2", "Only after 8am")
        assert controller.update_month_note("s2", "m3", "Too early")
        assert controller.find_strategy("s2").note == "Only after 8am"
        assert controller.find_month("s2", "m3").note == "Too early"

    def test_store_never_called_in_guest_mode(self):
        store = MagicMock()
        controller = AppController(store=store, session=None)
        controller.boot()
        controller.add_strategy("X")
        controller.delete_trade("s1", "m1", "t1")
        assert store.method_calls == []

    def test_missing_month_stats_are_empty(self):
        controller = guest_controller()
        stats = controller.month_stats("s1", "gone")
        assert stats.total_trades == 0
        assert stats.net_pnl == 0
        assert len(stats.equity_curve) == 1

    def test_sample_reloaded_fresh(self):
        first = guest_controller()
        first.delete_strategy("s1")
        second = guest_controller()
        assert second.find_strategy("s1") is not None


class TestBackedMode:
    def setup_method(self):
        self.store = MagicMock()
        self.store.fetch_all.return_value = backed_tree()
        self.session = MagicMock()
        self.session.current_identity.return_value = USER
        self.controller = AppController(store=self.store, session=self.session)
        self.controller.boot()

    def test_boot_restores_session(self):
        assert self.controller.state.user == USER
        assert not self.controller.state.is_guest
        assert self.controller.state.phase in ("authenticated", "onboarding")
        assert self.controller.find_strategy("s1") is not None
        self.session.subscribe.assert_called_once_with(self.controller.handle_auth_event)

    def test_add_strategy_adopts_store_id(self):
        self.store.create_strategy.return_value = Strategy(id="uuid-9", name="NY Open")
        strategy = self.controller.add_strategy("NY Open")
        self.store.create_strategy.assert_called_once_with("u1", "NY Open")
        assert strategy.id == "uuid-9"
        assert self.controller.find_strategy("uuid-9") is strategy

    def test_add_trade_sends_defaults(self):
        self.store.create_trade.return_value = Trade(
            id="uuid-t", date="1", pair="GBPUSD", direction="Long", rr=2.0, result="BE",
            pnl_dollar=0.0, pnl_percent=0.0,
        )
        trade = self.controller.add_trade("s1", "m1")
        month_id, fields = self.store.create_trade.call_args[0]
        assert month_id == "m1"
        assert fields["pair"] == "GBPUSD"
        assert fields["result"] == "BE"
        assert trade.id == "uuid-t"

    def test_store_failure_leaves_tree_unchanged(self):
        self.store.create_month.side_effect = StoreError("create_month failed")
        assert self.controller.add_month("s1", "February 2025") is None
        assert [m.id for m in self.controller.find_strategy("s1").months] == ["m1"]
        assert self.controller.state.notice == SAVE_ERROR

    def test_failed_delete_keeps_trade(self):
        self.store.delete_trade.side_effect = StoreError("delete_trade failed")
        assert self.controller.delete_trade("s1", "m1", "t1") is False
        assert self.controller.find_trade("s1", "m1", "t1") is not None

    def test_update_trade_sends_derived_fields(self):
        updated = self.controller.update_trade("s1", "m1", "t1", SetResult("Loss"))
        self.store.update_trade.assert_called_once_with(
            "t1", {"result": "Loss", "pnl_percent": -1.0, "pnl_dollar": -200.0}
        )
        assert updated.pnl_percent == -1.0
        assert self.controller.find_trade("s1", "m1", "t1").result == "Loss"

    def test_failed_update_keeps_trade(self):
        self.store.update_trade.side_effect = StoreError("update_trade failed")
        assert self.controller.update_trade("s1", "m1", "t1", SetPnlDollar(5.0)) is None
        assert self.controller.find_trade("s1", "m1", "t1").pnl_dollar == 200.0
        assert self.controller.pop_notice() == SAVE_ERROR
        assert self.controller.state.notice is None

    def test_delete_strategy_calls_store(self):
        assert self.controller.delete_strategy("s1")
        self.store.delete_strategy.assert_called_once_with("s1")
        assert self.controller.state.strategies == []

    def test_data_load_failure_yields_empty_tree(self):
        store = MagicMock()
        store.fetch_all.side_effect = StoreError("fetch_all failed")
        controller = AppController(store=store, session=self.session)
        controller.boot()
        assert controller.state.user == USER
        assert controller.state.strategies == []


class TestAuthTransitions:
    def setup_method(self):
        self.store = MagicMock()
        self.store.fetch_all.return_value = backed_tree()
        self.session = MagicMock()
        self.session.current_identity.return_value = None
        self.controller = AppController(store=self.store, session=self.session)
        self.controller.state.preferences.has_onboarded = True
        self.controller.boot()

    def test_boot_without_session_shows_login(self):
        assert self.controller.state.phase == "login"
        assert self.controller.state.strategies == []

    def test_signed_in_event_loads_tree(self):
        self.session.current_identity.return_value = USER
        self.controller.handle_auth_event(SIGNED_IN)
        assert self.controller.state.phase == "authenticated"
        assert self.controller.find_strategy("s1") is not None

    def test_repeated_signed_in_does_not_reload(self):
        self.session.current_identity.return_value = USER
        self.controller.handle_auth_event(SIGNED_IN)
        self.controller.handle_auth_event(SIGNED_IN)
        assert self.store.fetch_all.call_count == 1

    def test_signed_out_event_clears_everything(self):
        self.session.current_identity.return_value = USER
        self.controller.handle_auth_event(SIGNED_IN)
        self.controller.navigate(month_view("s1", "m1"))
        self.controller.handle_auth_event(SIGNED_OUT)
        assert self.controller.state.user is None
        assert self.controller.state.strategies == []
        assert self.controller.state.view == DASHBOARD
        assert self.controller.state.phase == "login"

    def test_begin_login_returns_url(self):
        self.session.begin_oauth_login.return_value = "https://accounts.google.com/o/oauth2"
        assert self.controller.begin_login("http://localhost:8501") == "https://accounts.google.com/o/oauth2"
        assert self.controller.state.logging_in

    def test_begin_login_failure_sets_notice(self):
        self.session.begin_oauth_login.side_effect = SessionError("provider disabled")
        assert self.controller.begin_login("http://localhost:8501") is None
        assert not self.controller.state.logging_in
        assert self.controller.state.notice == LOGIN_ERROR

    def test_complete_login(self):
        self.session.complete_oauth_login.return_value = USER
        assert self.controller.complete_login("code-1") == USER
        assert self.controller.state.phase == "authenticated"
        assert not self.controller.state.logging_in

    def test_complete_login_failure(self):
        self.session.complete_oauth_login.side_effect = SessionError("invalid grant")
        assert self.controller.complete_login("stale") is None
        assert self.controller.state.phase == "login"
        assert self.controller.state.notice == LOGIN_ERROR

    def test_logout(self):
        self.session.complete_oauth_login.return_value = USER
        self.controller.complete_login("code-1")
        self.controller.logout()
        self.session.end_session.assert_called_once()
        assert self.controller.state.user is None
        assert self.controller.state.strategies == []

    def test_logout_clears_locally_even_if_provider_fails(self):
        self.session.complete_oauth_login.return_value = USER
        self.controller.complete_login("code-1")
        self.session.end_session.side_effect = SessionError("network")
        self.controller.logout()
        assert self.controller.state.user is None
        assert self.controller.state.notice is not None

    def test_guest_allowed_before_sign_in(self):
        assert self.controller.continue_as_guest()
        assert self.controller.state.phase == "guest"
        assert self.controller.find_strategy("s1").name == "ICT Silver Bullet"

    def test_guest_refused_after_authentication(self):
        self.session.complete_oauth_login.return_value = USER
        self.controller.complete_login("code-1")
        self.controller.logout()
        assert not self.controller.continue_as_guest()
        assert self.controller.state.phase == "login"

    def test_guest_mutations_not_persisted_after_sign_in(self):
        self.controller.continue_as_guest()
        self.session.current_identity.return_value = USER
        self.controller.handle_auth_event(SIGNED_IN)
        assert not self.controller.state.is_guest
        assert [s.name for s in self.controller.state.strategies] == ["Silver Bullet"]

    def test_shutdown_unsubscribes(self):
        unsubscribe = self.session.subscribe.return_value
        self.controller.shutdown()
        unsubscribe.assert_called_once()

    def test_mutations_without_mode_are_noops(self):
        assert self.controller.add_strategy("X") is None
        self.store.create_strategy.assert_not_called()


class TestAnalysis:
    def setup_method(self):
        self.analyst = MagicMock()
        self.controller = guest_controller(analyst=self.analyst)

    def test_analysis_uses_language_preference(self):
        self.analyst.analyze.return_value = "Great discipline."
        self.controller.toggle_language()
        text = self.controller.analyze_month("s1", "m1")
        assert text == "Great discipline."
        month, win_rate, net_pnl = self.analyst.analyze.call_args[0]
        assert month.id == "m1"
        assert win_rate == 50
        assert net_pnl == pytest.approx(5.5)
        assert self.analyst.analyze.call_args[1]["language"] == "fa"
        assert self.controller.state.analysis_month_id == "m1"

    def test_missing_key_shows_error_text(self):
        self.analyst.analyze.return_value = None
        assert self.controller.analyze_month("s1", "m1") == AI_ERROR

    def test_provider_failure_shows_error_text(self):
        self.analyst.analyze.side_effect = RuntimeError("LLM call failed")
        assert self.controller.analyze_month("s1", "m1") == AI_ERROR

    def test_new_analysis_replaces_old(self):
        self.analyst.analyze.return_value = "first"
        self.controller.analyze_month("s1", "m1")
        self.analyst.analyze.return_value = "second"
        self.controller.analyze_month("s1", "m2")
        assert self.controller.state.analysis == "second"
        assert self.controller.state.analysis_month_id == "m2"

    def test_no_analyst_configured(self):
        controller = guest_controller()
        assert controller.analyze_month("s1", "m1") == AI_ERROR

    def test_deleting_analyzed_month_clears_analysis(self):
        self.analyst.analyze.return_value = "text"
        self.controller.analyze_month("s1", "m2")
        self.controller.delete_month("s1", "m2")
        assert self.controller.state.analysis is None


class TestPreferences:
    def backed(self, tmp_path, identity=None) -> AppController:
        session = MagicMock()
        session.current_identity.return_value = identity
        store = MagicMock()
        store.fetch_all.return_value = []
        controller = AppController(store=store, session=session, preferences_dir=tmp_path)
        controller.boot()
        return controller

    def test_sessions_do_not_share_preferences(self, tmp_path):
        first = guest_controller(preferences_dir=tmp_path)
        first.complete_onboarding()
        first.toggle_language()
        first.toggle_theme()

        second = guest_controller(preferences_dir=tmp_path)
        assert second.state.preferences == Preferences()
        assert second.state.phase == "onboarding"
        assert list(tmp_path.iterdir()) == []

    def test_signed_out_visitors_start_at_defaults(self, tmp_path):
        first = self.backed(tmp_path)
        first.complete_onboarding()
        first.toggle_language()
        second = self.backed(tmp_path)
        assert second.state.preferences == Preferences()

    def test_toggles_saved_for_signed_in_user(self, tmp_path):
        controller = self.backed(tmp_path, identity=USER)
        controller.toggle_theme()
        controller.toggle_language()

        prefs = load_preferences(tmp_path / "u1.yaml")
        assert prefs == Preferences(theme="light", language="fa", has_onboarded=True)

    def test_user_preferences_restored_on_sign_in(self, tmp_path):
        save_preferences(Preferences(theme="light", language="fa", has_onboarded=True), tmp_path / "u1.yaml")
        controller = self.backed(tmp_path, identity=USER)
        assert controller.state.preferences.theme == "light"
        assert controller.state.preferences.language == "fa"
        assert controller.state.phase == "authenticated"

    def test_other_users_file_not_used(self, tmp_path):
        save_preferences(Preferences(theme="light", language="fa", has_onboarded=True), tmp_path / "u1.yaml")
        other = Identity(id="u2", name="Sam", email="sam@example.com")
        controller = self.backed(tmp_path, identity=other)
        assert controller.state.preferences.language == "en"
        assert (tmp_path / "u2.yaml").exists()

    def test_onboarding_comes_first(self, tmp_path):
        controller = guest_controller(preferences_dir=tmp_path)
        assert controller.state.phase == "onboarding"
        controller.complete_onboarding()
        assert controller.state.phase == "guest"
