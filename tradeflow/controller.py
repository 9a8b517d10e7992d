"""Application controller: owns the journal tree and applies every user action.

Two modes:
  - guest:  tree seeded from bundled sample data, mutated in memory only
  - backed: every mutation goes to the store first and is applied locally
            only after the store confirms it, using the store's ids

Store failures never touch the tree; they leave a notice for the UI.

Preferences belong to the controller, so each browser session starts from
the defaults. Signed-in users get them saved to a file of their own.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import structlog

from .analyst import Analyst
from .models import Identity, Month, Strategy, Trade, new_trade_fields
from .navigation import DASHBOARD, View, resolve
from .preferences import Preferences, load_preferences, save_preferences
from .sample_data import load_sample_strategies
from .session import SIGNED_IN, SIGNED_OUT, SessionAdapter, SessionError
from .stats import MonthStats, compute_stats
from .store import StoreError, TradeStore
from .trade_updates import TradeUpdate, apply_update

logger = structlog.get_logger()

SAVE_ERROR = "Error saving data"
LOGIN_ERROR = "Could not start sign-in. Please try again."
LOGOUT_ERROR = "Could not sign out cleanly."
AI_ERROR = "Error connecting to AI Coach. Please check API Key."


@dataclass
class AppState:
    strategies: list[Strategy] = field(default_factory=list)
    preferences: Preferences = field(default_factory=Preferences)
    user: Identity | None = None
    is_guest: bool = False
    view: View = DASHBOARD
    loading: bool = False
    logging_in: bool = False
    notice: str | None = None
    analysis: str | None = None
    analysis_month_id: str | None = None

    @property
    def phase(self) -> str:
        """onboarding | login | guest | authenticated"""
        if not self.preferences.has_onboarded:
            return "onboarding"
        if self.user is not None:
            return "authenticated"
        if self.is_guest:
            return "guest"
        return "login"


class AppController:
    def __init__(
        self,
        store: TradeStore | None = None,
        session: SessionAdapter | None = None,
        analyst: Analyst | None = None,
        preferences_dir: Path | str | None = None,
        sample_loader: Callable[[], list[Strategy]] = load_sample_strategies,
    ):
        self.store = store
        self.session = session
        self.analyst = analyst
        self.preferences_dir = Path(preferences_dir) if preferences_dir else None
        self._sample_loader = sample_loader
        self._unsubscribe: Callable[[], None] | None = None
        self._was_authenticated = False
        self._last_local_id = 0

        self.state = AppState()

    # --- Lifecycle ---

    @property
    def backend_available(self) -> bool:
        return self.store is not None and self.session is not None

    def boot(self) -> None:
        """Initial load: guest fallback without a backend, else restore the session."""
        self.state.loading = True
        try:
            if not self.backend_available:
                logger.warning("backend_not_configured", fallback="guest")
                self._enter_guest()
                return

            try:
                identity = self.session.current_identity()
            except SessionError:
                identity = None
            if identity is not None:
                self._sign_in(identity)

            self._unsubscribe = self.session.subscribe(self.handle_auth_event)
        finally:
            self.state.loading = False

    def shutdown(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def complete_onboarding(self) -> None:
        self.state.preferences.has_onboarded = True
        self._save_preferences()

    def continue_as_guest(self) -> bool:
        """Switch to guest mode with sample data.

        Refused once this controller has seen a signed-in user; guest mode
        after a logout needs a fresh app load.
        """
        if self._was_authenticated or self.state.user is not None:
            logger.warning("guest_mode_refused", reason="session_already_used")
            return False
        self._enter_guest()
        return True

    def _enter_guest(self) -> None:
        self.state.is_guest = True
        self.state.user = None
        self.state.strategies = self._sample_loader()
        self.state.view = DASHBOARD
        logger.info("guest_mode_started", strategies=len(self.state.strategies))

    # --- Auth ---

    def begin_login(self, redirect_to: str) -> str | None:
        """Start OAuth. Returns the provider URL, or None with a notice on failure."""
        if self.session is None:
            self.state.notice = LOGIN_ERROR
            return None
        self.state.logging_in = True
        try:
            return self.session.begin_oauth_login(redirect_to)
        except SessionError:
            self.state.logging_in = False
            self.state.notice = LOGIN_ERROR
            return None

    def complete_login(self, auth_code: str) -> Identity | None:
        """Finish OAuth after the provider redirects back with `auth_code`."""
        if self.session is None:
            return None
        self.state.logging_in = True
        try:
            identity = self.session.complete_oauth_login(auth_code)
        except SessionError:
            self.state.notice = LOGIN_ERROR
            return None
        finally:
            self.state.logging_in = False
        if identity is not None and not self._is_current_user(identity):
            self._sign_in(identity)
        return identity

    def handle_auth_event(self, event: str) -> None:
        """React to session provider transitions."""
        if event == SIGNED_IN:
            try:
                identity = self.session.current_identity() if self.session else None
            except SessionError:
                return
            if identity is not None and not self._is_current_user(identity):
                self._sign_in(identity)
        elif event == SIGNED_OUT:
            self._clear_session()

    def logout(self) -> None:
        if self.session is not None and self.state.user is not None:
            try:
                self.session.end_session()
            except SessionError:
                self.state.notice = LOGOUT_ERROR
        if self.state.user is not None:
            self._clear_session()

    def _is_current_user(self, identity: Identity) -> bool:
        return self.state.user is not None and self.state.user.id == identity.id

    def _sign_in(self, identity: Identity) -> None:
        self.state.user = identity
        self.state.is_guest = False
        self._was_authenticated = True
        self._restore_preferences(identity)
        self.state.strategies = self._load_tree()
        self.state.view = DASHBOARD
        logger.info("signed_in", user_id=identity.id, strategies=len(self.state.strategies))

    def _load_tree(self) -> list[Strategy]:
        try:
            return self.store.fetch_all()
        except StoreError as e:
            logger.error("data_load_failed", error=str(e))
            return []

    def _clear_session(self) -> None:
        user_id = self.state.user.id if self.state.user else None
        self.state.user = None
        self.state.strategies = []
        self.state.view = DASHBOARD
        self.state.analysis = None
        self.state.analysis_month_id = None
        logger.info("signed_out", user_id=user_id)

    # --- Preferences ---

    def toggle_theme(self) -> None:
        prefs = self.state.preferences
        prefs.theme = "light" if prefs.theme == "dark" else "dark"
        self._save_preferences()

    def toggle_language(self) -> None:
        prefs = self.state.preferences
        prefs.language = "fa" if prefs.language == "en" else "en"
        self._save_preferences()

    def _preferences_path(self, user: Identity | None) -> Path | None:
        if self.preferences_dir is None or user is None:
            return None
        return self.preferences_dir / f"{Path(user.id).name}.yaml"

    def _restore_preferences(self, identity: Identity) -> None:
        """Adopt the user's saved preferences, or save this session's as theirs."""
        path = self._preferences_path(identity)
        if path is None:
            return
        if path.exists():
            prefs = load_preferences(path)
            prefs.has_onboarded = True
            self.state.preferences = prefs
        else:
            self.state.preferences.has_onboarded = True
            self._save_preferences()

    def _save_preferences(self) -> None:
        path = self._preferences_path(self.state.user)
        if path is None:
            return
        try:
            save_preferences(self.state.preferences, path)
        except OSError as e:
            logger.warning("preferences_save_failed", path=str(path), error=str(e))

    # --- Lookup ---

    def find_strategy(self, strategy_id: str) -> Strategy | None:
        return next((s for s in self.state.strategies if s.id == strategy_id), None)

    def find_month(self, strategy_id: str, month_id: str) -> Month | None:
        strategy = self.find_strategy(strategy_id)
        return strategy.get_month(month_id) if strategy else None

    def find_trade(self, strategy_id: str, month_id: str, trade_id: str) -> Trade | None:
        month = self.find_month(strategy_id, month_id)
        return month.get_trade(trade_id) if month else None

    def navigate(self, view: View) -> None:
        self.state.view, _, _ = resolve(view, self.state.strategies)

    def pop_notice(self) -> str | None:
        notice, self.state.notice = self.state.notice, None
        return notice

    # --- Mutation plumbing ---

    def _can_persist(self) -> bool:
        return self.store is not None and self.state.user is not None

    def _remote(self, op: str, fn: Callable, *args):
        """Run a store call. Returns (ok, result); failures leave a notice."""
        try:
            return True, fn(*args)
        except StoreError as e:
            logger.error("store_call_failed", op=op, error=str(e))
            self.state.notice = SAVE_ERROR
            return False, None

    def _local_id(self) -> str:
        stamp = time.time_ns() // 1_000_000
        if stamp <= self._last_local_id:
            stamp = self._last_local_id + 1
        self._last_local_id = stamp
        return str(stamp)

    def _after_removal(self) -> None:
        self.state.view, _, _ = resolve(self.state.view, self.state.strategies)
        month_id = self.state.analysis_month_id
        if month_id and not any(s.get_month(month_id) for s in self.state.strategies):
            self.state.analysis = None
            self.state.analysis_month_id = None

    # --- Strategies ---

    def add_strategy(self, name: str) -> Strategy | None:
        name = name.strip()
        if not name:
            return None
        if self.state.is_guest:
            strategy = Strategy(id=self._local_id(), name=name)
        elif self._can_persist():
            ok, strategy = self._remote("create_strategy", self.store.create_strategy, self.state.user.id, name)
            if not ok:
                return None
        else:
            return None
        self.state.strategies.append(strategy)
        return strategy

    def delete_strategy(self, strategy_id: str) -> bool:
        """Remove a strategy with all of its months and trades."""
        if self.find_strategy(strategy_id) is None:
            return False
        if not self.state.is_guest:
            if not self._can_persist():
                return False
            ok, _ = self._remote("delete_strategy", self.store.delete_strategy, strategy_id)
            if not ok:
                return False
        self.state.strategies = [s for s in self.state.strategies if s.id != strategy_id]
        self._after_removal()
        return True

    def update_strategy_note(self, strategy_id: str, note: str) -> bool:
        strategy = self.find_strategy(strategy_id)
        if strategy is None:
            return False
        if not self.state.is_guest:
            if not self._can_persist():
                return False
            ok, _ = self._remote("update_strategy_note", self.store.update_strategy_note, strategy_id, note)
            if not ok:
                return False
        strategy.note = note
        return True

    # --- Months ---

    def add_month(self, strategy_id: str, name: str) -> Month | None:
        strategy = self.find_strategy(strategy_id)
        name = name.strip()
        if strategy is None or not name:
            return None
        if self.state.is_guest:
            month = Month(id=self._local_id(), name=name)
        elif self._can_persist():
            ok, month = self._remote("create_month", self.store.create_month, strategy_id, name)
            if not ok:
                return None
        else:
            return None
        strategy.months.append(month)
        return month

    def delete_month(self, strategy_id: str, month_id: str) -> bool:
        """Remove a month with all of its trades."""
        strategy = self.find_strategy(strategy_id)
        if strategy is None or strategy.get_month(month_id) is None:
            return False
        if not self.state.is_guest:
            if not self._can_persist():
                return False
            ok, _ = self._remote("delete_month", self.store.delete_month, month_id)
            if not ok:
                return False
        strategy.months = [m for m in strategy.months if m.id != month_id]
        self._after_removal()
        return True

    def update_month_note(self, strategy_id: str, month_id: str, note: str) -> bool:
        month = self.find_month(strategy_id, month_id)
        if month is None:
            return False
        if not self.state.is_guest:
            if not self._can_persist():
                return False
            ok, _ = self._remote("update_month_note", self.store.update_month_note, month_id, note)
            if not ok:
                return False
        month.note = note
        return True

    # --- Trades ---

    def add_trade(self, strategy_id: str, month_id: str) -> Trade | None:
        """Append a trade with default values."""
        month = self.find_month(strategy_id, month_id)
        if month is None:
            return None
        fields = new_trade_fields(month)
        if self.state.is_guest:
            trade = Trade(id=self._local_id(), **fields)
        elif self._can_persist():
            ok, trade = self._remote("create_trade", self.store.create_trade, month_id, fields)
            if not ok:
                return None
        else:
            return None
        month.trades.append(trade)
        return trade

    def update_trade(
        self,
        strategy_id: str,
        month_id: str,
        trade_id: str,
        update: TradeUpdate,
    ) -> Trade | None:
        """Apply one typed edit, deriving P/L when result or RR changes."""
        month = self.find_month(strategy_id, month_id)
        trade = month.get_trade(trade_id) if month else None
        if trade is None:
            return None
        updated, changes = apply_update(trade, update)
        if not self.state.is_guest:
            if not self._can_persist():
                return None
            ok, _ = self._remote("update_trade", self.store.update_trade, trade_id, changes)
            if not ok:
                return None
        month.trades = [updated if t.id == trade_id else t for t in month.trades]
        return updated

    def delete_trade(self, strategy_id: str, month_id: str, trade_id: str) -> bool:
        month = self.find_month(strategy_id, month_id)
        if month is None or month.get_trade(trade_id) is None:
            return False
        if not self.state.is_guest:
            if not self._can_persist():
                return False
            ok, _ = self._remote("delete_trade", self.store.delete_trade, trade_id)
            if not ok:
                return False
        month.trades = [t for t in month.trades if t.id != trade_id]
        return True

    # --- Stats & analysis ---

    def month_stats(self, strategy_id: str, month_id: str) -> MonthStats:
        month = self.find_month(strategy_id, month_id)
        if month is None:
            return compute_stats([])
        return compute_stats(month.trades)

    def analyze_month(self, strategy_id: str, month_id: str) -> str | None:
        """Run the AI coach on a month, replacing any previous analysis."""
        month = self.find_month(strategy_id, month_id)
        if month is None:
            return None
        stats = compute_stats(month.trades)
        text = None
        if self.analyst is not None:
            try:
                text = self.analyst.analyze(
                    month,
                    stats.win_rate,
                    stats.net_pnl,
                    language=self.state.preferences.language,
                )
            except Exception as e:
                logger.error("month_analysis_failed", month_id=month_id, error=str(e))
        self.state.analysis = text or AI_ERROR
        self.state.analysis_month_id = month_id
        return self.state.analysis
