"""UI strings for the two supported languages."""

from __future__ import annotations

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "welcome": "Your trading journal. Log every backtest, see what actually works.",
        "welcome_sub": "Strategies, months, trades. Stats update as you type.",
        "next": "Next",
        "get_started": "Get Started",
        "login_title": "Welcome back",
        "login_sub": "Sign in to sync your journal across devices.",
        "login_google": "Continue with Google",
        "continue_guest": "Continue as guest",
        "guest": "Guest",
        "no_account": "No account connected",
        "settings": "Settings",
        "theme": "Theme",
        "language": "Language",
        "logout": "Log out",
        "sign_in": "Sign in",
        "home": "Home",
        "strategies": "Strategies",
        "add_strategy": "New Strategy",
        "strategy_name": "Strategy name",
        "add_month": "New Month",
        "month": "Month",
        "year": "Year",
        "add_trade": "Add Trade",
        "apply_edits": "Apply edits",
        "delete": "Delete",
        "open": "Open",
        "save": "Save",
        "note": "Notes",
        "save_note": "Save note",
        "months": "Months",
        "trades": "Trades",
        "win_rate": "Win Rate",
        "net_pnl": "Net P/L",
        "total_trades": "Total Trades",
        "equity_curve": "Equity Curve",
        "no_strategies": "No strategies yet. Create your first one.",
        "no_months": "No months yet for this strategy.",
        "no_trades": "No trades logged this month.",
        "ai_coach": "AI Performance Coach",
        "analyze": "Analyze this month",
        "analyzing": "Analyzing...",
        "loading": "Loading your journal...",
    },
    "fa": {
        "welcome": "ژورنال معاملاتی شما. هر بک‌تست را ثبت کنید و ببینید چه چیزی واقعاً کار می‌کند.",
        "welcome_sub": "استراتژی‌ها، ماه‌ها، معاملات. آمار همزمان به‌روز می‌شود.",
        "next": "بعدی",
        "get_started": "شروع کنید",
        "login_title": "خوش آمدید",
        "login_sub": "برای همگام‌سازی ژورنال وارد شوید.",
        "login_google": "ورود با گوگل",
        "continue_guest": "ادامه به عنوان مهمان",
        "guest": "مهمان",
        "no_account": "حسابی متصل نیست",
        "settings": "تنظیمات",
        "theme": "پوسته",
        "language": "زبان",
        "logout": "خروج",
        "sign_in": "ورود",
        "home": "خانه",
        "strategies": "استراتژی‌ها",
        "add_strategy": "استراتژی جدید",
        "strategy_name": "نام استراتژی",
        "add_month": "ماه جدید",
        "month": "ماه",
        "year": "سال",
        "add_trade": "افزودن معامله",
        "apply_edits": "اعمال تغییرات",
        "delete": "حذف",
        "open": "باز کردن",
        "save": "ذخیره",
        "note": "یادداشت",
        "save_note": "ذخیره یادداشت",
        "months": "ماه‌ها",
        "trades": "معاملات",
        "win_rate": "نرخ برد",
        "net_pnl": "سود/زیان خالص",
        "total_trades": "تعداد معاملات",
        "equity_curve": "منحنی سرمایه",
        "no_strategies": "هنوز استراتژی‌ای ندارید. اولین را بسازید.",
        "no_months": "هنوز ماهی برای این استراتژی ثبت نشده.",
        "no_trades": "معامله‌ای در این ماه ثبت نشده.",
        "ai_coach": "مربی هوش مصنوعی",
        "analyze": "تحلیل این ماه",
        "analyzing": "در حال تحلیل...",
        "loading": "در حال بارگذاری ژورنال...",
    },
}


def t(language: str, key: str) -> str:
    """Look up a string, falling back to English and then to the key itself."""
    strings = TRANSLATIONS.get(language, TRANSLATIONS["en"])
    return strings.get(key) or TRANSLATIONS["en"].get(key, key)
