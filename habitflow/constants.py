DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

MONTH_LABELS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

WINDOW_PAST = "past"
WINDOW_CURRENT = "current"
WINDOW_FUTURE = "future"

WINDOW_NOTICES = {
    WINDOW_PAST: "Past dates are read-only.",
    WINDOW_FUTURE: "Future dates are not yet actionable.",
}

THEME_DARK = "dark"
THEME_LIGHT = "light"
THEMES = (THEME_DARK, THEME_LIGHT)

HABIT_TITLE_MAX_LENGTH = 120

HABITS_PATH = "/habits"
TEMPLATES_PATH = "/templates"
ANALYTICS_PATH = "/analytics"
PROFILE_PATH = "/users/me"
LOGIN_PATH = "/auth/login"
REGISTER_PATH = "/auth/register"
