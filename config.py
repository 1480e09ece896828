"""Central configuration for itinerary summary layout and rendering."""

# Page geometry (logical pixels).
PAGE_WIDTH = 1080
PADDING_TOP = 96
PADDING_BOTTOM = 96
LINE_HEIGHT = 44
BLANK_SPACING = int(LINE_HEIGHT * 0.7 + 0.5)
INNER_PADDING_X = 120
CARD_INSET = 40
BEFORE_STATS_SPACING = 8
AFTER_STATS_SPACING = 12

# Month chart.
CHART_HEIGHT = 240
CHART_TOP_MARGIN = 16
CHART_LABEL_AREA = 80
CHART_BOTTOM_MARGIN = 32
CHART_BAR_GAP = 24

# Nested pavilion rows are indented and split into two columns.
EVENT_ROW_INDENT = 36
EVENT_ROW_GAP = 24
LEFTOVER_ROW_INDENT = 16

# A single drawing surface may not exceed this many pixels (4096 x 4096).
MAX_CANVAS_AREA = 16_777_216

MONTH_RANGE = (4, 5, 6, 7, 8, 9, 10)
HOUR_BUCKETS = ("09", "10", "11", "12", "17")

# Gate/hour table: one label column, then east / west / total.
TABLE_LABEL_COLUMNS = 1
TABLE_DATA_COLUMNS = 3

# Font sizes (px) per text role.
FONT_SIZES = {
    "title": 44,
    "stats": 32,
    "heading": 34,
    "sub_heading": 32,
    "body": 28,
    "event": 26,
    "chart_value": 26,
    "chart_label": 28,
    "table": 26,
    "footer": 22,
}
MIN_FONT_SIZE = 10

FONT_CANDIDATES = (
    "NotoSansCJK-Regular.ttc",
    "NotoSansJP-Regular.ttf",
    "DejaVuSans.ttf",
    "Arial.ttf",
    "Helvetica.ttc",
)
BOLD_FONT_CANDIDATES = (
    "NotoSansCJK-Bold.ttc",
    "NotoSansJP-Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "Arial Bold.ttf",
)

DEFAULT_OUTPUT_DIR = "docs"
EXPORT_FILENAME_PREFIX = "expo-visit-summary"
SHARE_URL = "https://www.nakayuki.net/expo-history-viewer/"

SEPARATOR = " | "

GATE_LABELS = {
    1: "East Gate",
    2: "West Gate",
}

GATE_COLUMN_LABELS = {
    1: "East",
    2: "West",
}

USE_STATE_LABELS = {
    0: "Unused",
    1: "Used",
    2: "Cancelled",
    3: "Cancel pending",
    4: "Change pending",
    9: "Other",
}

REGISTERED_CHANNEL_LABELS = {
    0: "Same-day terminal",
    1: "Super early lottery",
    2: "Two-month lottery",
    3: "Seven-day lottery",
    4: "Three-day first-come",
    5: "Same-day booking",
}

WEEKDAY_SHORT_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

STATIC_LABELS = {
    "title": "Expo 2025 Visit Summary",
    "stats_template": "Entrances {entrances}{sep}Pavilion reservations {events}",
    "ticket_heading": "Tickets",
    "ticket_line_template": "{label}. {name}{sep}Entrances:{entrances}{sep}Pavilions:{events}",
    "schedule_heading": "Visit Schedule",
    "leftover_heading": "Other Pavilion Reservations",
    "month_heading": "Visits per Month",
    "month_label_template": "{month:02d}",
    "table_heading": "Entrances by Gate and Hour",
    "table_hour_label": "Hour",
    "table_total_column": "Total",
    "table_total_row": "Total",
    "footer": "Made with the unofficial Expo visit history viewer",
    "not_set": "Not set",
    "date_not_set": "No date",
    "entered": "Entered",
    "unknown_ticket": "Unknown ticket",
    "unnamed": "Unnamed",
    "unknown_state": "Unknown state",
    "unknown_channel": "Unknown",
    "share_title": "Expo 2025 visit history",
    "share_template": "Expo 2025 visit history\nEntrances {entrances}{sep}Pavilion reservations {events}\n{url}",
}

PARSE_MESSAGES = {
    "empty": "The input is empty. Paste or load the ticket list JSON.",
    "unauthorized": (
        "You are not logged in to My Ticket. Log in and fetch the ticket list JSON again."
    ),
    "invalid": "Could not parse the ticket list. Check the file format.",
    "missing_list": "No 'list' array was found. Make sure this is the ticket list API response.",
}
