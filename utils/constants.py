APP_NAME = "小账本"
DB_FILE = "ledger.db"
STORAGE_KEY = "bookkeeping_transactions"
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
CURRENCY_SYMBOL = "¥"
TREND_MONTHS = 6

TRANSACTION_TYPES = ["income", "expense"]

TYPE_LABELS = {
    "income":  "收入",
    "expense": "支出",
}

FALLBACK_CATEGORY_IDS = {
    "income":  "other_income",
    "expense": "other_expense",
}

UNKNOWN_CATEGORY_NAME = "未知"
UNKNOWN_CATEGORY_ICON = "❓"

# Monday first, matching date.weekday()
WEEKDAY_NAMES = ["一", "二", "三", "四", "五", "六", "日"]
WEEKDAY_PREFIX = "星期"

CSV_BOM = "\ufeff"
CSV_HEADERS = ["日期", "星期", "类型", "分类", "金额(元)", "备注", "记录时间"]
CSV_WEEKDAY_HEADER = "星期"

DEFAULT_CATEGORIES = [
    # expense
    {"id": "food",          "name": "餐饮", "icon": "🍜", "type": "expense", "color": "#ef4444"},
    {"id": "transport",     "name": "交通", "icon": "🚗", "type": "expense", "color": "#f97316"},
    {"id": "shopping",      "name": "购物", "icon": "🛒", "type": "expense", "color": "#eab308"},
    {"id": "entertainment", "name": "娱乐", "icon": "🎮", "type": "expense", "color": "#84cc16"},
    {"id": "living",        "name": "生活", "icon": "🏠", "type": "expense", "color": "#22c55e"},
    {"id": "medical",       "name": "医疗", "icon": "💊", "type": "expense", "color": "#14b8a6"},
    {"id": "education",     "name": "学习", "icon": "📚", "type": "expense", "color": "#06b6d4"},
    {"id": "social",        "name": "社交", "icon": "🎁", "type": "expense", "color": "#3b82f6"},
    {"id": "clothing",      "name": "服饰", "icon": "👔", "type": "expense", "color": "#8b5cf6"},
    {"id": "digital",       "name": "数码", "icon": "📱", "type": "expense", "color": "#a855f7"},
    {"id": "pet",           "name": "宠物", "icon": "🐱", "type": "expense", "color": "#ec4899"},
    {"id": "other_expense", "name": "其他", "icon": "📦", "type": "expense", "color": "#6b7280"},
    # income
    {"id": "salary",        "name": "工资", "icon": "💰", "type": "income",  "color": "#22c55e"},
    {"id": "bonus",         "name": "奖金", "icon": "🎉", "type": "income",  "color": "#10b981"},
    {"id": "investment",    "name": "理财", "icon": "📈", "type": "income",  "color": "#14b8a6"},
    {"id": "sideline",      "name": "副业", "icon": "💼", "type": "income",  "color": "#06b6d4"},
    {"id": "gift",          "name": "红包", "icon": "🧧", "type": "income",  "color": "#ef4444"},
    {"id": "refund",        "name": "退款", "icon": "💸", "type": "income",  "color": "#f97316"},
    {"id": "other_income",  "name": "其他", "icon": "✨", "type": "income",  "color": "#6b7280"},
]

EXPORT_FORMATS = ["json", "csv", "txt"]
IMPORT_EXTENSIONS = (".json", ".csv")
EXPORT_FILE_PREFIX = "小账本"
