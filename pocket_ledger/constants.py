# pocket_ledger/constants.py

# Built-in category catalogue. Labels are copied onto each transaction at
# creation time, so editing this list never relabels history.
CATEGORIES = [
    {"id": "food", "name": "餐饮", "nameEn": "Food", "icon": "restaurant", "color": "#fb923c"},
    {"id": "shop", "name": "购物", "nameEn": "Shop", "icon": "shopping_cart", "color": "#60a5fa"},
    {"id": "travel", "name": "交通", "nameEn": "Travel", "icon": "commute", "color": "#4ade80"},
    {"id": "fun", "name": "娱乐", "nameEn": "Fun", "icon": "movie", "color": "#a855f7"},
    {"id": "home", "name": "居住", "nameEn": "Home", "icon": "home", "color": "#2dd4bf"},
    {"id": "health", "name": "医疗", "nameEn": "Health", "icon": "medical_services", "color": "#f87171"},
    {"id": "study", "name": "教育", "nameEn": "Study", "icon": "school", "color": "#facc15"},
    {"id": "more", "name": "更多", "nameEn": "More", "icon": "more_horiz", "color": "#94a3b8"},
]

CUSTOM_CATEGORY_ICON = "stars"
CUSTOM_CATEGORY_COLOR = "#8E8E93"

TRANSACTION_TYPES = ("expense", "income")
LANGUAGES = ("zh", "en")

DEFAULT_LANGUAGE = "zh"
DEFAULT_MEMBERSHIP = "普通会员"

ACCOUNT_DEFAULTS = {
    "type": "Custom",
    "balance": 0,
    "icon": "account_balance_wallet",
    "color": "#137fec",
    "description": "",
    "status": "Active",
}

ACCOUNT_ICONS = [
    "payments", "credit_card", "account_balance_wallet", "chat_bubble",
    "savings", "account_balance", "wallet", "currency_exchange",
]

# Monthly budget shown on the dashboard card
DEFAULT_MONTHLY_BUDGET = 12000

TRANSLATIONS = {
    "dashboard": {"zh": "首页", "en": "Home"},
    "list": {"zh": "明细", "en": "List"},
    "stats": {"zh": "统计", "en": "Stats"},
    "assets": {"zh": "资产", "en": "Assets"},
    "profile": {"zh": "我的", "en": "Me"},
    "income": {"zh": "收入", "en": "Income"},
    "expense": {"zh": "支出", "en": "Expense"},
    "balance": {"zh": "结余", "en": "Balance"},
    "month": {"zh": "月", "en": "Month"},
    "year": {"zh": "年", "en": "Year"},
    "totalBalance": {"zh": "总资产", "en": "Total Balance"},
    "budgetStatus": {"zh": "预算状态", "en": "Budget Status"},
    "recentTransactions": {"zh": "最近交易", "en": "Recent Transactions"},
    "welcomeBack": {"zh": "欢迎回来", "en": "Welcome back"},
    "spendingBreakdown": {"zh": "分类占比", "en": "Breakdown"},
    "trend": {"zh": "趋势", "en": "Trend"},
    "avgDay": {"zh": "日均", "en": "Avg/Day"},
    "netWorth": {"zh": "净资产", "en": "Net Worth"},
    "totalAssets": {"zh": "总资产", "en": "Total Assets"},
    "totalLiabilities": {"zh": "总负债", "en": "Total Liabilities"},
    "addTransaction": {"zh": "记一笔", "en": "Add Transaction"},
    "addAccount": {"zh": "添加账户", "en": "Add Account"},
    "save": {"zh": "保存", "en": "Save"},
    "delete": {"zh": "删除", "en": "Delete"},
    "login": {"zh": "登录", "en": "Login"},
    "register": {"zh": "注册", "en": "Register"},
    "logout": {"zh": "退出登录", "en": "Log out"},
    "language": {"zh": "语言", "en": "Language"},
    "noData": {"zh": "暂无数据", "en": "No data available"},
    "loading": {"zh": "加载中...", "en": "Loading..."},
}


def t(key, language):
    """Look up a UI string, falling back to the key itself."""
    entry = TRANSLATIONS.get(key)
    if not entry:
        return key
    return entry.get(language) or entry.get("en") or key


def resolve_category(category_id, language, custom_name=None):
    """Return (label, icon, color) to store on a new transaction.

    Picking "more" with a typed name creates an ad hoc category; anything
    unknown falls back to the first built-in.
    """
    if category_id == "more" and custom_name and custom_name.strip():
        return custom_name.strip(), CUSTOM_CATEGORY_ICON, CUSTOM_CATEGORY_COLOR
    category = next((c for c in CATEGORIES if c["id"] == category_id), CATEGORIES[0])
    label = category["name"] if language == "zh" else category["nameEn"]
    return label, category["icon"], category["color"]


def find_category_id(label):
    """Map a stored label back to a built-in id ('more' for custom labels)."""
    for c in CATEGORIES:
        if label in (c["name"], c["nameEn"]):
            return c["id"]
    return "more"
