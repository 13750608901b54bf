# backend/validation.py
import math
import re
from datetime import date, datetime

from flask import request

from pocket_ledger.constants import LANGUAGES, TRANSACTION_TYPES

NOT_AUTHENTICATED = "未登录 / Not authenticated"
INVALID_TOKEN = "无效的令牌 / Invalid token"
EMAIL_PASSWORD_REQUIRED = "请输入邮箱和密码 / Email and password required"

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ValidationError(Exception):
    """Bad or missing request fields. Rendered as a 400."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


def get_payload():
    """JSON body of the current request, or an empty dict."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("请求体必须是 JSON 对象 / Request body must be a JSON object")
    return data


def require_fields(data, *fields, message=None):
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise ValidationError(
            message or f"缺少必填字段 / Missing required fields: {', '.join(missing)}"
        )


def parse_amount(value):
    """Non-negative amount from a JSON number or numeric string."""
    if isinstance(value, bool):
        raise ValidationError("金额无效 / Invalid amount")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError("金额无效 / Invalid amount")
    if not math.isfinite(amount):
        raise ValidationError("金额无效 / Invalid amount")
    if amount < 0:
        raise ValidationError("金额不能为负数 / Amount must be a non-negative number")
    return amount


def parse_balance(value):
    if isinstance(value, bool):
        raise ValidationError("余额无效 / Invalid balance")
    try:
        balance = float(value or 0)
    except (TypeError, ValueError):
        raise ValidationError("余额无效 / Invalid balance")
    if not math.isfinite(balance):
        raise ValidationError("余额无效 / Invalid balance")
    return balance


def check_transaction_type(value):
    if value not in TRANSACTION_TYPES:
        raise ValidationError("类型必须为 expense 或 income / Type must be expense or income")
    return value


def check_language(value):
    if value not in LANGUAGES:
        raise ValidationError("语言必须为 zh 或 en / Language must be zh or en")
    return value


def parse_date(value):
    """Accept YYYY-MM-DD or a full ISO timestamp; returns YYYY-MM-DD."""
    if not value:
        return date.today().isoformat()
    s = str(value).strip()
    if 'T' in s:
        s = s.split('T')[0]
    if not DATE_PATTERN.match(s):
        raise ValidationError("日期格式无效 / Invalid date format, expected YYYY-MM-DD")
    try:
        datetime.strptime(s, "%Y-%m-%d")
    except ValueError:
        raise ValidationError("日期格式无效 / Invalid date format, expected YYYY-MM-DD")
    return s
