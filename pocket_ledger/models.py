# pocket_ledger/models.py
# Wire shapes shared by the API client, the state shell and the reports.
# Rows travel as plain dicts; these describe the camelCase keys.
from typing import Optional, TypedDict


class SessionTokens(TypedDict):
    access_token: str
    refresh_token: str


class User(TypedDict, total=False):
    id: str
    email: str
    name: str


class AuthResponse(TypedDict):
    user: User
    session: Optional[SessionTokens]


class Profile(TypedDict, total=False):
    id: str
    name: str
    avatar: str
    membership: str
    language: str


class Account(TypedDict, total=False):
    id: str
    name: str
    nameEn: str
    type: str
    balance: float
    icon: str
    color: str
    description: str
    status: str
    lastChange: float


class Transaction(TypedDict, total=False):
    id: str
    type: str
    amount: float
    category: str
    categoryIcon: str
    categoryColor: str
    date: str
    time: str
    account: str
    accountId: Optional[str]
    note: str


class CategorySlice(TypedDict):
    label: str
    amount: float
    color: str
    percent: int
    isHidden: bool


class TrendPoint(TypedDict):
    label: str
    month: int
    amount: float
