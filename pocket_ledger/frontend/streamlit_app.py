# frontend/streamlit_app.py
from datetime import date

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from pocket_ledger.constants import ACCOUNT_ICONS, CATEGORIES, find_category_id, resolve_category, t
from pocket_ledger.frontend import stats
from pocket_ledger.frontend.api_client import ApiClient, ApiError, Session, TokenStore
from pocket_ledger.frontend.state import LOGGED_OUT, AppState

# ---------------- Page config ----------------
st.set_page_config(page_title="Pocket Ledger", layout="centered", page_icon="💰")


# ---------------- Session State Management ----------------
def init_session_state():
    if "app" not in st.session_state:
        session = Session.from_store(TokenStore())
        app = AppState(ApiClient(session=session))
        app.restore()
        st.session_state.app = app
    if "hidden_categories" not in st.session_state:
        st.session_state.hidden_categories = []
    if "stats_year" not in st.session_state:
        st.session_state.stats_year = date.today().year
        st.session_state.stats_month = date.today().month


def money(amount):
    return stats.format_amount(amount, st.session_state.app.is_amount_visible)


# ---------------- Login ----------------
def render_login():
    app = st.session_state.app
    lang = app.language
    st.title("💰 Pocket Ledger")
    mode = st.radio("Action", [t("login", lang), t("register", lang)], horizontal=True)
    email = st.text_input("📧 Email")
    password = st.text_input("🔒 Password", type="password")
    name = st.text_input("Name") if mode == t("register", lang) else None

    if st.button("Submit", use_container_width=True):
        if not email or not password:
            st.warning("请输入邮箱和密码 / Email and password required")
            return
        try:
            if mode == t("register", lang):
                app.register(email, password, name)
            else:
                app.login(email, password)
        except ApiError as e:
            st.error(f"❌ {e.message}")
            return
        st.rerun()


# ---------------- Dashboard ----------------
def render_transaction_rows(transactions, prefix):
    lang = st.session_state.app.language
    for tx in transactions:
        sign = "+" if tx["type"] == "income" else "-"
        cols = st.columns([4, 2, 1])
        cols[0].markdown(f"**{tx['category']}**  \n{tx.get('note') or tx.get('time')} • {tx.get('account', '')}")
        cols[1].markdown(f"{sign}{money(tx['amount'])}")
        if cols[2].button("✏️", key=f"{prefix}_edit_{tx['id']}"):
            st.session_state.editing_tx = tx
            st.rerun()
    if not transactions:
        st.info(t("noData", lang))


def render_dashboard():
    app = st.session_state.app
    lang = app.language
    summary = stats.dashboard_summary(app.accounts, app.transactions)

    st.subheader(f"{t('welcomeBack', lang)}, {app.user['name']}")
    st.metric(t("totalBalance", lang), money(summary["totalBalance"]))

    st.caption(t("budgetStatus", lang))
    st.progress(int(summary["budgetBar"]), text=f"{money(summary['totalExpense'])} / ¥{summary['budget']:,} ({summary['budgetPercent']}%)")

    col1, col2 = st.columns(2)
    col1.metric(t("income", lang), money(summary["totalIncome"]))
    col2.metric(t("expense", lang), money(summary["totalExpense"]))

    st.subheader(t("recentTransactions", lang))
    render_transaction_rows(app.transactions[:5], "dash")


# ---------------- List ----------------
def period_picker(prefix):
    lang = st.session_state.app.language
    view = st.radio(prefix, [t("month", lang), t("year", lang)], horizontal=True,
                    key=f"{prefix}_view", label_visibility="collapsed")
    col1, col2 = st.columns(2)
    year = col1.number_input(t("year", lang), min_value=2000, max_value=2100,
                             value=st.session_state.stats_year, key=f"{prefix}_year")
    month = None
    if view == t("month", lang):
        month = col2.selectbox(t("month", lang), list(range(1, 13)),
                               index=st.session_state.stats_month - 1, key=f"{prefix}_month",
                               format_func=lambda m: f"{m:02d}")
    return int(year), month


def render_list():
    app = st.session_state.app
    lang = app.language
    year, month = period_picker("list")
    rows = stats.filter_period(app.transactions, year, month)
    summary = stats.period_summary(app.transactions, year, month)

    col1, col2, col3 = st.columns(3)
    col1.metric(t("income", lang), money(summary["income"]))
    col2.metric(t("expense", lang), money(summary["expense"]))
    col3.metric(t("balance", lang), money(summary["balance"]))

    for day, txs in stats.group_by_date(rows):
        st.markdown(f"##### {day}")
        render_transaction_rows(txs, f"list_{day}")
    if not rows:
        st.info(t("noData", lang))


# ---------------- Stats ----------------
def render_stats():
    app = st.session_state.app
    lang = app.language
    year, month = period_picker("stats")
    kind = st.radio("type", ["expense", "income"], horizontal=True, key="stats_kind",
                    format_func=lambda k: t(k, lang), label_visibility="collapsed")

    hidden = st.session_state.hidden_categories
    breakdown = stats.category_breakdown(app.transactions, kind, year, month, hidden)
    total = stats.period_total(app.transactions, kind, year, month)
    visible = [s for s in breakdown if not s["isHidden"]]
    shown_total = stats.visible_total(breakdown)

    st.subheader(t("spendingBreakdown", lang))
    st.caption(f"¥{total:,.2f} • {t('avgDay', lang)} ¥{stats.daily_average(shown_total):.1f}")
    if visible:
        fig = px.pie(
            pd.DataFrame(visible), names="label", values="amount", hole=0.6,
            color="label", color_discrete_map={s["label"]: s["color"] for s in visible},
        )
        st.plotly_chart(fig, use_container_width=True)

    for s in breakdown:
        label = f"{'~~' if s['isHidden'] else ''}{s['label']}{'~~' if s['isHidden'] else ''} · {s['percent']}% • ¥{s['amount']:,.2f}"
        if st.button(label, key=f"toggle_{s['label']}"):
            st.session_state.hidden_categories = stats.toggle_category(hidden, s["label"])
            st.rerun()
    if not breakdown:
        st.info(t("noData", lang))

    st.subheader(t("trend", lang))
    trend = stats.monthly_trend(app.transactions, kind, year)
    selected = month or date.today().month
    change = stats.month_over_month(app.transactions, kind, year, selected)
    arrow = "📈" if change >= 0 else "📉"
    st.caption(f"{arrow} {'+' if change >= 0 else ''}{change:.1f}%")
    fig = go.Figure(go.Bar(
        x=[p["label"] for p in trend],
        y=[p["amount"] for p in trend],
        marker_color=["#137fec" if p["month"] == selected else "#cbd5e1" for p in trend],
    ))
    st.plotly_chart(fig, use_container_width=True)


# ---------------- Assets ----------------
def render_assets():
    app = st.session_state.app
    lang = app.language
    summary = stats.asset_summary(app.accounts)

    if st.button("👁️", key="toggle_visibility"):
        app.toggle_amount_visibility()
        st.rerun()
    st.metric(t("netWorth", lang), money(summary["netWorth"]))
    col1, col2 = st.columns(2)
    col1.metric(t("totalAssets", lang), money(summary["assets"]))
    col2.metric(t("totalLiabilities", lang), money(summary["liabilities"]))

    for acc in app.accounts:
        with st.expander(f"{acc['name'] if lang == 'zh' else acc['nameEn']} · {money(acc['balance'])}"):
            render_account_form(acc)

    with st.expander(f"➕ {t('addAccount', lang)}"):
        render_account_form(None)


def render_account_form(account):
    app = st.session_state.app
    lang = app.language
    key = account["id"] if account else "new"
    with st.form(f"account_{key}"):
        name = st.text_input("Name", value=account["name"] if account else "")
        balance = st.number_input("Balance", value=float(account["balance"]) if account else 0.0)
        icons = ACCOUNT_ICONS
        current_icon = account["icon"] if account and account["icon"] in icons else "account_balance_wallet"
        icon = st.selectbox("Icon", icons, index=icons.index(current_icon))
        color = st.color_picker("Color", value=account["color"] if account else "#137fec")
        description = st.text_input("Description", value=account.get("description", "") if account else "")
        saved = st.form_submit_button(t("save", lang))
        deleted = st.form_submit_button(t("delete", lang)) if account else False

    if saved:
        payload = {
            "name": name,
            "nameEn": name,
            "type": account["type"] if account else "Custom",
            "balance": balance,
            "icon": icon,
            "color": color,
            "description": description,
        }
        if account:
            app.update_account(dict(account, **payload))
        else:
            app.add_account(payload)
        st.rerun()
    if deleted:
        app.delete_account(account["id"])
        st.rerun()


# ---------------- Add / Edit transaction ----------------
def form_key(name, editing):
    """Widget key tied to the row being edited so defaults reset per row."""
    return f"{name}_{editing['id'] if editing else 'new'}"


def render_transaction_form():
    app = st.session_state.app
    lang = app.language
    editing = st.session_state.get("editing_tx")
    st.subheader(("编辑账单" if lang == "zh" else "Edit Transaction") if editing else t("addTransaction", lang))

    with st.form("transaction_form", clear_on_submit=not editing):
        kind = st.radio("type", ["expense", "income"], horizontal=True, key=form_key("tx_kind", editing),
                        index=1 if editing and editing["type"] == "income" else 0,
                        format_func=lambda k: t(k, lang))
        amount = st.number_input("Amount", min_value=0.0, step=0.01,
                                 value=float(editing["amount"]) if editing else 0.0)
        cat_ids = [c["id"] for c in CATEGORIES]
        cat_id = find_category_id(editing["category"]) if editing else cat_ids[0]
        category_id = st.selectbox(
            "Category", cat_ids, index=cat_ids.index(cat_id),
            format_func=lambda cid: next(c["name"] if lang == "zh" else c["nameEn"] for c in CATEGORIES if c["id"] == cid),
        )
        custom = st.text_input("Custom category", value=editing["category"] if editing and cat_id == "more" else "")
        day = st.date_input("Date", value=date.fromisoformat(editing["time"]) if editing else date.today())
        labels = [a["name"] if lang == "zh" else a["nameEn"] for a in app.accounts]
        account_label = st.selectbox("Account", labels,
                                     index=labels.index(editing["account"]) if editing and editing["account"] in labels else 0) if labels else ""
        note = st.text_input("Note", value=editing.get("note", "") if editing else "")
        saved = st.form_submit_button(t("save", lang))
        deleted = st.form_submit_button(t("delete", lang)) if editing else False

    if saved:
        label, icon, color = resolve_category(category_id, lang, custom)
        tx = {
            "type": kind,
            "amount": amount,
            "category": label,
            "categoryIcon": icon,
            "categoryColor": color,
            "date": day.isoformat(),
            "account": account_label or "",
            "note": note,
        }
        if editing:
            app.update_transaction(dict(editing, **tx))
            st.session_state.editing_tx = None
        else:
            app.add_transaction(tx)
        st.rerun()
    if deleted:
        app.delete_transaction(editing["id"])
        st.session_state.editing_tx = None
        st.rerun()


# ---------------- Profile ----------------
def render_profile():
    app = st.session_state.app
    lang = app.language
    with st.form("profile_form"):
        name = st.text_input("Name", value=app.user["name"])
        avatar = st.text_input("Avatar URL", value=app.user["avatar"])
        membership = st.text_input("Membership", value=app.user["membership"])
        if st.form_submit_button(t("save", lang)):
            app.update_profile({"name": name, "avatar": avatar, "membership": membership})
            st.rerun()

    if st.button(f"🌐 {t('language', lang)}: {lang}"):
        app.toggle_language()
        st.rerun()
    if st.button(f"🚪 {t('logout', lang)}"):
        app.logout()
        st.rerun()


# ---------------- Main App ----------------
def main():
    init_session_state()
    app = st.session_state.app

    if app.mode == LOGGED_OUT:
        if app.last_error:
            st.warning(app.last_error)
        render_login()
        return

    lang = app.language
    tabs = st.tabs([t("dashboard", lang), t("list", lang), f"➕ {t('addTransaction', lang)}",
                    t("stats", lang), t("assets", lang), t("profile", lang)])
    with tabs[0]:
        render_dashboard()
    with tabs[1]:
        render_list()
    with tabs[2]:
        render_transaction_form()
    with tabs[3]:
        render_stats()
    with tabs[4]:
        render_assets()
    with tabs[5]:
        render_profile()


if __name__ == "__main__":
    main()
