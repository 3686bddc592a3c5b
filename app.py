import io
import logging
import time
from datetime import date

from flask import Blueprint, Flask, g, jsonify, request, send_file
from flask_wtf import CSRFProtect
from flask_wtf.csrf import generate_csrf
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

import database
import expense_store
from auth_helpers import login_required, login_user, logout_user, signup_user
from config import get_settings
from database import get_db
from date_helpers import month_range, normalize_date
from errors import ExpenseError, Internal
from models import Category, Expense, User
from reports import expenses_to_csv, group_by_category, total_money

logger = logging.getLogger(__name__)

# CSRF protection for every mutating request; clients send the token as X-CSRFToken
csrf = CSRFProtect()

api = Blueprint("api", __name__, url_prefix="/api")


def respond(data=None, message="", status=200):
    return jsonify({"success": True, "message": message, "data": data}), status


def failure(message, status):
    return jsonify({"success": False, "message": message, "data": None}), status


def json_body():
    return request.get_json(silent=True) or {}


# =====================================================
# AUTH
# =====================================================

@api.route("/auth/csrf", methods=["GET"])
def auth_csrf():
    return respond({"csrf_token": generate_csrf()})


@api.route("/auth/signup", methods=["POST"])
def auth_signup():
    data = json_body()
    result = signup_user(get_db(), data.get("username"), data.get("password"))
    if not result["success"]:
        return failure(result["error"], 400)
    return respond(result["user"].to_dict(), result["message"], 201)


@api.route("/auth/login", methods=["POST"])
def auth_login():
    data = json_body()
    result = login_user(get_db(), data.get("username"), data.get("password"))
    if not result["success"]:
        return failure(result["error"], 401)
    return respond(result["user"].to_dict(), result["message"])


@api.route("/auth/logout", methods=["POST"])
def auth_logout():
    logout_user()
    return respond(message="Logged out successfully")


@api.route("/auth/me", methods=["GET"])
@login_required
def auth_me():
    return respond(g.user.to_dict())


# =====================================================
# CATEGORIES
# =====================================================

@api.route("/categories", methods=["GET"])
@login_required
def get_categories():
    categories = expense_store.list_categories(get_db(), g.user.id)
    return respond([category.to_dict() for category in categories])


@api.route("/categories/create", methods=["POST"])
@login_required
def create_category():
    category = expense_store.create_category(get_db(), g.user.id, json_body().get("name"))
    return respond(category.to_dict(), "Category created")


@api.route("/categories/delete", methods=["DELETE"])
@login_required
def delete_category():
    category = expense_store.delete_category(get_db(), g.user.id, request.args.get("category_id"))
    return respond(category.to_dict(), "Category deleted")


# =====================================================
# EXPENSES
# =====================================================

@api.route("/expenses", methods=["GET"])
@login_required
def get_all_expenses():
    expenses = expense_store.list_expenses(get_db(), g.user.id)
    return respond([expense.to_dict() for expense in expenses])


@api.route("/expenses/single", methods=["GET"])
@login_required
def get_single_expense():
    expense = expense_store.get_expense(get_db(), g.user.id, request.args.get("expense_id"))
    return respond(expense.to_dict() if expense else None)


@api.route("/expenses/create", methods=["POST"])
@login_required
def create_expense():
    expense = expense_store.create_expense(get_db(), g.user.id, json_body())
    return respond(expense.to_dict(), "Expense added")


@api.route("/expenses/update", methods=["PUT"])
@login_required
def update_expense():
    expense = expense_store.update_expense(
        get_db(), g.user.id, request.args.get("expense_id"), json_body()
    )
    return respond(expense.to_dict(), "Expense updated")


@api.route("/expenses/delete", methods=["DELETE"])
@login_required
def delete_expense():
    deleted = expense_store.delete_expense(get_db(), g.user.id, request.args.get("expense_id"))
    return respond(deleted, "Expense deleted")


@api.route("/expenses/daily", methods=["GET"])
@login_required
def report_daily_expenses():
    day = normalize_date(request.args.get("day"), default=date.today())
    daily_expenses = [e.to_dict() for e in expense_store.expenses_on_day(get_db(), g.user.id, day)]
    return respond({
        "daily_expenses": daily_expenses,
        "total_money": total_money(daily_expenses),
    })


@api.route("/expenses/monthly", methods=["GET"])
@login_required
def report_monthly_expenses():
    """Month total plus one merged record per category"""
    from_date, to_date = month_range(request.args.get("date"), default=date.today())
    expenses = [
        e.to_dict() for e in expense_store.expenses_between(get_db(), g.user.id, from_date, to_date)
    ]
    return respond({
        "monthly_expenses": group_by_category(expenses),
        "total_money": total_money(expenses),
    })


@api.route("/expenses/monthly/detail", methods=["GET"])
@login_required
def get_expenses_in_month_by_category():
    from_date, to_date = month_range(request.args.get("date"), default=date.today())
    expenses = expense_store.expenses_between_for_category(
        get_db(), g.user.id, from_date, to_date, request.args.get("category_id")
    )
    return respond([expense.to_dict() for expense in expenses])


@api.route("/expenses/monthly/export", methods=["GET"])
@login_required
def export_monthly_expenses():
    from_date, to_date = month_range(request.args.get("date"), default=date.today())
    expenses = [
        e.to_dict() for e in expense_store.expenses_between(get_db(), g.user.id, from_date, to_date)
    ]
    csv_bytes = expenses_to_csv(expenses).encode("utf-8")
    return send_file(
        io.BytesIO(csv_bytes),
        mimetype="text/csv",
        as_attachment=True,
        download_name=f"expenses-{from_date:%Y-%m}.csv",
    )


# =====================================================
# HEALTH
# =====================================================

def ping():
    """Ultra-fast health check for keep-alive - no DB queries"""
    return jsonify({"status": "ok", "timestamp": time.time()}), 200


def status():
    """Status check with DB row counts - no login required"""
    start_time = time.time()
    db = get_db()
    counts = {
        "users": db.execute(select(func.count()).select_from(User)).scalar_one(),
        "categories": db.execute(select(func.count()).select_from(Category)).scalar_one(),
        "expenses": db.execute(select(func.count()).select_from(Expense)).scalar_one(),
    }
    return respond({
        "database": db.get_bind().dialect.name,
        "counts": counts,
        "query_time": round(time.time() - start_time, 4),
    })


# =====================================================
# ERRORS
# =====================================================

def handle_expense_error(error):
    logger.info("%s %s failed: %s", request.method, request.path, error.message)
    return failure(error.message, error.status_code)


def handle_http_error(error):
    logger.info("%s %s failed: %s", request.method, request.path, error.description)
    return failure(error.description, error.code)


def handle_database_error(error):
    logger.exception("Database error on %s %s", request.method, request.path)
    if "db" in g:
        g.db.rollback()
    return handle_expense_error(Internal())


def create_app(overrides=None):
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=settings.secret_key,
        DATABASE_URL=settings.database_url,
        CREATE_TABLES=settings.create_tables,
        SESSION_COOKIE_SECURE=settings.session_cookie_secure,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
    )
    if overrides:
        app.config.update(overrides)

    database.init_app(app)
    csrf.init_app(app)

    app.register_blueprint(api)
    app.add_url_rule("/ping", "ping", ping)
    app.add_url_rule("/status", "status", status)

    app.register_error_handler(ExpenseError, handle_expense_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(SQLAlchemyError, handle_database_error)

    return app


if __name__ == "__main__":
    settings = get_settings()
    app = create_app()
    logger.info("Starting server on http://%s:%s", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, debug=True)
