# index.py
from flask import Blueprint
from utils.dates import utcnow
from utils.http import ok

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def home():
    return ok({"service": "maritime-procurement", "time": utcnow().isoformat()})


@main_bp.route("/health")
def health():
    return ok({"status": "ok"})
