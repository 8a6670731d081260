from index import main_bp
from routes.auth import auth_bp
from routes.vendor import vendor_bp
from routes.rfq import rfq_bp
from routes.quote_comparison import comparison_bp
from routes.audit import audit_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(vendor_bp)
    app.register_blueprint(rfq_bp)
    app.register_blueprint(comparison_bp)
    app.register_blueprint(audit_bp)
