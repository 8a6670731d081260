from werkzeug.security import generate_password_hash
from configs import db
from db.models.user import User, UserRole

DEFAULT_PASSWORD = "changeme"

USERS = [
    ("admin", "System Admin", UserRole.ADMIN),
    ("procurement1", "Procurement Manager", UserRole.PROCUREMENT_MANAGER),
    ("superintendent1", "Technical Superintendent", UserRole.SUPERINTENDENT),
    ("finance1", "Finance Controller", UserRole.FINANCE_TEAM),
]


def seed_users(password: str = DEFAULT_PASSWORD) -> int:
    """Create one user per role; existing usernames are left alone."""
    created = 0
    for username, full_name, role in USERS:
        if User.query.filter_by(username=username).first():
            continue
        db.session.add(
            User(
                username=username,
                password_hash=generate_password_hash(password),
                full_name=full_name,
                role=role,
                is_active=True,
            )
        )
        created += 1
    db.session.commit()
    return created


if __name__ == "__main__":
    from app import app

    with app.app_context():
        n = seed_users()
        print(f"Seeded {n} user(s)")
