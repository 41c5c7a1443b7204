"""Script to create initial admin user."""
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import models  # noqa: F401,E402
from app.auth import get_password_hash  # noqa: E402
from app.database import SessionLocal, engine, Base  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402


def create_admin(email: str = "admin@example.com", password: str = "admin123"):
    """Create initial admin user if not exists."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        # Check if admin exists
        admin = db.query(User).filter(User.role == UserRole.ADMIN).first()
        if admin:
            print(f"Admin user already exists: {admin.email}")
            return

        admin_user = User(
            name="System Administrator",
            email=email,
            hashed_password=get_password_hash(password),
            role=UserRole.ADMIN,
            is_active=True
        )
        db.add(admin_user)
        db.commit()
        print("Admin user created successfully!")
        print(f"Email: {email}")
        print(f"Password: {password}")
        print("\nPlease change the password after first login!")

    finally:
        db.close()


if __name__ == "__main__":
    create_admin(*sys.argv[1:3])
