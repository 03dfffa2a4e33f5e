"""
Seed script for default categories.
"""

from app.database import SessionLocal, init_db
from app.models import Category


# name, icon, color, type
DEFAULT_CATEGORIES = [
    ("Salário", "💰", "#00b894", "income"),
    ("Freelance", "💻", "#00cec9", "income"),
    ("Investimentos", "📈", "#0984e3", "income"),
    ("Outras receitas", "💵", "#636e72", "income"),
    ("Alimentação", "🍔", "#e17055", "expense"),
    ("Moradia", "🏠", "#6c5ce7", "expense"),
    ("Transporte", "🚗", "#fdcb6e", "expense"),
    ("Saúde", "💊", "#d63031", "expense"),
    ("Educação", "📚", "#74b9ff", "expense"),
    ("Lazer", "🎮", "#a29bfe", "expense"),
    ("Compras", "🛍️", "#fd79a8", "expense"),
    ("Contas", "🧾", "#e84393", "expense"),
    ("Outras despesas", "📦", "#636e72", "expense"),
]


def seed_categories(db=None) -> int:
    """Insert the default categories unless some already exist. Returns how many were added."""
    owns_session = db is None
    if owns_session:
        db = SessionLocal()

    try:
        existing_count = db.query(Category).filter(Category.is_default == True).count()
        if existing_count > 0:
            print(f"Default categories already seeded ({existing_count} categories exist)")
            return 0

        for name, icon, color, category_type in DEFAULT_CATEGORIES:
            db.add(Category(
                user_id=None,
                name=name,
                icon=icon,
                color=color,
                type=category_type,
                is_default=True
            ))

        db.commit()
        print(f"Successfully seeded {len(DEFAULT_CATEGORIES)} default categories")
        return len(DEFAULT_CATEGORIES)

    except Exception:
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    init_db()
    seed_categories()
