from spectapps.db.session import engine, Base


def init_db(bind=None):
    """Initialize database tables"""
    # Import all models to ensure they are registered with SQLAlchemy
    from spectapps.models.video import VideoHistory  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


if __name__ == "__main__":
    init_db()
    print("Database tables created successfully!")
