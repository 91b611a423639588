from sqlalchemy.engine import Engine

from careers.models.base import Base


def _import_models() -> None:
    """Import all models so their metadata is registered on Base."""
    import careers.models.unit_group        # noqa: F401
    import careers.models.economic_region   # noqa: F401
    import careers.models.program           # noqa: F401
    import careers.models.outlook           # noqa: F401


def create_all(engine: Engine) -> None:
    """Create all tables for the registered models (SYNC)."""
    _import_models()
    Base.metadata.create_all(bind=engine)


def drop_all(engine: Engine) -> None:
    _import_models()
    Base.metadata.drop_all(bind=engine)
