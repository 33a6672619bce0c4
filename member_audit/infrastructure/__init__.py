"""Infrastructure: SQLAlchemy persistence, save interceptor, and lookups."""
